"""
Pipeline lookup: correlated sub-pipeline join.

Intent:
- Bind the customer's `_id` as `$$parentId` and match orders referencing it.
- Drop Cancelled and OnHold orders on the child side.
- Sort the attached orders by `_id` and keep only `_id` and `status`.

So unlike the direct lookup, the attached children are filtered and
projected; both strategies still return the same customers in the same order.
"""

from __future__ import annotations

from typing import Any, Dict, List, Sequence

from lookup_bench.domain.models import OrderStatus
from lookup_bench.fixtures import CUSTOMER_REF_FIELD
from lookup_bench.strategies.abstract import AbstractLookupStrategy
from lookup_bench.utils.logging import get_logger

log = get_logger(__name__)

EXCLUDED_STATUSES = (OrderStatus.CANCELLED.value, OrderStatus.ON_HOLD.value)
PARENT_VARIABLE = "parentId"


def correlated_match(
    reference_field: str = CUSTOMER_REF_FIELD,
    excluded: Sequence[str] = EXCLUDED_STATUSES,
    literal_match: bool = False,
) -> Dict[str, Any]:
    """
    `$match` stage of the sub-pipeline.

    With `literal_match=True` the stage compares the bare strings
    "Customer_id" and "Status" (not field paths) against the variable and a
    single comma-joined status string. Nothing ever matches, so every
    customer gets an empty child list. Kept only to reproduce that behaviour
    on demand.
    """
    if literal_match:
        reference, status, statuses = "Customer_id", "Status", [",".join(excluded)]
    else:
        reference, status, statuses = f"${reference_field}", "$status", list(excluded)
    return {
        "$match": {
            "$expr": {
                "$and": [
                    {"$eq": [reference, f"$${PARENT_VARIABLE}"]},
                    {"$not": [{"$in": [status, statuses]}]},
                ]
            }
        }
    }


class PipelineLookupStrategy(AbstractLookupStrategy):
    name: str = "lookup_pipeline"
    description: str = "$lookup with let + sub-pipeline (status filter, sort, projection)."

    def __init__(
        self,
        parent_collection: str,
        child_collection: str,
        excluded_statuses: Sequence[str] = EXCLUDED_STATUSES,
        literal_match: bool = False,
    ) -> None:
        super().__init__(parent_collection, child_collection)
        self.excluded_statuses = tuple(excluded_statuses)
        self.literal_match = literal_match
        if literal_match:
            log.warning(
                "Literal sub-match enabled: pipeline lookup will attach no children",
                extra={"strategy": self.name},
            )

    def sub_pipeline(self) -> List[Dict[str, Any]]:
        return [
            correlated_match(excluded=self.excluded_statuses, literal_match=self.literal_match),
            {"$sort": {"_id": 1}},
            {"$project": {"_id": 1, "status": 1}},
        ]

    def lookup_stage(self) -> Dict[str, Any]:
        return {
            "$lookup": {
                "from": self.child_collection,
                "let": {PARENT_VARIABLE: "$_id"},
                "pipeline": self.sub_pipeline(),
                "as": self.as_field,
            }
        }


__all__ = ["EXCLUDED_STATUSES", "PipelineLookupStrategy", "correlated_match"]
