"""
Direct lookup: declarative equality join.

Attaches every order whose `customer._id` equals the customer's `_id`, with no
child-side filter, sort or projection (storage-native order, full documents).
"""

from __future__ import annotations

from typing import Any, Dict

from lookup_bench.fixtures import CUSTOMER_REF_FIELD
from lookup_bench.strategies.abstract import AbstractLookupStrategy


class DirectLookupStrategy(AbstractLookupStrategy):
    name: str = "lookup"
    description: str = "$lookup with localField/foreignField (all children, unfiltered)."

    def __init__(
        self,
        parent_collection: str,
        child_collection: str,
        local_field: str = "_id",
        foreign_field: str = CUSTOMER_REF_FIELD,
    ) -> None:
        super().__init__(parent_collection, child_collection)
        self.local_field = local_field
        self.foreign_field = foreign_field

    def lookup_stage(self) -> Dict[str, Any]:
        return {
            "$lookup": {
                "from": self.child_collection,
                "localField": self.local_field,
                "foreignField": self.foreign_field,
                "as": self.as_field,
            }
        }


__all__ = ["DirectLookupStrategy"]
