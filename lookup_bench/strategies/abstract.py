"""
Abstract lookup strategy interfaces and run contracts for the Mongo lookup benchmark.

A strategy turns the shared `QuerySpec` into a full aggregation pipeline over
the parent collection (match, sort, skip, limit, then one `$lookup` stage) and
returns the lazy cursor. Timing and materialization belong to the runner.
"""

from __future__ import annotations

import abc
from typing import (
    Any,
    Dict,
    Iterable,
    List,
    Mapping,
    Optional,
    Protocol,
    TypedDict,
    runtime_checkable,
)

from lookup_bench.domain.models import QuerySpec
from lookup_bench.errors import ConfigurationError
from lookup_bench.infrastructure.mongo_store import MongoStore
from lookup_bench.query import build_collation


class LookupRunResult(TypedDict, total=False):
    """
    Per-strategy summary produced by the runner.

    `elapsed_seconds` is truncated to whole seconds for the console report;
    `duration_seconds` keeps perf_counter resolution.
    """

    strategy: str
    output: str
    documents: int
    children: int
    elapsed_seconds: int
    duration_seconds: float
    peak_rss_bytes: Optional[int]
    cpu_percent: Optional[float]


@runtime_checkable
class LookupStrategy(Protocol):
    """
    Common interface all lookup strategies must implement.

    Attributes
    ----------
    name : str
        A short machine-friendly identifier; also the output file suffix.
    description : str
        A human-friendly summary of the approach.
    """

    name: str
    description: str

    def execute(self, store: MongoStore, query: QuerySpec) -> Iterable[Dict[str, Any]]:
        """
        Start the joined aggregation and return its (lazy) result.

        Parameters
        ----------
        store : MongoStore
            Storage handle for this run.
        query : QuerySpec
            Filter, sort and page applied to the parent collection.
        """
        ...


def validate_collection_name(name: str) -> str:
    """
    Reject names MongoDB would refuse or that would silently join nothing.

    Raises
    ------
    ConfigurationError
        If the name is empty, contains `$` or NUL, or targets a system collection.
    """
    if not isinstance(name, str) or not name.strip():
        raise ConfigurationError("Foreign collection name must be a non-empty string")
    if "$" in name or "\x00" in name:
        raise ConfigurationError(f"Invalid collection name {name!r}: '$' and NUL are not allowed")
    if name.startswith("system."):
        raise ConfigurationError(f"Invalid collection name {name!r}: system collections are reserved")
    return name


class AbstractLookupStrategy(abc.ABC):
    """
    Shared plumbing for class-based strategies.

    Subclasses set `name` and `description` and implement `lookup_stage`.
    Collection names are validated each time the pipeline is built, not at
    construction. `execute` also refuses a child collection the store does
    not have, since `$lookup` would join nothing instead of failing.
    """

    name: str
    description: str

    def __init__(
        self, parent_collection: str, child_collection: str, as_field: Optional[str] = None
    ) -> None:
        self.parent_collection = parent_collection
        self.child_collection = child_collection
        self.as_field = as_field or child_collection

    @abc.abstractmethod
    def lookup_stage(self) -> Dict[str, Any]:  # pragma: no cover - interface only
        """Return the single `$lookup` stage appended after paging."""
        raise NotImplementedError

    def pipeline(self, query: QuerySpec) -> List[Mapping[str, Any]]:
        validate_collection_name(self.parent_collection)
        validate_collection_name(self.child_collection)
        return query.stages() + [self.lookup_stage()]

    def execute(self, store: MongoStore, query: QuerySpec) -> Iterable[Dict[str, Any]]:
        pipeline = self.pipeline(query)
        if not store.has_collection(self.child_collection):
            raise ConfigurationError(
                f"Foreign collection {self.child_collection!r} does not exist; seed it first"
            )
        return store.aggregate(
            self.parent_collection, pipeline, collation=build_collation(query.collation_locale)
        )


__all__ = [
    "AbstractLookupStrategy",
    "LookupRunResult",
    "LookupStrategy",
    "validate_collection_name",
]
