"""
Pytest configuration for the Mongo lookup benchmark.

Provides fixtures for:
- Settings with test-specific overrides
- An in-memory fake store that evaluates exactly the aggregation stages this
  project emits (match, sort with numeric collation, skip, limit, project and
  both `$lookup` forms), for unit tests without a server
- A live MongoDB store for integration tests (skipped when unreachable)
"""

from __future__ import annotations

import copy
import os
from collections import defaultdict
from typing import Any, Dict, Generator, Iterable, Iterator, List, Mapping, Optional

import pytest
from pymongo.collation import Collation
from pymongo.errors import OperationFailure

from lookup_bench.config import Settings
from lookup_bench.errors import StorageConnectionError
from lookup_bench.infrastructure.mongo_store import MongoStore

TEST_DB_NAME = "lookup_bench_test"


def _get(doc: Mapping[str, Any], path: str) -> Any:
    value: Any = doc
    for part in path.split("."):
        if not isinstance(value, Mapping) or part not in value:
            return None
        value = value[part]
    return value


def _eval(expr: Any, doc: Mapping[str, Any], variables: Mapping[str, Any]) -> Any:
    if isinstance(expr, str):
        if expr.startswith("$$"):
            return variables[expr[2:]]
        if expr.startswith("$"):
            return _get(doc, expr[1:])
        return expr
    if isinstance(expr, list):
        return [_eval(item, doc, variables) for item in expr]
    if isinstance(expr, dict) and len(expr) == 1:
        (op, args), = expr.items()
        if op == "$and":
            return all(_eval(arg, doc, variables) for arg in args)
        if op == "$eq":
            left, right = _eval(args, doc, variables)
            return left == right
        if op == "$not":
            return not _eval(args[0], doc, variables)
        if op == "$in":
            needle, haystack = _eval(args, doc, variables)
            return needle in haystack
        raise NotImplementedError(f"FakeStore does not evaluate {op}")
    return expr


def _sort_key(value: Any, numeric: bool) -> tuple:
    if numeric and isinstance(value, str) and value.isdigit():
        return (0, int(value), "")
    return (1, 0, str(value))


class FakeStore:
    """
    Duck-typed stand-in for MongoStore.

    Records every call; `fail_on_insert` makes the n-th insert (1-based) raise
    an OperationFailure. `aggregate` returns a generator so callers must
    drain it to get results.
    """

    def __init__(self, fail_on_insert: Optional[int] = None) -> None:
        self.collections: Dict[str, List[Dict[str, Any]]] = defaultdict(list)
        self.indexes: Dict[str, List[str]] = defaultdict(list)
        self.calls: List[tuple] = []
        self.aggregations: List[tuple] = []
        self.fail_on_insert = fail_on_insert
        self._inserts = 0
        self._created: set = set()
        self.closed = False

    def has_collection(self, name: str) -> bool:
        return name in self._created or bool(self.collections.get(name))

    def delete_all(self, name: str) -> int:
        self.calls.append(("delete_all", name))
        removed = len(self.collections[name])
        self.collections[name] = []
        return removed

    def insert_one(self, name: str, document: Mapping[str, Any]) -> Any:
        self._inserts += 1
        if self.fail_on_insert is not None and self._inserts >= self.fail_on_insert:
            raise OperationFailure("simulated write failure")
        self.calls.append(("insert_one", name))
        self._created.add(name)
        self.collections[name].append(copy.deepcopy(dict(document)))
        return document["_id"]

    def create_index(self, name: str, field: str) -> str:
        self.calls.append(("create_index", name, field))
        self._created.add(name)
        self.indexes[name].append(field)
        return f"{field}_1"

    def count(self, name: str, filter: Optional[Dict[str, Any]] = None) -> int:
        return sum(
            1
            for doc in self.collections[name]
            if all(_get(doc, k) == v for k, v in (filter or {}).items())
        )

    def aggregate(
        self,
        name: str,
        pipeline: Iterable[Mapping[str, Any]],
        collation: Optional[Collation] = None,
    ) -> Iterator[Dict[str, Any]]:
        stages = list(pipeline)
        self.aggregations.append((name, stages, collation))
        numeric = bool(collation is not None and collation.document.get("numericOrdering"))
        docs = [copy.deepcopy(d) for d in self.collections[name]]

        def _cursor() -> Iterator[Dict[str, Any]]:
            yield from self._run(docs, stages, numeric, {})

        return _cursor()

    def _run(
        self,
        docs: List[Dict[str, Any]],
        stages: List[Mapping[str, Any]],
        numeric: bool,
        variables: Mapping[str, Any],
    ) -> List[Dict[str, Any]]:
        for stage in stages:
            (op, spec), = stage.items()
            if op == "$match":
                if "$expr" in spec:
                    docs = [d for d in docs if _eval(spec["$expr"], d, variables)]
                else:
                    docs = [d for d in docs if all(_get(d, k) == v for k, v in spec.items())]
            elif op == "$sort":
                for field, direction in reversed(list(spec.items())):
                    docs.sort(key=lambda d: _sort_key(_get(d, field), numeric), reverse=direction < 0)
            elif op == "$skip":
                docs = docs[spec:]
            elif op == "$limit":
                docs = docs[:spec]
            elif op == "$project":
                keep = [k for k, v in spec.items() if v]
                docs = [{k: d[k] for k in keep if k in d} for d in docs]
            elif op == "$lookup":
                docs = [self._lookup(d, spec, numeric) for d in docs]
            else:
                raise NotImplementedError(f"FakeStore does not run {op}")
        return docs

    def _lookup(self, doc: Dict[str, Any], spec: Mapping[str, Any], numeric: bool) -> Dict[str, Any]:
        if "from" not in spec or not spec["from"]:
            raise OperationFailure("$lookup requires a 'from' collection")
        foreign = [copy.deepcopy(d) for d in self.collections.get(spec["from"], [])]
        if "localField" in spec:
            local = _get(doc, spec["localField"])
            joined = [c for c in foreign if _get(c, spec["foreignField"]) == local]
        else:
            variables = {k: _eval(v, doc, {}) for k, v in spec.get("let", {}).items()}
            joined = self._run(foreign, list(spec["pipeline"]), numeric, variables)
        doc[spec["as"]] = joined
        return doc

    def close(self) -> None:
        self.closed = True

    def __enter__(self) -> "FakeStore":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


@pytest.fixture
def fake_store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def fake_store_factory():
    return FakeStore


@pytest.fixture
def small_settings(tmp_path) -> Settings:
    """Settings for a 10 x 7 run writing into a temp directory."""
    return Settings(
        customer_count=10,
        orders_per_customer=7,
        padding_copies=1,
        output_dir=str(tmp_path),
        pause_on_exit=False,
        log_level="DEBUG",
    )


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """
    Settings fixture for integration tests.

    Can be overridden via environment variables in CI or local testing.
    """
    return Settings(
        mongo_uri=os.getenv("MONGO_URI", "mongodb://localhost:27017"),
        mongo_db=os.getenv("MONGO_DB", TEST_DB_NAME),
        mongo_timeout_ms=2000,
        log_level="DEBUG",
        pause_on_exit=False,
    )


@pytest.fixture(scope="session")
def mongo_store(test_settings: Settings) -> Generator[MongoStore, None, None]:
    """
    Session-scoped live store; skips when MongoDB is not reachable.
    """
    try:
        store = MongoStore.from_settings(test_settings)
    except StorageConnectionError as exc:
        pytest.skip(f"MongoDB not available for integration tests: {exc}")
    try:
        yield store
    finally:
        store.database.client.drop_database(test_settings.mongo_db)
        store.close()
