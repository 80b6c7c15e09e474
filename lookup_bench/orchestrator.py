"""
Orchestrator for seeding, running both lookup strategies under the profiler,
and persisting each joined result set.

Usage (example from CLI):
    from lookup_bench.orchestrator import run_benchmarks

    with MongoStore.from_settings(settings) as store:
        results = run_benchmarks(store, settings, FileSink(settings.output_dir))

Outputs are written through the sink as:
- `<parent>_lookup.json` (direct lookup)
- `<parent>_lookup_pipeline.json` (pipeline lookup)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional

from bson import json_util

from lookup_bench.config import Settings, get_settings
from lookup_bench.domain.models import QuerySpec
from lookup_bench.fixtures import populate
from lookup_bench.infrastructure.mongo_store import MongoStore
from lookup_bench.infrastructure.sink import FileSink
from lookup_bench.query import build_query
from lookup_bench.strategies.abstract import AbstractLookupStrategy, LookupRunResult
from lookup_bench.strategies.direct_lookup import DirectLookupStrategy
from lookup_bench.strategies.pipeline_lookup import PipelineLookupStrategy
from lookup_bench.utils.logging import get_logger
from lookup_bench.utils.profiler import profile_block

log = get_logger(__name__)

JoinThunk = Callable[[], Iterable[Dict[str, Any]]]


@dataclass
class LookupRun:
    """Outcome of one timed strategy execution."""

    label: str
    duration_seconds: float
    documents: List[Dict[str, Any]] = field(repr=False)
    payload: str = field(repr=False)
    peak_rss_bytes: Optional[int] = None
    cpu_percent: Optional[float] = None

    @property
    def elapsed_seconds(self) -> int:
        return int(self.duration_seconds)

    def children(self, as_field: str) -> int:
        return sum(len(doc.get(as_field) or []) for doc in self.documents)


def serialize(documents: List[Dict[str, Any]]) -> str:
    """Relaxed Extended JSON, so ObjectIds and dates stay readable."""
    return json_util.dumps(documents, json_options=json_util.RELAXED_JSON_OPTIONS)


def run_lookup(label: str, thunk: JoinThunk) -> LookupRun:
    """
    Time `thunk` end to end, including full materialization of its result.

    The cursor is drained with `list()` inside the profiled block, so no
    result is streamed after the timer stops. Serialization happens after.
    """
    with profile_block(label, enable_tracemalloc=False) as stats:
        documents = list(thunk())
    return LookupRun(
        label=label,
        duration_seconds=stats.duration_seconds,
        documents=documents,
        payload=serialize(documents),
        peak_rss_bytes=stats.peak_rss_bytes,
        cpu_percent=round(stats.cpu_percent, 1) if stats.cpu_percent is not None else None,
    )


def output_name(parent_collection: str, strategy: AbstractLookupStrategy) -> str:
    return f"{parent_collection}_{strategy.name}.json"


def build_strategies(settings: Settings) -> List[AbstractLookupStrategy]:
    """Direct lookup first, pipeline lookup second."""
    return [
        DirectLookupStrategy(settings.parent_collection, settings.child_collection),
        PipelineLookupStrategy(
            settings.parent_collection,
            settings.child_collection,
            literal_match=settings.lookup_literal_match,
        ),
    ]


def _summarize(run: LookupRun, strategy: AbstractLookupStrategy, output: str) -> LookupRunResult:
    return LookupRunResult(
        strategy=strategy.name,
        output=output,
        documents=len(run.documents),
        children=run.children(strategy.as_field),
        elapsed_seconds=run.elapsed_seconds,
        duration_seconds=round(run.duration_seconds, 4),
        peak_rss_bytes=run.peak_rss_bytes,
        cpu_percent=run.cpu_percent,
    )


def run_strategy(
    store: MongoStore,
    strategy: AbstractLookupStrategy,
    query: QuerySpec,
) -> LookupRun:
    log.info(f"[STRATEGY START] {strategy.name}", extra={"strategy": strategy.name})
    try:
        run = run_lookup(strategy.name, lambda: strategy.execute(store, query))
    except Exception:
        log.exception(f"[STRATEGY FAILED] {strategy.name}", extra={"strategy": strategy.name})
        raise

    log.info(
        f"[STRATEGY SUCCESS] {strategy.name}",
        extra={
            "strategy": strategy.name,
            "documents": len(run.documents),
            "children": run.children(strategy.as_field),
            "duration": round(run.duration_seconds, 4),
        },
    )
    return run


def run_benchmarks(
    store: MongoStore,
    settings: Optional[Settings] = None,
    sink: Optional[FileSink] = None,
    seed: bool = True,
) -> List[LookupRunResult]:
    """
    Seed (optionally), then run the direct and pipeline lookups in order.

    Payloads from an earlier run are removed first, and this run's payloads
    are written only once both strategies have succeeded. A failed run
    leaves no output files behind.

    Parameters
    ----------
    store : MongoStore
        Storage handle shared by seeding and both strategies.
    settings : Settings | None
        Fixture sizing, collection names and query shape. Defaults to `get_settings()`.
    sink : FileSink | None
        Where payloads go. Defaults to `settings.output_dir`.
    seed : bool
        Whether to wipe and re-seed both collections first.

    Returns
    -------
    List[LookupRunResult]
        One summary per strategy, in execution order.
    """
    settings = settings or get_settings()
    sink = sink or FileSink(settings.output_dir)
    strategies = build_strategies(settings)

    for strategy in strategies:
        sink.discard(output_name(strategy.parent_collection, strategy))

    if seed:
        populate(
            store,
            customer_count=settings.customer_count,
            orders_per_customer=settings.orders_per_customer,
            parent_collection=settings.parent_collection,
            child_collection=settings.child_collection,
            padding_copies=settings.padding_copies,
        )

    query = build_query(
        skip=settings.page_skip, limit=settings.page_limit, locale=settings.collation_locale
    )
    runs = [(strategy, run_strategy(store, strategy, query)) for strategy in strategies]

    results = []
    for strategy, run in runs:
        path = sink.write_named_blob(output_name(strategy.parent_collection, strategy), run.payload)
        results.append(_summarize(run, strategy, str(path)))

    log.info(
        f"[ORCHESTRATOR COMPLETE] {len(results)} strategies executed",
        extra={"strategies": [r["strategy"] for r in results]},
    )
    return results


__all__ = [
    "LookupRun",
    "build_strategies",
    "output_name",
    "run_benchmarks",
    "run_lookup",
    "run_strategy",
    "serialize",
]
