"""
Mongo Lookup Benchmark - seeds MongoDB and times two $lookup join strategies.

This package seeds a customer collection and an order collection with
deterministic synthetic documents, then compares:

- Direct lookup (`localField` / `foreignField` equality join)
- Pipeline lookup (`let` + correlated sub-pipeline with filter, sort, projection)

Both run over the same filtered, numerically sorted, paginated page of
customers. Each joined result is fully materialized inside the timer and
written out as Extended JSON.
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from lookup_bench.config import Settings, get_settings
from lookup_bench.errors import ConfigurationError, LookupBenchError, StorageConnectionError
from lookup_bench.fixtures import populate
from lookup_bench.infrastructure import FileSink, MongoStore
from lookup_bench.orchestrator import run_benchmarks, run_lookup
from lookup_bench.query import build_collation, build_filter, build_query, build_sort
from lookup_bench.strategies import (
    AbstractLookupStrategy,
    DirectLookupStrategy,
    LookupRunResult,
    LookupStrategy,
    PipelineLookupStrategy,
)
from lookup_bench.utils.logging import configure_logging, get_logger
from lookup_bench.utils.profiler import ProfileStats, profile_block

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "get_settings",
    # Errors
    "ConfigurationError",
    "LookupBenchError",
    "StorageConnectionError",
    # Storage and output
    "FileSink",
    "MongoStore",
    # Fixtures and queries
    "populate",
    "build_collation",
    "build_filter",
    "build_query",
    "build_sort",
    # Strategies and runner
    "AbstractLookupStrategy",
    "DirectLookupStrategy",
    "LookupRunResult",
    "LookupStrategy",
    "PipelineLookupStrategy",
    "run_benchmarks",
    "run_lookup",
    # Logging and profiling
    "configure_logging",
    "get_logger",
    "ProfileStats",
    "profile_block",
]
