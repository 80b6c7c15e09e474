"""
Strategies package for the Mongo lookup benchmark.

Re-exports the abstract interfaces and both concrete lookup strategies so
downstream code can import from `lookup_bench.strategies` directly.
"""

from lookup_bench.strategies.abstract import (
    AbstractLookupStrategy,
    LookupRunResult,
    LookupStrategy,
)
from lookup_bench.strategies.direct_lookup import DirectLookupStrategy
from lookup_bench.strategies.pipeline_lookup import PipelineLookupStrategy

__all__ = [
    # Abstracts
    "AbstractLookupStrategy",
    "LookupRunResult",
    "LookupStrategy",
    # Concrete strategies
    "DirectLookupStrategy",
    "PipelineLookupStrategy",
]
