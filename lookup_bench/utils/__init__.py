"""
Utilities package for the Mongo lookup benchmark.

Exports shared helpers for logging and profiling. Keep this package free of
MongoDB and fixture-specific logic.
"""

from lookup_bench.utils.logging import configure_logging, get_logger
from lookup_bench.utils.profiler import ProfileStats, profile_block

__all__ = [
    "configure_logging",
    "get_logger",
    "ProfileStats",
    "profile_block",
]
