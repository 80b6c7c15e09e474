"""
Exception hierarchy for the Mongo lookup benchmark.

Storage engine failures raised by pymongo during seeding or aggregation are
not wrapped; they propagate unchanged. Only failures this package detects
itself get a dedicated type.
"""

from __future__ import annotations


class LookupBenchError(Exception):
    """Base class for errors raised by this package."""


class StorageConnectionError(LookupBenchError):
    """The MongoDB server could not be reached."""


class ConfigurationError(LookupBenchError):
    """A collection name or lookup definition is unusable."""


__all__ = ["LookupBenchError", "StorageConnectionError", "ConfigurationError"]
