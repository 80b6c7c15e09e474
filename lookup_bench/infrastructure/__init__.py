"""
Infrastructure package for the Mongo lookup benchmark.

Centralizes I/O: the MongoDB storage handle and the file output sink. Keep
this layer free of fixture, query and timing logic.
"""

from lookup_bench.infrastructure.mongo_store import MongoStore
from lookup_bench.infrastructure.sink import FileSink

__all__ = [
    "FileSink",
    "MongoStore",
]
