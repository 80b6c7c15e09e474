"""
MongoDB access for the Mongo lookup benchmark.

`MongoStore` is the one storage handle of a run: it is built once by the CLI
(or a test) and passed explicitly into the fixture generator and the lookup
strategies. There is no module-level client.

No retry logic: a failed ping, write or aggregation propagates to the caller.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, Mapping, Optional

from pymongo import ASCENDING, MongoClient
from pymongo.collation import Collation
from pymongo.collection import Collection
from pymongo.command_cursor import CommandCursor
from pymongo.database import Database
from pymongo.errors import PyMongoError

from lookup_bench.config import Settings, get_settings
from lookup_bench.errors import StorageConnectionError
from lookup_bench.utils.logging import get_logger

log = get_logger(__name__)


class MongoStore:
    """
    Thin wrapper over one pymongo database.

    Use as a context manager so the client is closed when the run ends:

        with MongoStore.connect(uri, "Sales") as store:
            store.insert_one("customer", {"_id": "1"})
    """

    def __init__(self, client: MongoClient, database: Database) -> None:
        self._client = client
        self._database = database

    @classmethod
    def connect(cls, uri: str, database: str, timeout_ms: int = 5000) -> "MongoStore":
        """
        Open a client and verify the server answers a ping.

        Raises
        ------
        StorageConnectionError
            If the server cannot be selected within `timeout_ms`.
        """
        client: MongoClient = MongoClient(uri, serverSelectionTimeoutMS=timeout_ms)
        try:
            client.admin.command("ping")
        except PyMongoError as exc:
            client.close()
            raise StorageConnectionError(f"Cannot reach MongoDB at {uri}: {exc}") from exc
        log.info("Connected to MongoDB", extra={"uri": uri, "database": database})
        return cls(client, client[database])

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "MongoStore":
        settings = settings or get_settings()
        return cls.connect(settings.mongo_uri, settings.mongo_db, settings.mongo_timeout_ms)

    @property
    def database(self) -> Database:
        return self._database

    def collection(self, name: str) -> Collection:
        return self._database[name]

    def has_collection(self, name: str) -> bool:
        return bool(self._database.list_collection_names(filter={"name": name}))

    def delete_all(self, name: str) -> int:
        return self.collection(name).delete_many({}).deleted_count

    def insert_one(self, name: str, document: Mapping[str, Any]) -> Any:
        return self.collection(name).insert_one(dict(document)).inserted_id

    def create_index(self, name: str, field: str) -> str:
        """Create a single-field ascending index; returns the server-side index name."""
        return self.collection(name).create_index([(field, ASCENDING)])

    def count(self, name: str, filter: Optional[Dict[str, Any]] = None) -> int:
        return self.collection(name).count_documents(filter or {})

    def aggregate(
        self,
        name: str,
        pipeline: Iterable[Mapping[str, Any]],
        collation: Optional[Collation] = None,
    ) -> CommandCursor:
        """Run an aggregation and return the lazy cursor; nothing is fetched until iterated."""
        return self.collection(name).aggregate(list(pipeline), collation=collation)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "MongoStore":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


__all__ = ["MongoStore"]
