"""
Read-only access to the metadata of a sharded MongoDB cluster.
"""

import logging
import re
import typing as t

import pymongo
import pymongo.database
import pymongo.errors
from attrs import define, field

from mgcstatus.exception import GatewayError
from mgcstatus.model import Chunk, Collection, CollectionStats, Shard

logger = logging.getLogger(__name__)


@define
class MetadataGateway:
    """
    Query `config.shards`, `config.chunks`, `config.collections`, and the
    `collStats` command, scoped to one logical database by the caller.
    """

    url: str
    timeout: int = 10_000
    _client: t.Optional[pymongo.MongoClient] = field(default=None, alias="client")

    @classmethod
    def from_host(cls, host: str = "localhost", port: int = 27017, timeout: int = 10_000):
        return cls(url=f"mongodb://{host}:{port}/", timeout=timeout)

    @property
    def client(self) -> pymongo.MongoClient:
        if self._client is None:
            logger.info(f"Connecting to {self.url}")
            self._client = pymongo.MongoClient(
                self.url,
                serverSelectionTimeoutMS=self.timeout,
                connectTimeoutMS=self.timeout,
                socketTimeoutMS=self.timeout,
            )
        return self._client

    @property
    def config_db(self) -> pymongo.database.Database:
        return self.client.get_database("config")

    def close(self):
        if self._client is not None:
            self._client.close()
            self._client = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def ping(self) -> None:
        try:
            self.client.get_database("admin").command("ping")
        except pymongo.errors.PyMongoError as ex:
            raise GatewayError(f"Unable to connect to {self.url}: {ex}") from ex

    def list_shards(self) -> t.List[Shard]:
        try:
            cursor = self.config_db.shards.find({}, max_time_ms=self.timeout)
            return [Shard.from_document(doc) for doc in cursor]
        except pymongo.errors.PyMongoError as ex:
            raise GatewayError(f"Failed to list shards: {ex}") from ex

    def list_chunks(self, database: t.Optional[str] = None) -> t.List[Chunk]:
        """
        Read chunk documents, optionally only those of the given database.

        Chunk documents written by MongoDB 5.0 and newer reference their
        collection by `uuid` instead of `ns`. Those are resolved through
        `config.collections`.
        """
        try:
            namespaces = self._namespaces_by_uuid()
            cursor = self.config_db.chunks.find(
                {}, projection={"ns": 1, "uuid": 1, "shard": 1, "jumbo": 1, "lastmod": 1}, max_time_ms=self.timeout
            )
            chunks = [Chunk.from_document(doc, ns=namespaces.get(doc.get("uuid"))) for doc in cursor]
        except pymongo.errors.PyMongoError as ex:
            raise GatewayError(f"Failed to list chunks: {ex}") from ex
        if database is not None:
            chunks = [chunk for chunk in chunks if chunk.database == database]
        return chunks

    def list_collections(self, database: str) -> t.List[Collection]:
        query = {"_id": {"$regex": f"^{re.escape(database)}\\."}, "dropped": {"$ne": True}}
        try:
            cursor = self.config_db.collections.find(query, max_time_ms=self.timeout)
            return [Collection.from_document(doc) for doc in cursor]
        except pymongo.errors.PyMongoError as ex:
            raise GatewayError(f"Failed to list collections of database {database}: {ex}") from ex

    def collection_stats(self, database: str, collection: str) -> CollectionStats:
        try:
            response = self.client[database].command("collStats", collection, maxTimeMS=self.timeout)
        except pymongo.errors.PyMongoError as ex:
            raise GatewayError(f"Failed to read statistics of collection {database}.{collection}: {ex}") from ex
        return CollectionStats.from_document(response)

    def _namespaces_by_uuid(self) -> t.Dict[t.Any, str]:
        cursor = self.config_db.collections.find(
            {"uuid": {"$exists": True}}, projection={"_id": 1, "uuid": 1}, max_time_ms=self.timeout
        )
        return {doc["uuid"]: doc["_id"] for doc in cursor}
