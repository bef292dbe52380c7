"""
MongoDB storage backend.

Uses Motor for async access. Documents keep their string id in `_id`;
the rest of the application only ever sees the "id" key. Unique fields
become unique indexes, created on initialize.
"""

from __future__ import annotations

import logging
from typing import Any

from motor.motor_asyncio import AsyncIOMotorClient
from pymongo import ASCENDING, DESCENDING, ReturnDocument
from pymongo.errors import DuplicateKeyError as MongoDuplicateKeyError

from inkwell.storage.base import DuplicateKeyError, MetadataStorage

logger = logging.getLogger(__name__)


def _to_mongo(data: dict[str, Any]) -> dict[str, Any]:
    doc = {k: v for k, v in data.items() if k != "id"}
    doc["_id"] = data["id"]
    return doc


def _from_mongo(doc: dict[str, Any] | None) -> dict[str, Any] | None:
    if doc is None:
        return None
    data = {k: v for k, v in doc.items() if k != "_id"}
    data["id"] = doc["_id"]
    return data


def _to_filter(filters: dict[str, Any] | None) -> dict[str, Any]:
    if not filters:
        return {}
    query = {}
    for key, value in filters.items():
        if isinstance(value, (list, tuple, set)):
            value = {"$in": list(value)}
        query["_id" if key == "id" else key] = value
    return query


class MongoMetadataStorage(MetadataStorage):
    """
    MongoDB implementation of MetadataStorage.

    Example:
        storage = MongoMetadataStorage("mongodb://localhost:27017", "inkwell")
        await storage.initialize()
        await storage.insert("users", {"id": "user_1", "email": "a@b.co", ...})
    """

    def __init__(
        self,
        db_uri: str,
        db_name: str,
        unique_fields: dict[str, tuple[str, ...]] | None = None,
    ):
        super().__init__(unique_fields)
        self.client = AsyncIOMotorClient(db_uri, tz_aware=True)
        self.db = self.client[db_name]
        self._is_initialized = False

    async def initialize(self) -> None:
        if self._is_initialized:
            return
        for collection, fields in self.unique_fields.items():
            for field in fields:
                await self.db[collection].create_index([(field, ASCENDING)], unique=True)
        self._is_initialized = True
        logger.info(f"MongoDB storage ready (database={self.db.name})")

    async def close(self) -> None:
        # Motor's close() is not async
        self.client.close()

    def _duplicate(self, collection: str, error: MongoDuplicateKeyError) -> DuplicateKeyError:
        details = error.details or {}
        key_value = details.get("keyValue") or {}
        if key_value:
            field, value = next(iter(key_value.items()))
            return DuplicateKeyError(collection, "id" if field == "_id" else field, value)
        # Older servers only report the index name, e.g. "slug_1"
        message = details.get("errmsg", str(error))
        for field in self.unique_fields.get(collection, ()):
            if f"{field}_1" in message:
                return DuplicateKeyError(collection, field)
        return DuplicateKeyError(collection, "id")

    async def insert(self, collection: str, data: dict[str, Any]) -> dict[str, Any]:
        try:
            await self.db[collection].insert_one(_to_mongo(data))
        except MongoDuplicateKeyError as e:
            raise self._duplicate(collection, e) from e
        return dict(data)

    async def get(self, collection: str, id: str) -> dict[str, Any] | None:
        return _from_mongo(await self.db[collection].find_one({"_id": id}))

    async def find_one(self, collection: str, filters: dict[str, Any]) -> dict[str, Any] | None:
        return _from_mongo(await self.db[collection].find_one(_to_filter(filters)))

    async def query(
        self,
        collection: str,
        filters: dict[str, Any] | None = None,
        limit: int | None = 100,
        offset: int = 0,
        order_by: str | None = None,
        descending: bool = False,
    ) -> list[dict[str, Any]]:
        cursor = self.db[collection].find(_to_filter(filters))
        if order_by:
            cursor = cursor.sort(order_by, DESCENDING if descending else ASCENDING)
        cursor = cursor.skip(offset)
        if limit is not None:
            cursor = cursor.limit(limit)
        return [_from_mongo(doc) async for doc in cursor]

    async def count(self, collection: str, filters: dict[str, Any] | None = None) -> int:
        return await self.db[collection].count_documents(_to_filter(filters))

    async def update(self, collection: str, id: str, updates: dict[str, Any]) -> dict[str, Any] | None:
        fields = {k: v for k, v in updates.items() if k != "id"}
        try:
            doc = await self.db[collection].find_one_and_update(
                {"_id": id},
                {"$set": fields},
                return_document=ReturnDocument.AFTER,
            )
        except MongoDuplicateKeyError as e:
            raise self._duplicate(collection, e) from e
        return _from_mongo(doc)

    async def delete(self, collection: str, id: str) -> bool:
        result = await self.db[collection].delete_one({"_id": id})
        return result.deleted_count > 0

    async def delete_many(self, collection: str, filters: dict[str, Any] | None = None) -> int:
        result = await self.db[collection].delete_many(_to_filter(filters))
        return result.deleted_count
