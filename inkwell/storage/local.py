"""
In-memory storage for development and tests.

Works without any external services. Data lives for the lifetime of the
process only.
"""

from __future__ import annotations

from typing import Any

from inkwell.storage.base import DuplicateKeyError, MetadataStorage


class InMemoryMetadataStorage(MetadataStorage):
    """In-memory document storage with unique-field enforcement."""

    def __init__(self, unique_fields: dict[str, tuple[str, ...]] | None = None):
        super().__init__(unique_fields)
        self._data: dict[str, dict[str, dict[str, Any]]] = {}

    def _collection(self, collection: str) -> dict[str, dict[str, Any]]:
        return self._data.setdefault(collection, {})

    def _check_unique(self, collection: str, doc: dict[str, Any], skip_id: str | None = None) -> None:
        docs = self._collection(collection)
        for field in self.unique_fields.get(collection, ()):
            value = doc.get(field)
            if value is None:
                continue
            for other_id, other in docs.items():
                if other_id != skip_id and other.get(field) == value:
                    raise DuplicateKeyError(collection, field, value)

    @staticmethod
    def _matches(doc: dict[str, Any], filters: dict[str, Any] | None) -> bool:
        if not filters:
            return True
        return all(
            doc.get(key) in value if isinstance(value, (list, tuple, set)) else doc.get(key) == value
            for key, value in filters.items()
        )

    async def insert(self, collection: str, data: dict[str, Any]) -> dict[str, Any]:
        docs = self._collection(collection)
        doc_id = data["id"]
        if doc_id in docs:
            raise DuplicateKeyError(collection, "id", doc_id)
        self._check_unique(collection, data)
        docs[doc_id] = dict(data)
        return dict(data)

    async def get(self, collection: str, id: str) -> dict[str, Any] | None:
        doc = self._collection(collection).get(id)
        return dict(doc) if doc is not None else None

    async def find_one(self, collection: str, filters: dict[str, Any]) -> dict[str, Any] | None:
        for doc in self._collection(collection).values():
            if self._matches(doc, filters):
                return dict(doc)
        return None

    async def query(
        self,
        collection: str,
        filters: dict[str, Any] | None = None,
        limit: int | None = 100,
        offset: int = 0,
        order_by: str | None = None,
        descending: bool = False,
    ) -> list[dict[str, Any]]:
        results = [doc for doc in self._collection(collection).values() if self._matches(doc, filters)]

        if order_by:
            results.sort(key=lambda doc: doc.get(order_by), reverse=descending)

        end = None if limit is None else offset + limit
        return [dict(doc) for doc in results[offset:end]]

    async def count(self, collection: str, filters: dict[str, Any] | None = None) -> int:
        return sum(1 for doc in self._collection(collection).values() if self._matches(doc, filters))

    async def update(self, collection: str, id: str, updates: dict[str, Any]) -> dict[str, Any] | None:
        docs = self._collection(collection)
        if id not in docs:
            return None

        merged = {**docs[id], **updates, "id": id}
        self._check_unique(collection, merged, skip_id=id)
        docs[id] = merged
        return dict(merged)

    async def delete(self, collection: str, id: str) -> bool:
        docs = self._collection(collection)
        if id in docs:
            del docs[id]
            return True
        return False

    async def delete_many(self, collection: str, filters: dict[str, Any] | None = None) -> int:
        docs = self._collection(collection)
        doomed = [doc_id for doc_id, doc in docs.items() if self._matches(doc, filters)]
        for doc_id in doomed:
            del docs[doc_id]
        return len(doomed)
