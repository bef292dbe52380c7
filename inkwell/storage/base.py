"""
Storage abstraction layer.

All persistence goes through `MetadataStorage`, a small async document
store keyed by collection and id. Backends (in-memory, MongoDB) are
swappable without touching the services; the services themselves only
see the per-entity repositories in `inkwell.storage.repositories`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


# =============================================================================
# Collection Names
# =============================================================================


class Collections:
    """Standard collection names."""

    USERS = "users"
    ARTICLES = "articles"


# Fields that must be unique within their collection
UNIQUE_FIELDS: dict[str, tuple[str, ...]] = {
    Collections.USERS: ("email", "username"),
    Collections.ARTICLES: ("slug",),
}


# =============================================================================
# Errors
# =============================================================================


class StorageError(Exception):
    """Base exception for storage failures."""
    pass


class DuplicateKeyError(StorageError):
    """A write would break a unique constraint."""

    def __init__(self, collection: str, field: str, value: Any = None):
        self.collection = collection
        self.field = field
        self.value = value
        super().__init__(f"Duplicate value for {collection}.{field}: {value!r}")


# =============================================================================
# Storage Interface
# =============================================================================


class MetadataStorage(ABC):
    """
    Storage for structured documents (users, articles).

    Documents are plain dicts with an "id" key. Unique fields are declared
    up front (see UNIQUE_FIELDS) and enforced on insert and update.
    """

    def __init__(self, unique_fields: dict[str, tuple[str, ...]] | None = None):
        self.unique_fields = dict(UNIQUE_FIELDS if unique_fields is None else unique_fields)

    async def initialize(self) -> None:
        """Prepare the backend (connections, indexes). Idempotent."""
        pass

    async def close(self) -> None:
        """Release backend resources."""
        pass

    @abstractmethod
    async def insert(self, collection: str, data: dict[str, Any]) -> dict[str, Any]:
        """
        Insert a new document.

        Raises:
            DuplicateKeyError: the id or a unique field is already taken
        """
        pass

    @abstractmethod
    async def get(self, collection: str, id: str) -> dict[str, Any] | None:
        """Get a document by ID."""
        pass

    @abstractmethod
    async def find_one(self, collection: str, filters: dict[str, Any]) -> dict[str, Any] | None:
        """Get the first document matching all of `filters`."""
        pass

    @abstractmethod
    async def query(
        self,
        collection: str,
        filters: dict[str, Any] | None = None,
        limit: int | None = 100,
        offset: int = 0,
        order_by: str | None = None,
        descending: bool = False,
    ) -> list[dict[str, Any]]:
        """
        Query documents with optional filters, ordering and pagination.

        A list value in `filters` matches any of its members. `limit=None`
        returns every match.
        """
        pass

    @abstractmethod
    async def count(self, collection: str, filters: dict[str, Any] | None = None) -> int:
        pass

    @abstractmethod
    async def update(self, collection: str, id: str, updates: dict[str, Any]) -> dict[str, Any] | None:
        """
        Partial update of a document.

        Returns the updated document, or None if it does not exist.

        Raises:
            DuplicateKeyError: an updated unique field clashes with another document
        """
        pass

    @abstractmethod
    async def delete(self, collection: str, id: str) -> bool:
        """Delete a document."""
        pass

    @abstractmethod
    async def delete_many(self, collection: str, filters: dict[str, Any] | None = None) -> int:
        """Delete every matching document. Returns how many were removed."""
        pass
