"""
Storage abstractions.

- MetadataStorage → in-memory (dev/tests) or MongoDB
- UserRepository / ArticleRepository → the only way services reach it
"""

from __future__ import annotations

from inkwell.config import Settings
from inkwell.storage.base import (
    Collections,
    DuplicateKeyError,
    MetadataStorage,
    StorageError,
    UNIQUE_FIELDS,
)
from inkwell.storage.local import InMemoryMetadataStorage
from inkwell.storage.repositories import ArticleRepository, UserRepository


def create_storage(settings: Settings) -> MetadataStorage:
    """Pick the storage backend from settings.database_url."""
    if settings.use_mongo:
        from inkwell.storage.mongo import MongoMetadataStorage
        return MongoMetadataStorage(settings.database_url, settings.database_name)
    return InMemoryMetadataStorage()


__all__ = [
    "Collections",
    "DuplicateKeyError",
    "MetadataStorage",
    "StorageError",
    "UNIQUE_FIELDS",
    "InMemoryMetadataStorage",
    "ArticleRepository",
    "UserRepository",
    "create_storage",
]
