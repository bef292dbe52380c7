"""
Per-entity data access.

Services never talk to MetadataStorage directly; they go through one
repository per entity, which converts between documents and models.
"""

from __future__ import annotations

from typing import Any

from inkwell.core.models import ArticleInDB, UserInDB
from inkwell.storage.base import Collections, MetadataStorage


class UserRepository:
    """Users collection."""

    collection = Collections.USERS

    def __init__(self, storage: MetadataStorage):
        self.storage = storage

    async def create(self, user: UserInDB) -> UserInDB:
        await self.storage.insert(self.collection, user.model_dump())
        return user

    async def get_by_id(self, user_id: str) -> UserInDB | None:
        doc = await self.storage.get(self.collection, user_id)
        return UserInDB.model_validate(doc) if doc else None

    async def get_by_email(self, email: str) -> UserInDB | None:
        doc = await self.storage.find_one(self.collection, {"email": email.strip().lower()})
        return UserInDB.model_validate(doc) if doc else None

    async def get_by_username(self, username: str) -> UserInDB | None:
        doc = await self.storage.find_one(self.collection, {"username": username.strip()})
        return UserInDB.model_validate(doc) if doc else None

    async def get_many(self, user_ids: set[str]) -> dict[str, UserInDB]:
        """Load several users in one query, keyed by id. Missing ids are skipped."""
        if not user_ids:
            return {}
        docs = await self.storage.query(self.collection, {"id": sorted(user_ids)}, limit=None)
        return {doc["id"]: UserInDB.model_validate(doc) for doc in docs}

    async def delete_all(self) -> int:
        return await self.storage.delete_many(self.collection)


class ArticleRepository:
    """Articles collection."""

    collection = Collections.ARTICLES

    def __init__(self, storage: MetadataStorage):
        self.storage = storage

    async def create(self, article: ArticleInDB) -> ArticleInDB:
        await self.storage.insert(self.collection, article.model_dump())
        return article

    async def get_by_id(self, article_id: str) -> ArticleInDB | None:
        doc = await self.storage.get(self.collection, article_id)
        return ArticleInDB.model_validate(doc) if doc else None

    async def get_by_slug(self, slug: str) -> ArticleInDB | None:
        doc = await self.storage.find_one(self.collection, {"slug": slug})
        return ArticleInDB.model_validate(doc) if doc else None

    async def list_recent(
        self,
        limit: int | None = 20,
        skip: int = 0,
        author_id: str | None = None,
    ) -> list[ArticleInDB]:
        """Newest first. `limit=None` returns everything."""
        filters = {"author_id": author_id} if author_id else None
        docs = await self.storage.query(
            self.collection,
            filters,
            limit=limit,
            offset=skip,
            order_by="created_at",
            descending=True,
        )
        return [ArticleInDB.model_validate(doc) for doc in docs]

    async def count(self, author_id: str | None = None) -> int:
        filters = {"author_id": author_id} if author_id else None
        return await self.storage.count(self.collection, filters)

    async def update(self, article_id: str, updates: dict[str, Any]) -> ArticleInDB | None:
        doc = await self.storage.update(self.collection, article_id, updates)
        return ArticleInDB.model_validate(doc) if doc else None

    async def delete(self, article_id: str) -> bool:
        return await self.storage.delete(self.collection, article_id)

    async def delete_all(self) -> int:
        return await self.storage.delete_many(self.collection)
