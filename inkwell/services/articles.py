"""
Article service.

Owns article lifecycle: creation (with slug), the public feed, lookup by
id or slug, and owner-only update and delete.
"""

from __future__ import annotations

import logging
from typing import Awaitable, Callable

from tenacity import AsyncRetrying, retry_if_exception, stop_after_attempt

from inkwell.auth.context import assert_owner
from inkwell.core.errors import ForbiddenError, InternalError, NotFoundError
from inkwell.core.models import Article, ArticleInDB, ArticlePage
from inkwell.core.slug import DEFAULT_SUFFIX_LENGTH, generate_slug
from inkwell.core.utils import utc_now
from inkwell.storage.base import DuplicateKeyError
from inkwell.storage.repositories import ArticleRepository, UserRepository

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


def _is_slug_collision(error: BaseException) -> bool:
    return isinstance(error, DuplicateKeyError) and error.field == "slug"


class ArticleService:
    def __init__(
        self,
        articles: ArticleRepository,
        users: UserRepository,
        slug_suffix_length: int = DEFAULT_SUFFIX_LENGTH,
        slug_max_attempts: int = 5,
    ):
        self.articles = articles
        self.users = users
        self.slug_suffix_length = slug_suffix_length
        self.slug_max_attempts = slug_max_attempts

    # =========================================================================
    # Helpers
    # =========================================================================

    async def _with_fresh_slug(self, title: str, write: Callable[[str], Awaitable[ArticleInDB | None]]):
        """
        Run `write(slug)` with a newly generated slug, regenerating the
        suffix on a slug clash. Gives up after slug_max_attempts.
        """
        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(self.slug_max_attempts),
                retry=retry_if_exception(_is_slug_collision),
                reraise=True,
            ):
                with attempt:
                    slug = generate_slug(title, self.slug_suffix_length)
                    if attempt.retry_state.attempt_number > 1:
                        logger.warning(f"Slug collision, retrying with {slug}")
                    return await write(slug)
        except DuplicateKeyError as e:
            if e.field != "slug":
                raise
            logger.error(f"Could not find a free slug for {title!r} after {self.slug_max_attempts} attempts")
            raise InternalError("Could not generate a unique slug") from e

    async def _present(self, article: ArticleInDB) -> Article:
        author = await self.users.get_by_id(article.author_id)
        return article.to_public(author)

    async def _present_many(self, articles: list[ArticleInDB]) -> list[Article]:
        authors = await self.users.get_many({a.author_id for a in articles})
        return [a.to_public(authors.get(a.author_id)) for a in articles]

    async def _load(self, article_id: str) -> ArticleInDB:
        article = await self.articles.get_by_id(article_id)
        if not article:
            raise NotFoundError("Article not found")
        return article

    # =========================================================================
    # Operations
    # =========================================================================

    async def create_article(self, title: str, content: str, author_id: str) -> Article:
        """Create an article owned by `author_id`."""

        async def write(slug: str) -> ArticleInDB:
            article = ArticleInDB(title=title, slug=slug, content=content, author_id=author_id)
            return await self.articles.create(article)

        article = await self._with_fresh_slug(title, write)
        logger.info(f"Article {article.id} created by {author_id}")
        return await self._present(article)

    async def list_articles(self, limit: int = DEFAULT_PAGE_SIZE, skip: int = 0) -> ArticlePage:
        """Newest first, with total count for pagination."""
        limit = max(1, min(limit, MAX_PAGE_SIZE))
        skip = max(0, skip)

        articles = await self.articles.list_recent(limit=limit, skip=skip)
        total = await self.articles.count()
        return ArticlePage(
            articles=await self._present_many(articles),
            total=total,
            limit=limit,
            skip=skip,
        )

    async def get_article(self, identifier: str) -> Article:
        """
        Look up by id first, then by slug.

        Raises:
            NotFoundError: neither matches
        """
        article = await self.articles.get_by_id(identifier)
        if not article:
            article = await self.articles.get_by_slug(identifier)
        if not article:
            raise NotFoundError("Article not found")
        return await self._present(article)

    async def update_article(
        self,
        article_id: str,
        user_id: str,
        title: str | None = None,
        content: str | None = None,
    ) -> Article:
        """
        Apply a partial update. Only the author may do this.

        The slug is regenerated when the title actually changes.

        Raises:
            NotFoundError: no such article
            ForbiddenError: user is not the author
        """
        article = await self._load(article_id)
        try:
            assert_owner(article.author_id, user_id, "You can only update your own articles")
        except ForbiddenError:
            logger.warning(f"User {user_id} denied update of article {article_id}")
            raise

        updates: dict = {"updated_at": utc_now()}
        if content:
            updates["content"] = content

        if title and title != article.title:
            updates["title"] = title

            async def write(slug: str) -> ArticleInDB | None:
                return await self.articles.update(article_id, {**updates, "slug": slug})

            updated = await self._with_fresh_slug(title, write)
        else:
            updated = await self.articles.update(article_id, updates)

        if not updated:
            # Deleted between load and write
            raise NotFoundError("Article not found")
        return await self._present(updated)

    async def delete_article(self, article_id: str, user_id: str) -> str:
        """
        Delete an article. Only the author may do this.

        Returns a confirmation message.
        """
        article = await self._load(article_id)
        try:
            assert_owner(article.author_id, user_id, "You can only delete your own articles")
        except ForbiddenError:
            logger.warning(f"User {user_id} denied delete of article {article_id}")
            raise

        await self.articles.delete(article_id)
        logger.info(f"Article {article_id} deleted by {user_id}")
        return "Article deleted successfully"

    async def list_by_author(self, author_id: str) -> list[Article]:
        """Everything one user has written, newest first."""
        articles = await self.articles.list_recent(limit=None, author_id=author_id)
        return await self._present_many(articles)
