"""
Core data models.

Two shapes per entity: the stored document (`*InDB`) and the public view
returned to clients. The public user view never carries the password hash.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from inkwell.core.utils import generate_id, utc_now


# =============================================================================
# Users
# =============================================================================


class UserInDB(BaseModel):
    """User as stored in the database."""

    id: str = Field(default_factory=lambda: generate_id("user"))
    username: str
    email: str
    password_hash: str
    bio: str = ""
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    def to_public(self) -> User:
        return User(
            id=self.id,
            username=self.username,
            email=self.email,
            bio=self.bio,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )


class User(BaseModel):
    """User data returned to client (no sensitive fields)."""

    id: str
    username: str
    email: str
    bio: str = ""
    created_at: datetime
    updated_at: datetime


class Author(BaseModel):
    """The slice of a user embedded in article responses."""

    id: str
    username: str
    email: str
    bio: str = ""


# =============================================================================
# Articles
# =============================================================================


class ArticleInDB(BaseModel):
    """
    Article as stored in the database.

    `author_id` is fixed at creation; `slug` follows the title.
    """

    id: str = Field(default_factory=lambda: generate_id("art"))
    title: str
    slug: str
    content: str
    author_id: str
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    def to_public(self, author: UserInDB | User | None) -> Article:
        return Article(
            id=self.id,
            title=self.title,
            slug=self.slug,
            content=self.content,
            author=Author(
                id=author.id,
                username=author.username,
                email=author.email,
                bio=author.bio,
            ) if author else None,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )


class Article(BaseModel):
    """Article returned to client, with its author embedded."""

    id: str
    title: str
    slug: str
    content: str
    # None only if the author record has gone missing
    author: Author | None
    created_at: datetime
    updated_at: datetime


class ArticlePage(BaseModel):
    """One page of the article feed."""

    articles: list[Article]
    total: int
    limit: int
    skip: int


class Profile(BaseModel):
    """Public profile: a user and everything they have written."""

    user: User
    articles: list[Article]
