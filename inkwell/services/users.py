"""
User profiles.
"""

from __future__ import annotations

from inkwell.core.errors import NotFoundError
from inkwell.core.models import Profile
from inkwell.services.articles import ArticleService
from inkwell.storage.repositories import UserRepository


class UserService:
    def __init__(self, users: UserRepository, articles: ArticleService):
        self.users = users
        self.articles = articles

    async def get_profile(self, username: str) -> Profile:
        """
        Public profile for `username`: the user plus their articles.

        Raises:
            NotFoundError: no such user
        """
        user = await self.users.get_by_username(username)
        if not user:
            raise NotFoundError("User not found")

        articles = await self.articles.list_by_author(user.id)
        return Profile(user=user.to_public(), articles=articles)
