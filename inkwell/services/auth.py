"""
Authentication service.

Signup, login, and turning a bearer token back into a user.
"""

from __future__ import annotations

import logging
import secrets
from functools import lru_cache

from pydantic import BaseModel

from inkwell.auth.jwt import InvalidTokenError, TokenIssuer, hash_password, verify_password
from inkwell.core.errors import ConflictError, UnauthorizedError
from inkwell.core.models import User, UserInDB
from inkwell.storage.base import DuplicateKeyError
from inkwell.storage.repositories import UserRepository

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"

CONFLICT_MESSAGES = {
    "email": "Email already registered",
    "username": "Username already taken",
}


@lru_cache(maxsize=1)
def _dummy_hash() -> str:
    """Hash verified in place of a stored one when the email is unknown."""
    return hash_password(secrets.token_urlsafe(16))


class AuthResult(BaseModel):
    """A user (without password hash) and a fresh bearer token."""
    user: User
    token: str


class AuthService:
    def __init__(self, users: UserRepository, tokens: TokenIssuer):
        self.users = users
        self.tokens = tokens

    async def signup(self, username: str, email: str, password: str, bio: str = "") -> AuthResult:
        """
        Register a new account.

        Email is checked before username so the conflict message names the
        email when both are taken.

        Raises:
            ConflictError: email or username already in use
        """
        username = username.strip()
        email = email.strip().lower()

        if await self.users.get_by_email(email):
            raise ConflictError(CONFLICT_MESSAGES["email"], field="email")
        if await self.users.get_by_username(username):
            raise ConflictError(CONFLICT_MESSAGES["username"], field="username")

        user = UserInDB(
            username=username,
            email=email,
            password_hash=hash_password(password),
            bio=bio,
        )
        try:
            await self.users.create(user)
        except DuplicateKeyError as e:
            # Lost a race with a concurrent signup
            message = CONFLICT_MESSAGES.get(e.field, "Account already exists")
            raise ConflictError(message, field=e.field) from e

        logger.info(f"New user signed up: {user.username} ({user.id})")
        return AuthResult(user=user.to_public(), token=self.tokens.issue(user.id))

    async def login(self, email: str, password: str) -> AuthResult:
        """
        Authenticate by email and password.

        Unknown email and wrong password fail identically.

        Raises:
            UnauthorizedError: credentials do not match
        """
        user = await self.users.get_by_email(email)
        stored_hash = user.password_hash if user else _dummy_hash()
        password_ok = verify_password(password, stored_hash)
        if not user or not password_ok:
            logger.info("Login rejected")
            raise UnauthorizedError(INVALID_CREDENTIALS)

        return AuthResult(user=user.to_public(), token=self.tokens.issue(user.id))

    async def authenticate(self, token: str) -> User:
        """
        Resolve a bearer token to the user it names.

        Raises:
            UnauthorizedError: token fails verification, or its user is gone
        """
        try:
            payload = self.tokens.verify(token)
        except InvalidTokenError:
            raise UnauthorizedError("Invalid or expired token")

        user = await self.users.get_by_id(payload.user_id)
        if not user:
            raise UnauthorizedError("User not found")
        return user.to_public()
