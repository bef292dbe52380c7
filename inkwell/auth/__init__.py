"""
Authentication and authorization.

- Password hashing and bearer tokens (jwt)
- The per-request AuthContext and the require_auth dependency
- Ownership checks for mutating someone's resource
"""

from inkwell.auth.context import AuthContext, assert_owner
from inkwell.auth.jwt import (
    InvalidTokenError,
    TokenIssuer,
    TokenPayload,
    hash_password,
    verify_password,
)
from inkwell.auth.policies import require_auth

__all__ = [
    "AuthContext",
    "assert_owner",
    "require_auth",
    # Credentials
    "InvalidTokenError",
    "TokenIssuer",
    "TokenPayload",
    "hash_password",
    "verify_password",
]
