"""
Policies - the route-facing side of authentication.

Just use: `ctx: AuthContext = Depends(require_auth)`

Design:
- The bearer token is read from the Authorization header
- The auth service verifies it and re-resolves the user from storage
- Missing header, bad token, or a user that no longer exists → 401
- If allowed, the route gets an AuthContext for downstream checks
"""

from __future__ import annotations

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from inkwell.auth.context import AuthContext
from inkwell.core.errors import UnauthorizedError
from inkwell.integrations.sentry import set_user


# Optional bearer (doesn't fail by itself; require_auth decides)
optional_bearer = HTTPBearer(auto_error=False)


async def require_auth(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(optional_bearer),
) -> AuthContext:
    """Resolve the acting user or reject the request with 401."""
    if credentials is None:
        raise UnauthorizedError("No token provided")

    auth_service = request.app.state.auth_service
    user = await auth_service.authenticate(credentials.credentials)
    set_user(user.id, user.username)
    return AuthContext(user=user)
