"""
Auth context - who is making this request.

This is the lightweight object passed to route handlers that need an
authenticated user. Ownership checks live in `assert_owner`, which the
article service calls with the acting user id.
"""

from __future__ import annotations

from dataclasses import dataclass

from inkwell.core.errors import ForbiddenError
from inkwell.core.models import User


def assert_owner(resource_owner_id: str, acting_user_id: str, message: str = "Forbidden") -> None:
    """
    Raise ForbiddenError unless the acting user owns the resource.

    Ownership is the id recorded when the resource was created.
    """
    if resource_owner_id != acting_user_id:
        raise ForbiddenError(message)


@dataclass(frozen=True)
class AuthContext:
    """
    Authorization context for a request.

    Usage in routes:
        async def my_route(ctx: AuthContext = Depends(require_auth)):
            print(f"User {ctx.user_id} is writing")
    """

    user: User

    @property
    def user_id(self) -> str:
        return self.user.id
