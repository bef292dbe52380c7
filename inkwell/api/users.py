# =============================================================================
# User API Routes
# =============================================================================
#
# Endpoints:
#   GET /api/users/{username} - Public profile with articles
#
# =============================================================================

from fastapi import APIRouter, Depends

from inkwell.api.deps import get_user_service
from inkwell.api.responses import ok
from inkwell.services.users import UserService

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("/{username}")
async def get_user_profile(
    username: str,
    users: UserService = Depends(get_user_service),
):
    """A user's public profile and everything they have written."""
    profile = await users.get_profile(username)
    return ok(profile)
