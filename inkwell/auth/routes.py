# =============================================================================
# Auth API Routes
# =============================================================================
#
# Endpoints:
#   POST /api/auth/signup   - Create account, get token
#   POST /api/auth/login    - Get token
#   GET  /api/auth/me       - Get current user
#
# =============================================================================

from fastapi import APIRouter, Depends
from pydantic import BaseModel, EmailStr, Field

from inkwell.api.deps import get_auth_service
from inkwell.api.responses import ok
from inkwell.auth.context import AuthContext
from inkwell.auth.policies import require_auth
from inkwell.services.auth import AuthService

router = APIRouter(prefix="/api/auth", tags=["auth"])


# =============================================================================
# Request Models
# =============================================================================

USERNAME_PATTERN = r"^[a-zA-Z0-9_-]+$"


class SignupRequest(BaseModel):
    username: str = Field(min_length=3, max_length=30, pattern=USERNAME_PATTERN)
    email: EmailStr
    password: str = Field(min_length=6, max_length=100)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


# =============================================================================
# Public Endpoints
# =============================================================================

@router.post("/signup", status_code=201)
async def signup(
    data: SignupRequest,
    auth: AuthService = Depends(get_auth_service),
):
    """
    Create a new account.

    Returns the user and a bearer token on success.
    """
    result = await auth.signup(data.username, data.email, data.password)
    return ok(
        {"user": result.user, "token": result.token},
        message="User registered successfully",
    )


@router.post("/login")
async def login(
    data: LoginRequest,
    auth: AuthService = Depends(get_auth_service),
):
    """
    Authenticate and get a fresh token.
    """
    result = await auth.login(data.email, data.password)
    return ok(
        {"user": result.user, "token": result.token},
        message="Login successful",
    )


# =============================================================================
# Protected Endpoints
# =============================================================================

@router.get("/me")
async def get_current_user(ctx: AuthContext = Depends(require_auth)):
    """
    Get the current authenticated user.
    """
    return ok({"user": ctx.user})
