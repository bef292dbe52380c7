"""
Core domain: models, errors and helpers shared by every layer.
"""

from inkwell.core.errors import (
    ApiError,
    BadRequestError,
    ConflictError,
    UnauthorizedError,
    ForbiddenError,
    NotFoundError,
    InternalError,
)
from inkwell.core.models import (
    Author,
    User,
    UserInDB,
    Article,
    ArticleInDB,
    ArticlePage,
    Profile,
)
from inkwell.core.slug import generate_slug
from inkwell.core.utils import generate_id, utc_now

__all__ = [
    # Errors
    "ApiError",
    "BadRequestError",
    "ConflictError",
    "UnauthorizedError",
    "ForbiddenError",
    "NotFoundError",
    "InternalError",
    # Models
    "Author",
    "User",
    "UserInDB",
    "Article",
    "ArticleInDB",
    "ArticlePage",
    "Profile",
    # Helpers
    "generate_slug",
    "generate_id",
    "utc_now",
]
