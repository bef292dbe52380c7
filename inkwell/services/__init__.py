"""
Services - the business logic between the HTTP layer and storage.
"""

from inkwell.services.auth import AuthResult, AuthService
from inkwell.services.articles import ArticleService
from inkwell.services.users import UserService

__all__ = [
    "AuthResult",
    "AuthService",
    "ArticleService",
    "UserService",
]
