"""
FastAPI dependencies for reaching the services built by create_app.
"""

from fastapi import Request

from inkwell.services import ArticleService, AuthService, UserService


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


def get_article_service(request: Request) -> ArticleService:
    return request.app.state.article_service


def get_user_service(request: Request) -> UserService:
    return request.app.state.user_service
