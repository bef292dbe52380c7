"""
FastAPI application for Inkwell.

`create_app(settings)` is the single composition point: it receives the
configuration explicitly, builds storage, repositories and services, and
wires routers and error handlers. Nothing is registered at import time.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from inkwell import __version__
from inkwell.api import articles as article_routes
from inkwell.api import users as user_routes
from inkwell.api.errors import install_error_handlers
from inkwell.auth import routes as auth_routes
from inkwell.auth.jwt import TokenIssuer
from inkwell.config import Settings
from inkwell.integrations.sentry import init_sentry
from inkwell.services import ArticleService, AuthService, UserService
from inkwell.storage import (
    ArticleRepository,
    MetadataStorage,
    UserRepository,
    create_storage,
)

logger = logging.getLogger(__name__)


def create_app(settings: Settings, storage: MetadataStorage | None = None) -> FastAPI:
    """
    Build the API.

    Args:
        settings: Application configuration
        storage: Optional pre-built storage backend (tests pass their own)
    """
    storage = storage or create_storage(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Initialize and cleanup app resources."""
        if init_sentry(settings):
            logger.info("Sentry error tracking enabled")

        await storage.initialize()
        logger.info(
            f"Inkwell API starting in {settings.environment} mode "
            f"({type(storage).__name__})"
        )

        yield

        await storage.close()
        logger.info("Inkwell API shutting down")

    app = FastAPI(
        title="Inkwell API",
        description="Publishing platform: accounts, articles and public profiles",
        version=__version__,
        lifespan=lifespan,
    )

    # ==========================================================================
    # Services
    # ==========================================================================

    users = UserRepository(storage)
    articles = ArticleRepository(storage)
    article_service = ArticleService(
        articles,
        users,
        slug_suffix_length=settings.slug_suffix_length,
        slug_max_attempts=settings.slug_max_attempts,
    )

    app.state.settings = settings
    app.state.storage = storage
    app.state.auth_service = AuthService(users, TokenIssuer.from_settings(settings))
    app.state.article_service = article_service
    app.state.user_service = UserService(users, article_service)

    # ==========================================================================
    # HTTP wiring
    # ==========================================================================

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    install_error_handlers(app, settings)

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "OK", "message": "Server is running"}

    app.include_router(auth_routes.router)
    app.include_router(article_routes.router)
    app.include_router(user_routes.router)

    return app
