"""
Shared fixtures: an in-memory store, the services on top of it, and an
API client wired to the same store.
"""

import pytest
from fastapi.testclient import TestClient

from inkwell.api.app import create_app
from inkwell.auth.jwt import TokenIssuer
from inkwell.config import Settings
from inkwell.services import ArticleService, AuthService, UserService
from inkwell.storage import ArticleRepository, InMemoryMetadataStorage, UserRepository

TEST_SECRET = "test-jwt-secret"


# =============================================================================
# Settings / Storage
# =============================================================================


@pytest.fixture
def settings():
    """Test settings, isolated from any local .env file."""
    return Settings(
        _env_file=None,
        environment="testing",
        jwt_secret_key=TEST_SECRET,
        database_url="",
        sentry_dsn="",
    )


@pytest.fixture
def storage():
    """Fresh in-memory store."""
    return InMemoryMetadataStorage()


@pytest.fixture
def users(storage):
    return UserRepository(storage)


@pytest.fixture
def articles(storage):
    return ArticleRepository(storage)


# =============================================================================
# Services
# =============================================================================


@pytest.fixture
def tokens():
    return TokenIssuer(TEST_SECRET)


@pytest.fixture
def auth_service(users, tokens):
    return AuthService(users, tokens)


@pytest.fixture
def article_service(articles, users):
    return ArticleService(articles, users, slug_max_attempts=3)


@pytest.fixture
def user_service(users, article_service):
    return UserService(users, article_service)


# =============================================================================
# API
# =============================================================================


@pytest.fixture
def app(settings, storage):
    return create_app(settings, storage=storage)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def signup(client):
    """Sign a user up through the API; returns (token, user)."""

    def _signup(username: str, email: str | None = None, password: str = "secret1"):
        response = client.post(
            "/api/auth/signup",
            json={
                "username": username,
                "email": email or f"{username}@example.com",
                "password": password,
            },
        )
        assert response.status_code == 201, response.text
        data = response.json()["data"]
        return data["token"], data["user"]

    return _signup
