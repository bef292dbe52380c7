"""
Inkwell - command line entry point.

    inkwell serve           Run the API with uvicorn
    inkwell seed            Replace stored data with sample users and articles
"""

from __future__ import annotations

import argparse
import asyncio
import logging

import uvicorn

from inkwell.api.app import create_app
from inkwell.auth.jwt import TokenIssuer
from inkwell.config import Settings, get_settings
from inkwell.services import ArticleService, AuthService
from inkwell.storage import ArticleRepository, UserRepository, create_storage

logger = logging.getLogger(__name__)


SAMPLE_USERS = [
    {
        "username": "johndoe",
        "email": "john@example.com",
        "password": "password123",
        "bio": "Tech enthusiast and full-stack developer",
    },
    {
        "username": "janedoe",
        "email": "jane@example.com",
        "password": "password123",
        "bio": "Writer, designer, and creative thinker",
    },
    {
        "username": "alexsmith",
        "email": "alex@example.com",
        "password": "password123",
        "bio": "Software engineer passionate about clean code",
    },
]

SAMPLE_ARTICLES = [
    {
        "title": "Getting Started with Document Databases",
        "content": "Document stores let you keep related data together and evolve schemas as you go...",
    },
    {
        "title": "Understanding JWT Authentication",
        "content": "JSON Web Tokens have become the standard for securing stateless web APIs...",
    },
    {
        "title": "Writing Readable Python",
        "content": "Readable code is mostly about names, small functions, and saying things once...",
    },
    {
        "title": "Building REST APIs with FastAPI",
        "content": "FastAPI makes it easy to build typed, documented HTTP APIs in very little code...",
    },
    {
        "title": "Schema Design Tips",
        "content": "Designing your collections correctly from the start saves painful migrations later...",
    },
    {
        "title": "Pagination Without Tears",
        "content": "Limit and skip are simple, but cursors scale better once the feed gets long...",
    },
]


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def app_factory():
    """Used by uvicorn (factory mode) so reload workers build their own app."""
    settings = get_settings()
    configure_logging(settings)
    return create_app(settings)


# =============================================================================
# Commands
# =============================================================================


def serve(settings: Settings) -> None:
    uvicorn.run(
        "inkwell.main:app_factory",
        factory=True,
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug and not settings.is_production,
        log_level=settings.log_level.lower(),
    )


async def seed(settings: Settings) -> dict[str, int]:
    """
    Clear users and articles, then insert the sample data.

    Articles are handed out to the sample users in turn.
    """
    if settings.is_production:
        raise RuntimeError("Refusing to seed a production database")

    storage = create_storage(settings)
    if not settings.use_mongo:
        logger.warning("DATABASE_URL is not a MongoDB URL - seeding the in-memory store (lost on exit)")

    await storage.initialize()
    try:
        users = UserRepository(storage)
        articles = ArticleRepository(storage)
        auth = AuthService(users, TokenIssuer.from_settings(settings))
        article_service = ArticleService(
            articles,
            users,
            slug_suffix_length=settings.slug_suffix_length,
            slug_max_attempts=settings.slug_max_attempts,
        )

        removed_articles = await articles.delete_all()
        removed_users = await users.delete_all()
        logger.info(f"Cleared {removed_articles} articles and {removed_users} users")

        created = []
        for sample in SAMPLE_USERS:
            result = await auth.signup(
                sample["username"],
                sample["email"],
                sample["password"],
                bio=sample["bio"],
            )
            created.append(result.user)
            logger.info(f"Created user: {result.user.username}")

        for i, sample in enumerate(SAMPLE_ARTICLES):
            author = created[i % len(created)]
            article = await article_service.create_article(sample["title"], sample["content"], author.id)
            logger.info(f"Created article: {article.title}")
    finally:
        await storage.close()

    return {"users": len(SAMPLE_USERS), "articles": len(SAMPLE_ARTICLES)}


# =============================================================================
# CLI
# =============================================================================


def main(argv: list[str] | None = None) -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(prog="inkwell", description="Inkwell publishing API")
    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("serve", help="Run the API server")
    sub.add_parser("seed", help="Replace stored data with sample users and articles")

    args = parser.parse_args(argv)

    settings = get_settings()
    configure_logging(settings)

    if args.command == "serve":
        serve(settings)
    elif args.command == "seed":
        counts = asyncio.run(seed(settings))
        print(f"Users created: {counts['users']}")
        print(f"Articles created: {counts['articles']}")
        print("Test credentials:")
        for sample in SAMPLE_USERS:
            print(f"  Email: {sample['email']} | Password: {sample['password']}")


if __name__ == "__main__":
    main()
