# =============================================================================
# Article API Routes
# =============================================================================
#
# Endpoints:
#   GET    /api/articles               - Paginated feed (public)
#   GET    /api/articles/{id_or_slug}  - One article (public)
#   POST   /api/articles               - Create (auth)
#   PUT    /api/articles/{article_id}  - Update (auth, author only)
#   DELETE /api/articles/{article_id}  - Delete (auth, author only)
#
# =============================================================================

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field, model_validator

from inkwell.api.deps import get_article_service
from inkwell.api.responses import ok
from inkwell.auth.context import AuthContext
from inkwell.auth.policies import require_auth
from inkwell.integrations.sentry import tag_article
from inkwell.services.articles import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE, ArticleService

router = APIRouter(prefix="/api/articles", tags=["articles"])


# =============================================================================
# Request Models
# =============================================================================

class CreateArticleRequest(BaseModel):
    title: str = Field(min_length=3, max_length=200)
    content: str = Field(min_length=10)


class UpdateArticleRequest(BaseModel):
    title: str | None = Field(default=None, min_length=3, max_length=200)
    content: str | None = Field(default=None, min_length=10)

    @model_validator(mode="after")
    def _at_least_one_field(self) -> "UpdateArticleRequest":
        if not self.title and not self.content:
            raise ValueError("At least one field (title or content) must be provided")
        return self


# =============================================================================
# Public Endpoints
# =============================================================================

@router.get("")
async def list_articles(
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    skip: int = Query(0, ge=0),
    articles: ArticleService = Depends(get_article_service),
):
    """Newest articles first."""
    page = await articles.list_articles(limit=limit, skip=skip)
    return ok(page)


@router.get("/{identifier}")
async def get_article(
    identifier: str,
    articles: ArticleService = Depends(get_article_service),
):
    """Fetch one article by id or slug."""
    tag_article(identifier)
    article = await articles.get_article(identifier)
    return ok({"article": article})


# =============================================================================
# Protected Endpoints
# =============================================================================

@router.post("", status_code=201)
async def create_article(
    data: CreateArticleRequest,
    ctx: AuthContext = Depends(require_auth),
    articles: ArticleService = Depends(get_article_service),
):
    """Publish a new article as the current user."""
    article = await articles.create_article(data.title, data.content, author_id=ctx.user_id)
    return ok({"article": article}, message="Article created successfully")


@router.put("/{article_id}")
async def update_article(
    article_id: str,
    data: UpdateArticleRequest,
    ctx: AuthContext = Depends(require_auth),
    articles: ArticleService = Depends(get_article_service),
):
    """Change title and/or content. Author only."""
    tag_article(article_id)
    article = await articles.update_article(
        article_id,
        ctx.user_id,
        title=data.title,
        content=data.content,
    )
    return ok({"article": article}, message="Article updated successfully")


@router.delete("/{article_id}")
async def delete_article(
    article_id: str,
    ctx: AuthContext = Depends(require_auth),
    articles: ArticleService = Depends(get_article_service),
):
    """Remove an article. Author only."""
    tag_article(article_id)
    message = await articles.delete_article(article_id, ctx.user_id)
    return ok({"message": message}, message=message)
