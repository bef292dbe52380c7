# =============================================================================
# Sentry Error Tracking Integration
# =============================================================================
#
# Setup:
#   1. Create a Python project at sentry.io
#   2. Copy DSN to .env: SENTRY_DSN=https://...@sentry.io/...
#
# Usage:
#   create_app() calls init_sentry(settings) during startup.
#   require_auth tags the acting user; article routes tag the article.
#   Without a DSN every helper here is a no-op.
#
# =============================================================================

import logging

import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.logging import LoggingIntegration
from sentry_sdk.integrations.starlette import StarletteIntegration

from inkwell import __version__
from inkwell.config import Settings
from inkwell.core.errors import ApiError

logger = logging.getLogger(__name__)

FILTERED = "[Filtered]"
SENSITIVE_HEADERS = ("authorization", "cookie")
SENSITIVE_FIELDS = ("password", "token")
QUIET_TRANSACTIONS = ("/health", "health_check")


def init_sentry(settings: Settings) -> bool:
    """
    Initialize Sentry error tracking.

    Returns True if initialized, False if skipped.
    """
    if not settings.sentry_dsn:
        logger.info("SENTRY_DSN not set - error tracking disabled")
        return False

    sentry_sdk.init(
        dsn=settings.sentry_dsn,
        environment=settings.environment,
        release=f"inkwell@{__version__}",
        traces_sample_rate=0.1 if settings.is_production else 1.0,
        integrations=[
            FastApiIntegration(transaction_style="endpoint"),
            StarletteIntegration(transaction_style="endpoint"),
            LoggingIntegration(level=logging.INFO, event_level=logging.ERROR),
        ],
        send_default_pii=False,
        before_send=_scrub_event,
        before_send_transaction=_filter_transactions,
    )

    logger.info(f"Sentry initialized for {settings.environment}")
    return True


# =============================================================================
# Event Filters
# =============================================================================


def _scrub_event(event: dict, hint: dict) -> dict | None:
    """
    Drop expected client errors and redact credentials.

    ApiErrors below 500 (bad input, 401, 403, 404) are normal traffic.
    Bearer tokens, cookies and password fields never leave the process.
    """
    exc_info = hint.get("exc_info")
    if exc_info:
        error = exc_info[1]
        if isinstance(error, ApiError) and error.status_code < 500:
            return None

    request = event.get("request") or {}
    headers = request.get("headers") or {}
    for key in list(headers):
        if key.lower() in SENSITIVE_HEADERS:
            headers[key] = FILTERED

    data = request.get("data")
    if isinstance(data, dict):
        for key in list(data):
            if key.lower() in SENSITIVE_FIELDS:
                data[key] = FILTERED

    return event


def _filter_transactions(event: dict, hint: dict) -> dict | None:
    """Drop health check transactions."""
    if event.get("transaction") in QUIET_TRANSACTIONS:
        return None
    return event


# =============================================================================
# Context Helpers
# =============================================================================


def capture_exception(error: Exception, **context) -> str | None:
    """
    Capture an exception to Sentry.

    Returns the event ID if captured, None otherwise.
    """
    if not sentry_sdk.is_initialized():
        return None

    with sentry_sdk.new_scope() as scope:
        for key, value in context.items():
            scope.set_extra(key, value)
        return sentry_sdk.capture_exception(error)


def set_user(user_id: str, username: str | None = None) -> None:
    """Attach the authenticated user (id and username, no email) to events."""
    if sentry_sdk.is_initialized():
        sentry_sdk.set_user({"id": user_id, "username": username})


def tag_article(article_id: str) -> None:
    """Tag events from this request with the article being read or changed."""
    if sentry_sdk.is_initialized():
        sentry_sdk.set_tag("article_id", article_id)
