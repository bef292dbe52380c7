"""
Tests for the Sentry integration helpers.

Sentry is never initialized here; the filters are plain functions and the
context helpers are checked against a patched SDK.
"""

import pytest
import sentry_sdk

from inkwell.core.errors import BadRequestError, InternalError, NotFoundError, UnauthorizedError
from inkwell.integrations import sentry


def _hint(error: Exception) -> dict:
    return {"exc_info": (type(error), error, None)}


# =============================================================================
# Event Filters
# =============================================================================


class TestScrubEvent:
    @pytest.mark.parametrize("error", [
        BadRequestError("Validation failed"),
        UnauthorizedError("No token provided"),
        NotFoundError("Article not found"),
    ])
    def test_drops_client_errors(self, error):
        assert sentry._scrub_event({}, _hint(error)) is None

    @pytest.mark.parametrize("error", [InternalError(), RuntimeError("kaboom")])
    def test_keeps_server_errors(self, error):
        event = {"message": "boom"}
        assert sentry._scrub_event(event, _hint(error)) is event

    def test_redacts_credentials(self):
        event = {
            "request": {
                "headers": {"Authorization": "Bearer abc", "Cookie": "sid=1", "Accept": "*/*"},
                "data": {"email": "bob@x.com", "password": "secret1"},
            },
        }
        scrubbed = sentry._scrub_event(event, {})

        headers = scrubbed["request"]["headers"]
        assert headers["Authorization"] == sentry.FILTERED
        assert headers["Cookie"] == sentry.FILTERED
        assert headers["Accept"] == "*/*"
        assert scrubbed["request"]["data"] == {"email": "bob@x.com", "password": sentry.FILTERED}

    def test_event_without_request(self):
        assert sentry._scrub_event({"level": "error"}, {}) == {"level": "error"}


class TestFilterTransactions:
    def test_health_dropped(self):
        assert sentry._filter_transactions({"transaction": "health_check"}, {}) is None
        assert sentry._filter_transactions({"transaction": "/health"}, {}) is None

    def test_others_kept(self):
        event = {"transaction": "get_article"}
        assert sentry._filter_transactions(event, {}) is event


# =============================================================================
# Setup / Context
# =============================================================================


class TestDisabled:
    def test_init_without_dsn(self, settings):
        assert sentry.init_sentry(settings) is False

    def test_capture_is_noop(self):
        assert sentry.capture_exception(RuntimeError("kaboom"), path="/x") is None


class TestContextHelpers:
    @pytest.fixture
    def recorded(self, monkeypatch):
        calls = []
        monkeypatch.setattr(sentry_sdk, "is_initialized", lambda: True)
        monkeypatch.setattr(sentry_sdk, "set_user", lambda user: calls.append(("user", user)))
        monkeypatch.setattr(sentry_sdk, "set_tag", lambda key, value: calls.append(("tag", key, value)))
        return calls

    def test_set_user_omits_email(self, recorded):
        sentry.set_user("user_1", "bob")
        assert recorded == [("user", {"id": "user_1", "username": "bob"})]

    def test_tag_article(self, recorded):
        sentry.tag_article("art_1")
        assert recorded == [("tag", "article_id", "art_1")]
