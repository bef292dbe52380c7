"""
Response envelopes.

Every success body is `{success: true, message?, data}`; every error body
is `{success: false, message, errors?}` (see inkwell.api.errors).
"""

from __future__ import annotations

from typing import Any


def ok(data: Any = None, message: str | None = None) -> dict[str, Any]:
    body: dict[str, Any] = {"success": True}
    if message:
        body["message"] = message
    body["data"] = data if data is not None else {}
    return body


def fail(message: str, errors: list[dict[str, Any]] | None = None) -> dict[str, Any]:
    body: dict[str, Any] = {"success": False, "message": message}
    if errors:
        body["errors"] = errors
    return body
