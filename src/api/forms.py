"""Helpers shared by handlers that accept form-like JSON submissions."""

from __future__ import annotations

import json
from typing import Any

from fastapi import Request
from pydantic import ValidationError


MALFORMED_BODY = {"__root__": ["Request body is not valid JSON"]}


def field_errors(exc: ValidationError) -> dict[str, list[str]]:
    """Group pydantic errors by dotted field path for form re-rendering."""
    fields: dict[str, list[str]] = {}
    for err in exc.errors():
        path = ".".join(str(part) for part in err["loc"]) or "__root__"
        fields.setdefault(path, []).append(err["msg"])
    return fields


async def read_submission(request: Request) -> dict[str, Any]:
    """Read the submitted JSON object from the request body.

    Handlers call this after their ``authorize`` dependency has run, so an
    anonymous caller is redirected to login whatever the body holds. An empty
    body reads as ``{}``; bytes that are not JSON raise ``ValueError``.
    """
    raw = await request.body()
    if not raw.strip():
        return {}
    return submitted_fields(json.loads(raw))


def submitted_fields(payload: Any) -> dict[str, Any]:
    """Return the submitted object, or an empty one for non-object bodies."""
    return payload if isinstance(payload, dict) else {}


def submitted_text(payload: dict[str, Any], key: str) -> str:
    value = payload.get(key)
    return value if isinstance(value, str) else ""


def submitted_ids(payload: dict[str, Any], key: str) -> list[str]:
    value = payload.get(key)
    if not isinstance(value, list):
        return []
    return [str(item) for item in value]
