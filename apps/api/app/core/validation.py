"""Request validation error formatting."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from app.errors import ApiError, unprocessable

_LOCATION_NAMES = {"path": "params"}


def _field_path(loc: Iterable[Any]) -> str:
    parts = [str(part) for part in loc]
    if not parts:
        return "request"
    parts[0] = _LOCATION_NAMES.get(parts[0], parts[0])
    return ".".join(parts)


def _message(error: Mapping[str, Any]) -> str:
    message = str(error.get("msg") or "Invalid value")
    # pydantic prefixes messages raised from custom validators.
    return message.removeprefix("Value error, ")


def format_validation_errors(errors: Iterable[Mapping[str, Any]]) -> dict[str, list[str]]:
    """Group every violation by ``<section>.<field>`` path, keeping all messages."""
    formatted: dict[str, list[str]] = {}
    for error in errors:
        formatted.setdefault(_field_path(error.get("loc", ())), []).append(_message(error))
    return formatted


def validation_error(errors: Iterable[Mapping[str, Any]]) -> ApiError:
    return unprocessable(format_validation_errors(errors))


__all__ = ["format_validation_errors", "validation_error"]
