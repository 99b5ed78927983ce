"""Helpers for probing loosely-typed records by candidate field names."""

from __future__ import annotations

from typing import Any, Callable, Mapping, Sequence, TypeVar

T = TypeVar("T")


def first_match(
    record: Mapping[str, Any],
    fields: Sequence[str],
    coerce: Callable[[Any], T],
) -> T | None:
    """Return the first truthy ``coerce(record[field])`` over ``fields``, in order."""
    for field in fields:
        if field not in record:
            continue
        value = coerce(record[field])
        if value:
            return value
    return None


def first_string(value: Any) -> str:
    """A string as-is, or the first string inside a list; otherwise ``""``."""
    if isinstance(value, str):
        return value
    if isinstance(value, list):
        return next((item for item in value if isinstance(item, str)), "")
    return ""


def string_array(value: Any) -> list[str]:
    """Every string in a list, or a lone string wrapped in a list."""
    if isinstance(value, list):
        return [item for item in value if isinstance(item, str)]
    if isinstance(value, str):
        return [value]
    return []


def non_blank(value: Any) -> str:
    """The value when it is a string with visible content, else ``""``."""
    if isinstance(value, str) and value.strip():
        return value
    return ""


def absolute_url(value: Any) -> str:
    candidate = first_string(value)
    return candidate if candidate.startswith("http") else ""
