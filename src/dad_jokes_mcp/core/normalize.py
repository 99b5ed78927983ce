"""Normalization of upstream JSON whose shape is not guaranteed.

The MuscleWiki API answers with a bare array on some endpoints and an object
with ``results`` on others, and by the time a tool result has round-tripped
through an MCP client the same list may arrive wrapped in ``structuredContent``
or serialized into a ``content`` text part. These helpers find the list either
way.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Optional

from .errors import ParseError
from .fields import first_match, string_array

logger = logging.getLogger(__name__)

MAX_DEPTH = 4

GROUP_FIELDS = ("name", "group", "muscle_group", "category")


def _loads(text: str) -> Any:
    try:
        return json.loads(text)
    except ValueError as exc:
        raise ParseError(str(exc)) from exc


def parse_payload(raw: str) -> Any:
    """Decode a response body, keeping the raw text when it is not JSON."""
    try:
        return _loads(raw)
    except ParseError:
        logger.debug("Response body is not JSON (%d chars), keeping raw text", len(raw))
        return raw


def find_result_list(value: Any, depth: int = 0) -> Optional[list]:
    """Return the first list of records found in ``value``, or ``None``.

    An empty list is a match ("found, but empty"); ``None`` means nothing
    list-like was found. JSON text nested inside the value is decoded and
    searched as well, up to ``MAX_DEPTH`` levels deep.
    """
    if depth > MAX_DEPTH or value is None:
        return None

    if isinstance(value, list):
        if not value:
            return []
        if isinstance(value[0], dict):
            return value

    if isinstance(value, dict):
        if isinstance(value.get("results"), list):
            return value["results"]

        structured = value.get("structuredContent")
        if isinstance(structured, dict) and isinstance(structured.get("results"), list):
            return structured["results"]

        content = value.get("content")
        if isinstance(content, list):
            for part in content:
                if not isinstance(part, dict) or part.get("type") != "text":
                    continue
                text = part.get("text")
                if not isinstance(text, str):
                    continue
                try:
                    parsed = _loads(text)
                except ParseError:
                    continue
                found = find_result_list(parsed, depth + 1)
                if found is not None:
                    return found

    if isinstance(value, str) and value.strip().startswith("{"):
        try:
            parsed = _loads(value)
        except ParseError:
            return None
        return find_result_list(parsed, depth + 1)

    return None


def _populated(value: Any) -> list[str]:
    return [name.strip() for name in string_array(value) if name.strip()]


def _group_names(entry: Any) -> list[str]:
    if isinstance(entry, dict):
        return first_match(entry, GROUP_FIELDS, _populated) or []
    return _populated(entry) if isinstance(entry, str) else []


def aggregate_groups(payload: Any) -> list[str]:
    """Flatten muscle-group entries into a sorted list of unique names.

    Entries may be bare strings or objects naming the group under one of
    ``GROUP_FIELDS`` (as a string or a list of strings). Anything else is
    skipped, and a payload that is not a list yields ``[]``.
    """
    if not isinstance(payload, list):
        return []

    groups: set[str] = set()
    for entry in payload:
        groups.update(_group_names(entry))
    return sorted(groups)
