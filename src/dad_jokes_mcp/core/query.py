"""Pull a usable search query out of whatever the caller sent."""

from __future__ import annotations

from typing import Any, Mapping, Optional

from .fields import first_match, non_blank
from .models import DEFAULT_LIMIT, SearchQuery

QUERY_FIELDS = ("query", "exercise", "exercise_name", "term", "q")


def extract_query(value: Any) -> str:
    """Derive the raw (untrimmed) query text from a string or an argument mapping.

    Named fields are probed in ``QUERY_FIELDS`` order. When none match and the
    mapping holds exactly one string property, that string is used; with zero
    or several candidates the result is ambiguous and ``""`` is returned.
    """
    if isinstance(value, str):
        return value
    if not isinstance(value, Mapping):
        return ""

    named = first_match(value, QUERY_FIELDS, non_blank)
    if named:
        return named

    strings = [v for v in value.values() if isinstance(v, str)]
    if len(strings) == 1:
        return strings[0]
    return ""


def build_search_query(value: Any, limit: Optional[int] = None) -> Optional[SearchQuery]:
    """Extract, trim, and validate. ``None`` means there is nothing to search for."""
    text = extract_query(value).strip()
    if not text:
        return None
    if limit is None or limit <= 0:
        limit = DEFAULT_LIMIT
    return SearchQuery(query=text, limit=limit)
