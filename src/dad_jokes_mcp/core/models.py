"""Pydantic data models for the request-scoped values passed between layers."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field

DEFAULT_LIMIT = 10
DEBUG_RAW_CHARS = 500


class DadJoke(BaseModel):
    """A joke from icanhazdadjoke.com."""

    id: str = ""
    joke: str = ""


class SearchQuery(BaseModel):
    """A validated exercise search: trimmed, non-empty text plus a result limit."""

    query: str = Field(min_length=1)
    limit: int = Field(DEFAULT_LIMIT, gt=0)


class UpstreamResponse(BaseModel):
    """What the search client hands back: the untouched body plus where it came from."""

    text: str = ""
    status: int = 0
    url: str = ""


class DebugTrace(BaseModel):
    """Diagnostics carried alongside search results. Never used for control flow."""

    url: str
    status: int
    raw: str = Field("", max_length=DEBUG_RAW_CHARS)

    @classmethod
    def from_response(cls, response: UpstreamResponse) -> "DebugTrace":
        return cls(url=response.url, status=response.status, raw=response.text[:DEBUG_RAW_CHARS])


class ExerciseCard(BaseModel):
    """Display fields the exercise widget renders for one result."""

    name: str
    description: str = ""
    image: str = Field("", description="Proxied image path, empty when no image qualifies")
    equipment: str = ""
    level: str = ""
    muscles: list[str] = Field(default_factory=list)


class SearchResult(BaseModel):
    """Output of the exercise search tool."""

    query: str
    results: list[dict[str, Any]] = Field(default_factory=list)
    count: int = 0
    cards: list[ExerciseCard] = Field(default_factory=list)
    debug: Optional[DebugTrace] = None
