"""Runtime settings read from environment variables.

Settings are loaded once at startup and passed explicitly into every client
function, so nothing below the server module touches ``os.environ``.
"""

from __future__ import annotations

import os
from typing import Mapping, Optional
from urllib.parse import urlparse

from pydantic import BaseModel, Field

from .errors import ConfigurationError

# Checked in order; the first one that is set wins.
API_KEY_ENV_VARS = ("RAPIDAPI_KEY", "MUSCLEWIKI_API_KEY")

DEFAULT_MCP_URL = "http://localhost:3000"
DEFAULT_MUSCLEWIKI_BASE_URL = "https://musclewiki-api.p.rapidapi.com"
DEFAULT_MUSCLEWIKI_HOST = "musclewiki-api.p.rapidapi.com"
MUSCLEWIKI_MEDIA_HOST = "media.musclewiki.com"
DEFAULT_IMAGE_HOSTS = (MUSCLEWIKI_MEDIA_HOST, DEFAULT_MUSCLEWIKI_HOST)


class Settings(BaseModel):
    """Process-wide, immutable configuration."""

    model_config = {"frozen": True}

    api_key: Optional[str] = Field(None, description="RapidAPI key for MuscleWiki")
    mcp_url: str = Field(DEFAULT_MCP_URL, description="Public base URL of this server")
    musclewiki_base_url: str = DEFAULT_MUSCLEWIKI_BASE_URL
    musclewiki_host: str = DEFAULT_MUSCLEWIKI_HOST
    image_hosts: tuple[str, ...] = DEFAULT_IMAGE_HOSTS
    timeout_seconds: float = Field(30.0, gt=0)
    connect_timeout_seconds: float = Field(10.0, gt=0)
    transport: str = "streamable-http"
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        api_key = next((env[name] for name in API_KEY_ENV_VARS if env.get(name)), None)
        musclewiki_host = env.get("MUSCLEWIKI_HOST") or DEFAULT_MUSCLEWIKI_HOST
        return cls(
            api_key=api_key,
            mcp_url=env.get("MCP_URL") or DEFAULT_MCP_URL,
            musclewiki_base_url=(env.get("MUSCLEWIKI_BASE_URL") or DEFAULT_MUSCLEWIKI_BASE_URL).rstrip("/"),
            musclewiki_host=musclewiki_host,
            image_hosts=(MUSCLEWIKI_MEDIA_HOST, musclewiki_host),
            timeout_seconds=float(env.get("HTTP_TIMEOUT_SECONDS") or 30.0),
            transport=env.get("MCP_TRANSPORT") or "streamable-http",
            log_level=(env.get("LOG_LEVEL") or "INFO").upper(),
        )

    @property
    def port(self) -> int:
        return urlparse(self.mcp_url).port or 3000


def resolve_api_key(settings: Settings) -> str:
    """Return the RapidAPI key or fail fast with a message naming the variables."""
    if not settings.api_key:
        raise ConfigurationError(
            f"Missing RapidAPI key. Set {API_KEY_ENV_VARS[0]} (or {API_KEY_ENV_VARS[1]}) and restart the server."
        )
    return settings.api_key
