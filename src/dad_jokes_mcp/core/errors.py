"""Error taxonomy shared by the API clients and the tool layer."""

from __future__ import annotations


class EndpointError(Exception):
    """Base class for everything the server raises on purpose."""


class ConfigurationError(EndpointError):
    """Required configuration (the RapidAPI key) is missing."""


class UpstreamError(EndpointError):
    """The third-party API answered with a non-2xx status."""

    def __init__(self, status: int, body: str = "", source: str = "MuscleWiki"):
        self.status = status
        self.body = body[:100]
        super().__init__(f"{source} API error ({status}): {self.body}")


class TransportError(EndpointError):
    """The request never produced a response (connect failure, timeout)."""


class ParseError(EndpointError):
    """A speculative JSON decode failed. Never leaves the normalizer."""
