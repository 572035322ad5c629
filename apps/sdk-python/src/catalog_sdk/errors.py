"""Error kinds raised inside the SDK and surfaced to callers as envelopes."""

from __future__ import annotations

from typing import Optional


class CatalogError(Exception):
    kind = "error"

    def __init__(self, message: str, *, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.status = status


class TransportError(CatalogError):
    """Connection, DNS or timeout failure before any response arrived."""

    kind = "transport"


class HTTPError(CatalogError):
    kind = "http"


class RetryExhausted(CatalogError):
    kind = "retry_exhausted"


class ParseError(CatalogError):
    """Response body was not valid JSON."""

    kind = "parse"


class RequestCancelled(CatalogError):
    kind = "cancelled"


__all__ = [
    "CatalogError",
    "TransportError",
    "HTTPError",
    "RetryExhausted",
    "ParseError",
    "RequestCancelled",
]
