"""Request/response values, retry policy tables and the error envelope."""

from __future__ import annotations

import json
from dataclasses import dataclass, field, replace
from typing import Any, Mapping, Optional

import httpx
from pydantic import BaseModel, ConfigDict, Field

from .errors import CatalogError, HTTPError, ParseError, RequestCancelled, RetryExhausted

UNKNOWN_FAILURE_STATUS = 500


class ErrorEnvelope(BaseModel):
    """Uniform error shape handed to screens instead of raising."""

    model_config = ConfigDict(populate_by_name=True)

    status: int
    is_error: bool = Field(default=True, alias="isError")
    error: str
    kind: str = HTTPError.kind
    cancelled: bool = False


@dataclass(frozen=True)
class Request:
    method: str
    url: str
    headers: Mapping[str, str] = field(default_factory=dict)
    body: Optional[bytes] = None

    def replay(self, **changes: Any) -> "Request":
        """Return a new request with the same fields apart from ``changes``."""
        return replace(self, **changes)

    def with_headers(self, extra: Mapping[str, str]) -> "Request":
        headers = dict(self.headers)
        headers.update(extra)
        return self.replay(headers=headers)


@dataclass(frozen=True)
class Response:
    status: int
    headers: Mapping[str, str] = field(default_factory=dict)
    body: bytes = b""
    error: Optional[CatalogError] = None
    exhausted: bool = False

    @classmethod
    def empty(cls) -> "Response":
        return cls(status=0)

    @classmethod
    def failure(cls, error: CatalogError) -> "Response":
        return cls(status=error.status or 0, error=error)

    @property
    def is_empty(self) -> bool:
        return self.status == 0 and self.error is None and not self.body

    @property
    def ok(self) -> bool:
        return self.error is None and 200 <= self.status < 300

    @property
    def reason(self) -> str:
        return httpx.codes.get_reason_phrase(self.status)

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")

    def json(self) -> Any:
        try:
            return json.loads(self.body)
        except (ValueError, UnicodeDecodeError) as exc:
            raise ParseError(f"Response body is not valid JSON: {exc}", status=self.status) from exc

    def to_envelope(self) -> ErrorEnvelope:
        if self.error is not None:
            return ErrorEnvelope(
                status=self.error.status or self.status or UNKNOWN_FAILURE_STATUS,
                error=self.error.message,
                kind=self.error.kind,
                cancelled=isinstance(self.error, RequestCancelled),
            )
        if self.is_empty:
            return ErrorEnvelope(status=401, error="Re-authentication was rejected", kind="unauthorized")
        kind = RetryExhausted.kind if self.exhausted else HTTPError.kind
        return ErrorEnvelope(
            status=self.status,
            error=f"Request failed with status {self.status}: {self.reason}",
            kind=kind,
        )


@dataclass(frozen=True)
class RetryRule:
    """What to do when a response comes back with a given status.

    ``target`` is the URL of the secondary call; ``None`` means the URL of the
    request that triggered the rule. With ``reauthenticate`` set, the secondary
    call is a login and the original request is replayed after it succeeds.
    """

    target: Optional[str] = None
    method: Optional[str] = None
    headers: Mapping[str, str] = field(default_factory=dict)
    body: Optional[bytes] = None
    max_attempts: int = 1
    reauthenticate: bool = False

    def __post_init__(self) -> None:
        if self.max_attempts < 0:
            raise ValueError("max_attempts must be >= 0")
        if self.reauthenticate and not self.target:
            raise ValueError("A re-authentication rule needs a target")

    def build_request(self, original: Request) -> Request:
        if self.reauthenticate:
            return Request(
                method=self.method or "POST",
                url=self.target or original.url,
                headers=dict(self.headers),
                body=self.body,
            )
        return Request(
            method=self.method or original.method,
            url=self.target or original.url,
            headers=dict(self.headers) or dict(original.headers),
            body=self.body if self.body is not None else original.body,
        )


@dataclass(frozen=True)
class RetryPolicy:
    rules: Mapping[int, RetryRule] = field(default_factory=dict)
    max_attempts: int = 3

    def __post_init__(self) -> None:
        if self.max_attempts < 0:
            raise ValueError("max_attempts must be >= 0")

    def rule_for(self, status: int) -> Optional[RetryRule]:
        return self.rules.get(status)


__all__ = [
    "ErrorEnvelope",
    "Request",
    "Response",
    "RetryRule",
    "RetryPolicy",
]
