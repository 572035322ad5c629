"""HTTP transports the request pipeline sends through."""

from __future__ import annotations

import logging
from typing import Mapping, Optional, Protocol

import httpx

from .errors import ParseError, TransportError
from .models import Response

logger = logging.getLogger("catalog.transport")


class Transport(Protocol):
    async def __call__(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        body: Optional[bytes],
    ) -> Response:  # pragma: no cover - interface
        ...


class HttpxTransport:
    """Sends requests with an ``httpx.AsyncClient`` and normalises failures.

    Network-level problems (refused connections, DNS, timeouts) surface as
    :class:`TransportError`, bodies httpx cannot decode as :class:`ParseError`;
    every HTTP status, including 4xx/5xx, is returned as a :class:`Response`.
    """

    def __init__(
        self,
        base_url: str = "",
        *,
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout, transport=transport)

    async def __aenter__(self) -> "HttpxTransport":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def __call__(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        body: Optional[bytes],
    ) -> Response:
        try:
            response = await self._client.request(method, url, headers=dict(headers), content=body)
        except httpx.DecodingError as exc:
            logger.warning("Undecodable response body method=%s url=%s", method, url)
            raise ParseError(f"Response body could not be decoded: {exc}") from exc
        except httpx.RequestError as exc:
            logger.warning("Transport failure method=%s url=%s error=%s", method, url, exc.__class__.__name__)
            raise TransportError(f"{exc.__class__.__name__}: {exc}") from exc
        return Response(status=response.status_code, headers=dict(response.headers), body=response.content)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()


__all__ = ["Transport", "HttpxTransport"]
