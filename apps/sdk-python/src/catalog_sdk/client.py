"""Python client for the movie catalog REST API."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Mapping, Optional, Union

import httpx

from .config import ClientConfig
from .errors import ParseError
from .models import ErrorEnvelope, Request, Response, RetryPolicy
from .pipeline import RequestPipeline
from .transport import HttpxTransport, Transport

logger = logging.getLogger("catalog.client")

JSONResult = Union[Any, ErrorEnvelope]


def bearer_from_login(original: Request, response: Response) -> Request:
    """Replay ``original`` with the token issued by the login endpoint."""
    data = response.json()
    token = data.get("token") if isinstance(data, dict) else None
    if not token:
        raise ParseError("Login response did not include a token", status=response.status)
    return original.with_headers({"Authorization": f"Bearer {token}"})


def decode_json(response: Response) -> JSONResult:
    if not response.ok:
        return response.to_envelope()
    try:
        return response.json()
    except ParseError as exc:
        return Response.failure(exc).to_envelope()


class CatalogClient:
    def __init__(
        self,
        config: ClientConfig,
        *,
        transport: Optional[Transport] = None,
        pipeline: Optional[RequestPipeline] = None,
        http_transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._config = config
        self._owned_transport: Optional[HttpxTransport] = None
        if transport is None:
            self._owned_transport = HttpxTransport(
                config.base_url, timeout=config.timeout, transport=http_transport
            )
            transport = self._owned_transport
        self._pipeline = pipeline or RequestPipeline(
            transport,
            config.retry_policy(),
            on_reauthenticated=bearer_from_login,
        )
        # Login answers are final; a 401 there must not trigger re-authentication.
        self._direct = RequestPipeline(transport, RetryPolicy(max_attempts=0))

    async def __aenter__(self) -> "CatalogClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    @property
    def config(self) -> ClientConfig:
        return self._config

    def _headers(self) -> Dict[str, str]:
        headers = {
            "Accept": "application/json",
            "Content-Type": "application/json",
            "User-Agent": self._config.user_agent,
        }
        headers.update(self._config.headers)
        return headers

    async def fetch_json(
        self,
        path: str,
        *,
        params: Optional[Mapping[str, Any]] = None,
        cancel: Optional[asyncio.Event] = None,
    ) -> JSONResult:
        url = f"{path}?{httpx.QueryParams(params)}" if params else path
        response = await self._pipeline.send(Request("GET", url, self._headers()), cancel=cancel)
        result = decode_json(response)
        if isinstance(result, ErrorEnvelope):
            logger.warning("GET %s failed kind=%s status=%s", url, result.kind, result.status)
        return result

    async def get_all_movies(self, *, cancel: Optional[asyncio.Event] = None) -> JSONResult:
        return await self.fetch_json("/api/main/movies/", cancel=cancel)

    async def get_movie(self, movie_id: Union[int, str], *, cancel: Optional[asyncio.Event] = None) -> JSONResult:
        return await self.fetch_json(f"/api/main/movies/{movie_id}", cancel=cancel)

    async def get_movie_actors(
        self, movie_id: Union[int, str], *, cancel: Optional[asyncio.Event] = None
    ) -> JSONResult:
        return await self.fetch_json("/api/main/actors", params={"movieId": movie_id}, cancel=cancel)

    async def get_movie_directors(
        self, movie_id: Union[int, str], *, cancel: Optional[asyncio.Event] = None
    ) -> JSONResult:
        return await self.fetch_json("/api/main/directors", params={"movieId": movie_id}, cancel=cancel)

    async def get_movie_reviews(
        self,
        movie_id: Union[int, str],
        page: int = 0,
        size: int = 50,
        *,
        cancel: Optional[asyncio.Event] = None,
    ) -> JSONResult:
        return await self.fetch_json(
            f"/api/main/movie-reviews/reviews/{movie_id}",
            params={"number": page, "size": size},
            cancel=cancel,
        )

    async def login(self, username: str, password: str) -> JSONResult:
        request = Request(
            "POST",
            self._config.login_path,
            self._headers(),
            self._config.login_body(username, password),
        )
        response = await self._direct.send(request)
        if response.error is None and not response.ok:
            logger.info("Login rejected status=%s", response.status)
            return ErrorEnvelope(status=response.status, error=response.text or "Invalid email or password.")
        return decode_json(response)

    async def aclose(self) -> None:
        if self._owned_transport is not None:
            await self._owned_transport.aclose()


__all__ = ["CatalogClient", "bearer_from_login", "decode_json"]
