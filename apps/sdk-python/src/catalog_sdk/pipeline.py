"""Status-driven retry and re-authentication around an injectable transport."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import replace
from typing import Callable, Dict, Optional, Tuple

import httpx

from .errors import ParseError, RequestCancelled, TransportError
from .models import Request, Response, RetryPolicy, RetryRule
from .transport import Transport

logger = logging.getLogger("catalog.pipeline")

ReauthHook = Callable[[Request, Response], Request]


def replay_unchanged(original: Request, reauth_response: Response) -> Request:
    return original.replay()


class _AttemptCounter:
    """Retry budget for one request chain; discarded when the chain resolves."""

    def __init__(self, policy: RetryPolicy) -> None:
        self.remaining = policy.max_attempts
        self._fired: Dict[int, int] = {}

    def consume(self, status: int, rule: RetryRule) -> bool:
        fired = self._fired.get(status, 0)
        if self.remaining <= 0 or fired >= rule.max_attempts:
            return False
        self._fired[status] = fired + 1
        self.remaining -= 1
        return True


class RequestPipeline:
    """Explicit wrapper that callers construct and send requests through.

    Nothing here touches process-wide HTTP state: each pipeline holds its own
    transport handle and policy, and each call to :meth:`send` gets its own
    attempt counter.
    """

    def __init__(
        self,
        transport: Transport,
        policy: Optional[RetryPolicy] = None,
        *,
        on_reauthenticated: Optional[ReauthHook] = None,
    ) -> None:
        self._transport = transport
        self._policy = policy or RetryPolicy()
        self._on_reauthenticated = on_reauthenticated or replay_unchanged

    async def send(self, request: Request, *, cancel: Optional[asyncio.Event] = None) -> Response:
        attempts = _AttemptCounter(self._policy)
        current = request
        response = await self._issue(current, cancel)

        while response.error is None and not response.ok:
            rule = self._policy.rule_for(response.status)
            if rule is None:
                return response
            if not attempts.consume(response.status, rule):
                logger.warning(
                    "Retries exhausted status=%s method=%s url=%s",
                    response.status,
                    current.method,
                    current.url,
                )
                return replace(response, exhausted=True)

            if rule.reauthenticate:
                current, response = await self._reauthenticate(current, rule, cancel)
                if response.is_empty:
                    return response
            else:
                current = rule.build_request(current)
                logger.info("Re-issuing request after status=%s url=%s", response.status, current.url)
                response = await self._issue(current, cancel)

        return response

    async def _reauthenticate(
        self,
        original: Request,
        rule: RetryRule,
        cancel: Optional[asyncio.Event],
    ) -> Tuple[Request, Response]:
        login = rule.build_request(original)
        logger.info("Re-authenticating against %s before replaying %s", login.url, original.url)
        reauth = await self._issue(login, cancel)
        if reauth.error is not None:
            return original, reauth
        if reauth.status == 401:
            logger.warning("Re-authentication rejected url=%s", login.url)
            return original, Response.empty()

        try:
            replayed = self._on_reauthenticated(original, reauth)
        except ParseError as exc:
            logger.warning("Re-authentication response unreadable url=%s", login.url)
            return original, Response.failure(exc)
        return replayed, await self._issue(replayed, cancel)

    async def _issue(self, request: Request, cancel: Optional[asyncio.Event]) -> Response:
        if cancel is not None and cancel.is_set():
            return self._cancelled(request)
        try:
            if cancel is None:
                return await self._transport(request.method, request.url, request.headers, request.body)
            return await self._issue_cancellable(request, cancel)
        except (TransportError, ParseError) as exc:
            return Response.failure(exc)
        except httpx.DecodingError as exc:
            return Response.failure(ParseError(f"Response body could not be decoded: {exc}"))
        except httpx.RequestError as exc:
            return Response.failure(TransportError(f"{exc.__class__.__name__}: {exc}"))

    async def _issue_cancellable(self, request: Request, cancel: asyncio.Event) -> Response:
        send_task = asyncio.ensure_future(
            self._transport(request.method, request.url, request.headers, request.body)
        )
        cancel_task = asyncio.ensure_future(cancel.wait())
        try:
            done, _ = await asyncio.wait({send_task, cancel_task}, return_when=asyncio.FIRST_COMPLETED)
        except asyncio.CancelledError:
            send_task.cancel()
            await asyncio.wait({send_task})
            raise
        finally:
            cancel_task.cancel()

        if send_task in done:
            return send_task.result()
        send_task.cancel()
        await asyncio.wait({send_task})
        return self._cancelled(request)

    @staticmethod
    def _cancelled(request: Request) -> Response:
        logger.info("Request chain cancelled method=%s url=%s", request.method, request.url)
        return Response.failure(RequestCancelled(f"Request to {request.url} was cancelled"))


__all__ = ["RequestPipeline", "ReauthHook", "replay_unchanged"]
