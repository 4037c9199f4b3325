"""httpx async transport wrapper with bounded retries for GitHub's API."""

from __future__ import annotations

import asyncio
import logging
import random
import time

import httpx

_LOG = logging.getLogger(__name__)

# Status codes considered transient and eligible for automatic retry.
_RETRYABLE_STATUS_CODES = frozenset({429, 502, 503, 504})

# Longest single wait honoured from rate-limit headers, in seconds.
_MAX_HEADER_WAIT = 60.0


class RetryingTransport(httpx.AsyncBaseTransport):
    """Wraps an httpx async transport and retries transient failures.

    Requests are issued one at a time, so there is no shared pause state:
    a rate-limited request simply waits before its own next attempt.

    Retried:
    - transport-level errors (connection reset, read timeout, ...)
    - HTTP 429, 502, 503, 504
    - HTTP 403 when GitHub reports an exhausted rate limit
      (``x-ratelimit-remaining: 0``) or sends ``Retry-After``

    The wait comes from ``Retry-After`` or ``x-ratelimit-reset`` when present
    (capped at one minute), otherwise from exponential backoff with jitter.
    """

    def __init__(
        self,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        max_retries: int = 3,
    ) -> None:
        self._transport = transport or httpx.AsyncHTTPTransport()
        self._max_retries = max_retries

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        attempt = 0
        while True:
            try:
                response = await self._transport.handle_async_request(request)
            except httpx.TransportError as exc:
                if attempt >= self._max_retries:
                    raise
                _LOG.warning("GitHub request failed (%s); retrying (attempt %d)", exc, attempt + 1)
                await asyncio.sleep(self._backoff_seconds(attempt))
                attempt += 1
                continue

            if attempt >= self._max_retries or not self._is_retryable(response):
                return response

            wait = self._header_wait(response)
            if wait is None:
                wait = self._backoff_seconds(attempt)
            _LOG.warning(
                "GitHub responded %d; retrying in %.1fs (attempt %d)",
                response.status_code,
                wait,
                attempt + 1,
            )
            await response.aclose()
            await asyncio.sleep(wait)
            attempt += 1

    async def aclose(self) -> None:
        await self._transport.aclose()

    @staticmethod
    def _is_retryable(response: httpx.Response) -> bool:
        if response.status_code in _RETRYABLE_STATUS_CODES:
            return True
        if response.status_code == 403:
            return (
                response.headers.get("x-ratelimit-remaining") == "0"
                or "retry-after" in response.headers
            )
        return False

    @staticmethod
    def _header_wait(response: httpx.Response) -> float | None:
        raw = response.headers.get("retry-after")
        if raw is not None:
            try:
                return min(_MAX_HEADER_WAIT, max(0.0, float(raw)))
            except ValueError:
                return None
        if response.headers.get("x-ratelimit-remaining") == "0":
            reset = response.headers.get("x-ratelimit-reset")
            try:
                return min(_MAX_HEADER_WAIT, max(0.0, float(reset or "") - time.time()))
            except ValueError:
                return None
        return None

    @staticmethod
    def _backoff_seconds(attempt: int) -> float:
        return min(8.0, float(2**attempt)) + random.uniform(0.0, 0.25)
