"""Authenticated GitHub GraphQL client.

Every GraphQL failure, whether HTTP-level or reported in the response's
``errors`` array, surfaces as a :class:`~projectsync.exceptions.TransportError`
whose message flattens the nested error list into one readable line.
"""

from __future__ import annotations

import logging
from types import TracebackType
from typing import Any, Protocol

import httpx

from projectsync.exceptions import AuthenticationError, TransportError
from projectsync.github._retrying_transport import RetryingTransport

_LOG = logging.getLogger(__name__)

GRAPHQL_URL = "https://api.github.com/graphql"

_NOT_FOUND = "NOT_FOUND"


class GraphQLExecutor(Protocol):
    """Anything that can run a GraphQL operation and return its ``data``."""

    async def execute(
        self,
        query: str,
        variables: dict[str, Any] | None = None,
        *,
        tolerate_not_found: bool = False,
    ) -> dict[str, Any]: ...  # pragma: no cover


def format_graphql_errors(errors: list[Any]) -> str:
    """Flatten a GraphQL ``errors`` array into one human-readable message.

    Each entry becomes ``message (type=..., path=a.b)``; entries are joined
    with ``"; "``.
    """
    parts: list[str] = []
    for error in errors:
        if not isinstance(error, dict):
            parts.append(str(error))
            continue
        message = str(error.get("message") or "unknown error")
        details: list[str] = []
        if error.get("type"):
            details.append(f"type={error['type']}")
        path = error.get("path")
        if isinstance(path, list) and path:
            details.append("path=" + ".".join(str(p) for p in path))
        parts.append(f"{message} ({', '.join(details)})" if details else message)
    return "; ".join(parts) if parts else "unknown GraphQL error"


def describe_error(exc: BaseException) -> str:
    """Render *exc* for a log line, including nested GraphQL errors."""
    if isinstance(exc, TransportError) and exc.errors:
        return f"{exc} [{len(exc.errors)} GraphQL error(s)]"
    return str(exc) or exc.__class__.__name__


class GitHubGraphQLClient:
    """Async GraphQL client for ``api.github.com``.

    Use as an async context manager so the underlying connection pool is
    closed::

        async with GitHubGraphQLClient(token) as client:
            data = await client.execute(QUERY, {"login": "octo-org"})
    """

    def __init__(
        self,
        token: str,
        *,
        url: str = GRAPHQL_URL,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float = 30.0,
        max_retries: int = 3,
    ) -> None:
        self._client = httpx.AsyncClient(
            headers={
                "Authorization": f"Bearer {token}",
                "Accept": "application/vnd.github+json",
                "User-Agent": "projectsync",
            },
            transport=RetryingTransport(transport=transport, max_retries=max_retries),
            timeout=httpx.Timeout(timeout),
        )
        self._url = url

    async def __aenter__(self) -> GitHubGraphQLClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def execute(
        self,
        query: str,
        variables: dict[str, Any] | None = None,
        *,
        tolerate_not_found: bool = False,
    ) -> dict[str, Any]:
        """Run a GraphQL operation and return its ``data`` object.

        Args:
            query: The GraphQL document.
            variables: Operation variables.
            tolerate_not_found: Drop ``NOT_FOUND`` errors and return partial
                data. Needed by queries that alias ``organization`` and
                ``user`` for the same login.

        Raises:
            AuthenticationError: On HTTP 401.
            TransportError: On any other HTTP failure or GraphQL error.
        """
        _LOG.debug("GraphQL request %s", _operation_name(query), extra={"variables": variables})
        try:
            response = await self._client.post(self._url, json={"query": query, "variables": variables or {}})
        except httpx.HTTPError as exc:
            raise TransportError(f"GitHub request failed: {exc}") from exc

        if response.status_code == 401:
            raise AuthenticationError("GitHub rejected the token (HTTP 401)", status_code=401)

        try:
            payload = response.json()
        except ValueError:
            payload = None

        if response.is_error:
            errors = payload.get("errors") if isinstance(payload, dict) else None
            detail = format_graphql_errors(errors) if errors else (response.text[:200] or response.reason_phrase)
            raise TransportError(
                f"GitHub API returned HTTP {response.status_code}: {detail}",
                errors=errors if isinstance(errors, list) else None,
                status_code=response.status_code,
            )

        if not isinstance(payload, dict):
            raise TransportError("GitHub API returned a non-JSON response", status_code=response.status_code)

        errors = payload.get("errors") or []
        if tolerate_not_found:
            errors = [e for e in errors if not (isinstance(e, dict) and e.get("type") == _NOT_FOUND)]
        if errors:
            raise TransportError(
                f"GraphQL request failed: {format_graphql_errors(errors)}",
                errors=errors,
                status_code=response.status_code,
            )

        data = payload.get("data")
        if not isinstance(data, dict):
            raise TransportError("GraphQL response missing data payload", status_code=response.status_code)
        return data


def _operation_name(query: str) -> str:
    head = query.strip().split("(", 1)[0].split("{", 1)[0].split()
    return " ".join(head[:2]) if head else "<anonymous>"
