"""Cursor pagination over GraphQL connections."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from projectsync.exceptions import TransportError
from projectsync.github.transport import GraphQLExecutor

_LOG = logging.getLogger(__name__)

MAX_PAGES = 100


def _connection_at(data: dict[str, Any], path: Sequence[str]) -> dict[str, Any] | None:
    current: Any = data
    for key in path:
        if not isinstance(current, dict):
            return None
        current = current.get(key)
    return current if isinstance(current, dict) else None


async def paginate(
    client: GraphQLExecutor,
    query: str,
    variables: dict[str, Any],
    path: Sequence[str],
    *,
    page_size: int = 50,
    tolerate_not_found: bool = False,
) -> list[dict[str, Any]]:
    """Collect every node of the connection found at *path* in the response.

    Pages are requested one after another, passing ``first=page_size`` and the
    previous page's ``endCursor`` as ``after``. Collection stops when
    ``hasNextPage`` is false or the connection is missing (for example, the
    parent node could not be resolved).

    Args:
        client: GraphQL executor.
        query: Query declaring ``$first: Int!`` and ``$after: String``.
        variables: Remaining query variables.
        path: Keys leading from ``data`` to the connection object.
        page_size: Nodes per page.
        tolerate_not_found: Forwarded to :meth:`GraphQLExecutor.execute`.

    Returns:
        All non-null nodes, in request order.

    Raises:
        TransportError: If the page budget is exhausted.
    """
    nodes: list[dict[str, Any]] = []
    cursor: str | None = None
    for page in range(1, MAX_PAGES + 1):
        data = await client.execute(
            query,
            {**variables, "first": page_size, "after": cursor},
            tolerate_not_found=tolerate_not_found,
        )
        connection = _connection_at(data, path)
        if connection is None:
            _LOG.debug("Connection %s missing on page %d; stopping", ".".join(path), page)
            return nodes

        nodes.extend(node for node in connection.get("nodes") or [] if isinstance(node, dict))
        page_info = connection.get("pageInfo") or {}
        _LOG.debug(
            "Fetched %d %s node(s) so far (hasNextPage=%s)",
            len(nodes),
            path[-1],
            page_info.get("hasNextPage"),
        )
        if not page_info.get("hasNextPage"):
            return nodes
        cursor = page_info.get("endCursor")

    raise TransportError(f"Pagination of {'.'.join(path)} exceeded {MAX_PAGES} pages")
