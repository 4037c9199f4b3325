"""Resolve an owner login to an organization or user account."""

from __future__ import annotations

import logging

from projectsync.exceptions import OwnerNotFoundError
from projectsync.github import queries
from projectsync.github.transport import GraphQLExecutor
from projectsync.models.enums import OwnerType
from projectsync.models.github import Owner

_LOG = logging.getLogger(__name__)


class OwnerResolver:
    """Resolves logins with one query that aliases ``organization`` and ``user``."""

    def __init__(self, client: GraphQLExecutor) -> None:
        self._client = client

    async def resolve(self, login: str) -> Owner:
        """Resolve *login*, preferring the organization if both resolve.

        Raises:
            OwnerNotFoundError: If the login is neither an organization nor a user.
        """
        _LOG.debug("Resolving project owner '%s'", login)
        data = await self._client.execute(queries.RESOLVE_OWNER, {"login": login}, tolerate_not_found=True)

        for key, owner_type in (("organization", OwnerType.ORGANIZATION), ("user", OwnerType.USER)):
            node = data.get(key)
            if isinstance(node, dict) and node.get("id"):
                owner = Owner(id=node["id"], type=owner_type, login=node.get("login") or login)
                _LOG.debug("Owner '%s' resolved as %s", login, owner_type.value)
                return owner

        raise OwnerNotFoundError(login)
