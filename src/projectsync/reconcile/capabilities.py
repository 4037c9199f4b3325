"""Report view and automation requests the GraphQL API cannot apply.

GitHub's GraphQL API has no mutations for project views or built-in
workflows, so these syncers only log what was requested.
"""

from __future__ import annotations

import logging
from typing import Any

_LOG = logging.getLogger(__name__)

PREVIEW_LIMIT = 3


def _describe(entry: Any, keys: tuple[str, ...]) -> str:
    if isinstance(entry, dict):
        for key in keys:
            value = entry.get(key)
            if value:
                return str(value)
        return ", ".join(sorted(str(k) for k in entry)) or "<empty>"
    return str(entry)


def _report(kind: str, project_id: str, entries: list[Any], keys: tuple[str, ...]) -> list[str]:
    if not entries:
        _LOG.debug("No %s requested for project %s.", kind, project_id)
        return []

    names = [_describe(entry, keys) for entry in entries[:PREVIEW_LIMIT]]
    more = len(entries) - len(names)
    _LOG.warning(
        "%d %s requested (%s%s) but the GitHub API cannot manage %s; configure them manually in the project UI.",
        len(entries),
        kind,
        "; ".join(names),
        f"; and {more} more" if more > 0 else "",
        kind,
        extra={"project_id": project_id, "capability": kind, "requested": len(entries)},
    )
    return names


def sync_views(project_id: str, views: list[Any]) -> list[str]:
    """Log requested views; returns the names included in the warning."""
    return _report("views", project_id, views, ("name",))


def sync_automation(project_id: str, rules: list[Any]) -> list[str]:
    """Log requested automation rules; returns the rules included in the warning."""
    return _report("automation rules", project_id, rules, ("name", "if"))
