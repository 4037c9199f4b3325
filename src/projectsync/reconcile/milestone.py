"""Move one issue to a configured status when it lands in a target milestone.

Runs as a single-shot CI job on ``issues`` events. Every unmet precondition
after the milestone check is fatal: the exception propagates and the CLI
exits non-zero.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from projectsync.exceptions import ConfigError, FieldSyncError, ItemAddError, ProjectNotFoundError, TransportError
from projectsync.github import queries
from projectsync.github.decode import decode_project
from projectsync.github.pagination import paginate
from projectsync.github.transport import GraphQLExecutor
from projectsync.models.enums import FieldType
from projectsync.models.github import Project, RemoteField, RemoteOption
from projectsync.models.results import MilestoneAction, MilestoneStatusResult
from projectsync.reconcile.fields import fetch_project_fields, find_field
from projectsync.reconcile.items import ITEM_PAGE_SIZE, add_project_item, is_already_in_project, set_single_select_value
from projectsync.settings import ProjectSyncSettings

_LOG = logging.getLogger(__name__)


def read_event_payload(path: Path | None) -> dict[str, Any]:
    """Read the webhook payload written by GitHub Actions.

    Raises:
        ConfigError: If the file is missing or is not a JSON object.
    """
    if path is None or not path.is_file():
        raise ConfigError("Unable to locate GitHub event payload (GITHUB_EVENT_PATH).")
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigError(f"Failed to parse GitHub event payload: {exc}") from exc
    if not isinstance(payload, dict):
        raise ConfigError("GitHub event payload is not a JSON object.")
    return payload


async def resolve_project(client: GraphQLExecutor, owner_login: str, number: int) -> Project:
    """Find project *number* under *owner_login*, trying the user before the organization.

    Raises:
        ProjectNotFoundError: If neither account has such a project.
    """
    data = await client.execute(
        queries.FETCH_PROJECT_BY_NUMBER,
        {"login": owner_login, "number": number},
        tolerate_not_found=True,
    )
    for owner_type in ("user", "organization"):
        node = (data.get(owner_type) or {}).get("project")
        if node:
            project = decode_project(node)
            _LOG.info("Resolved project '%s' (#%d) under %s '%s'.", project.title, number, owner_type, owner_login)
            return project
    raise ProjectNotFoundError(f"Project {owner_login}#{number} was not found.")


async def find_project_item(client: GraphQLExecutor, project_id: str, content_id: str) -> str | None:
    """Return the ID of the project item linked to *content_id*, if any."""
    nodes = await paginate(
        client,
        queries.FETCH_PROJECT_ITEMS,
        {"projectId": project_id},
        ("node", "items"),
        page_size=ITEM_PAGE_SIZE,
    )
    for node in nodes:
        content = node.get("content") or {}
        if content.get("id") == content_id:
            return node.get("id")
    return None


async def ensure_project_item(client: GraphQLExecutor, project_id: str, content_id: str) -> str:
    """Return the project item for *content_id*, adding the content if needed.

    Membership is checked before adding. If the add still races with a
    concurrent one and GitHub answers that the item already exists, the
    items are scanned again instead of failing.

    Raises:
        ItemAddError: If no item ID can be determined.
        TransportError: If adding fails for any other reason.
    """
    existing = await find_project_item(client, project_id, content_id)
    if existing:
        return existing

    try:
        item_id = await add_project_item(client, project_id, content_id)
    except TransportError as exc:
        if not is_already_in_project(exc):
            raise
        _LOG.warning("Issue already present in project; re-fetching item id.")
        item_id = None
    else:
        if item_id:
            _LOG.info("Added issue to project (item id %s).", item_id)
            return item_id
        _LOG.warning("Issue was added to project but item id was not returned; re-fetching.")

    item_id = await find_project_item(client, project_id, content_id)
    if not item_id:
        raise ItemAddError("Failed to determine project item id for issue.")
    return item_id


def resolve_status_option(
    fields: list[RemoteField], field_name: str, option_name: str
) -> tuple[RemoteField, RemoteOption]:
    """Find the single-select field and option to set.

    Raises:
        FieldSyncError: If the field is missing, not single-select, or lacks the option.
    """
    field = find_field(fields, field_name)
    if field is None:
        raise FieldSyncError(f"Project is missing required field '{field_name}'.")
    if field.data_type != FieldType.SINGLE_SELECT.value:
        raise FieldSyncError(f"Field '{field_name}' is not a single select field.")
    option = field.find_option(option_name)
    if option is None:
        raise FieldSyncError(f"Field '{field_name}' is missing option '{option_name}'.")
    return field, option


class MilestoneStatusUpdater:
    """Sets an issue's Status when its milestone matches the configured target."""

    def __init__(self, client: GraphQLExecutor, settings: ProjectSyncSettings) -> None:
        self._client = client
        self._settings = settings

    async def run(self, payload: dict[str, Any]) -> MilestoneStatusResult:
        issue = payload.get("issue")
        if not isinstance(issue, dict):
            _LOG.info("Event does not include an issue; skipping.")
            return MilestoneStatusResult(action=MilestoneAction.NO_ISSUE)

        milestone = str((issue.get("milestone") or {}).get("title") or "").strip()
        number = issue.get("number")
        if not milestone:
            _LOG.info("Issue has no milestone; nothing to do.")
            return MilestoneStatusResult(action=MilestoneAction.NO_MILESTONE, issue_number=number)

        target = self._settings.milestone_name.strip()
        if milestone.lower() != target.lower():
            _LOG.info("Issue milestone '%s' does not match target '%s'; skipping.", milestone, target)
            return MilestoneStatusResult(action=MilestoneAction.MILESTONE_MISMATCH, issue_number=number)

        content_id = issue.get("node_id")
        if not content_id:
            raise ConfigError("Issue payload does not include node_id; cannot continue.")
        owner = self._settings.effective_owner
        if not owner:
            raise ConfigError("PROJECT_OWNER (or GITHUB_REPOSITORY_OWNER) must be provided.")
        if self._settings.project_number is None:
            raise ConfigError("PROJECT_NUMBER must be set to the target project number.")

        project = await resolve_project(self._client, owner, self._settings.project_number)
        item_id = await ensure_project_item(self._client, project.id, content_id)

        fields = await fetch_project_fields(self._client, project.id)
        field, option = resolve_status_option(
            fields, self._settings.status_field_name, self._settings.status_option_name
        )
        await set_single_select_value(self._client, project.id, item_id, field.id, option.id)
        _LOG.info("Set project item '%s' status to '%s' for issue #%s.", item_id, option.name, number)
        return MilestoneStatusResult(
            action=MilestoneAction.STATUS_SET,
            item_id=item_id,
            option_name=option.name,
            issue_number=number,
        )
