"""Backfill repository issues and pull requests into a project and derive field values."""

from __future__ import annotations

import logging

from projectsync.exceptions import ItemAddError, TransportError
from projectsync.github import queries
from projectsync.github.decode import decode_content, decode_project_item
from projectsync.github.pagination import paginate
from projectsync.github.transport import GraphQLExecutor
from projectsync.models.enums import FieldType
from projectsync.models.github import Issue, ItemContent, ProjectItem, PullRequest, RemoteField
from projectsync.models.results import BackfillResult
from projectsync.reconcile.fields import fetch_project_fields, find_field

_LOG = logging.getLogger(__name__)

ITEM_PAGE_SIZE = 50

STATUS_FIELD = "Status"
AREA_FIELD = "Area"
PRIORITY_FIELD = "Priority"

AREA_LABELS: dict[str, str] = {
    "area:frontend": "Frontend",
    "area:backend": "Backend",
    "area:infra": "Infra",
    "area:database": "Database",
    "area:ai": "AI/ML",
}

PRIORITY_LABELS: dict[str, str] = {
    "priority:critical": "Critical",
    "priority:high": "High",
    "priority:medium": "Medium",
    "priority:low": "Low",
}


def derive_status(content: ItemContent) -> str:
    """Status for an item, read from the content's own type tag."""
    if isinstance(content, PullRequest):
        if content.merged or content.state in {"CLOSED", "MERGED"}:
            return "Done"
        return "Review"
    if content.state == "CLOSED":
        return "Done"
    if "blocked" in {label.lower() for label in content.labels}:
        return "Blocked"
    return "Todo"


def _first_label_match(labels: list[str], table: dict[str, str]) -> str | None:
    # Walks the item's labels in their own order, not the table's order.
    for label in labels:
        value = table.get(label.lower())
        if value is not None:
            return value
    return None


def derive_area(content: ItemContent) -> str | None:
    """Area from the first ``area:*`` label; later matches are ignored."""
    return _first_label_match(content.labels, AREA_LABELS)


def derive_priority(content: ItemContent) -> str | None:
    """Priority from the first ``priority:*`` label; later matches are ignored."""
    return _first_label_match(content.labels, PRIORITY_LABELS)


def is_already_in_project(exc: TransportError) -> bool:
    """Whether an add-item rejection says the content is already on the board.

    GitHub reports this only through the message text.
    """
    messages = [str(e.get("message", "")) for e in exc.errors if isinstance(e, dict)] or [str(exc)]
    return any("already" in message.lower() for message in messages)


async def fetch_project_items(client: GraphQLExecutor, project_id: str) -> list[ProjectItem]:
    """Fetch every item of a project with its content and single-select values."""
    nodes = await paginate(
        client,
        queries.FETCH_PROJECT_ITEMS,
        {"projectId": project_id},
        ("node", "items"),
        page_size=ITEM_PAGE_SIZE,
    )
    return [decode_project_item(node) for node in nodes]


async def add_project_item(client: GraphQLExecutor, project_id: str, content_id: str) -> str | None:
    """Add content to a project; returns the new item ID if GitHub reports one."""
    data = await client.execute(
        queries.ADD_PROJECT_ITEM,
        {"input": {"projectId": project_id, "contentId": content_id}},
    )
    item = (data.get("addProjectV2ItemById") or {}).get("item") or {}
    item_id = item.get("id")
    return item_id if isinstance(item_id, str) else None


async def set_single_select_value(
    client: GraphQLExecutor, project_id: str, item_id: str, field_id: str, option_id: str
) -> None:
    await client.execute(
        queries.UPDATE_ITEM_FIELD_VALUE,
        {
            "input": {
                "projectId": project_id,
                "itemId": item_id,
                "fieldId": field_id,
                "value": {"singleSelectOptionId": option_id},
            }
        },
    )


class ItemSyncer:
    """Adds missing repository issues/PRs to a project and keeps derived fields current."""

    def __init__(self, client: GraphQLExecutor) -> None:
        self._client = client

    async def backfill(self, project_id: str, owner: str, repo: str) -> BackfillResult:
        """Add every issue and PR of ``owner/repo`` missing from the project, then
        recompute Status, Area and Priority for every item on the board.

        Raises:
            ItemAddError: If adding an item fails for a reason other than it
                already being on the board.
            TransportError: If any other API call fails.
        """
        _LOG.info("Backfilling project items for %s/%s", owner, repo)
        fields = await fetch_project_fields(self._client, project_id)
        items = await fetch_project_items(self._client, project_id)
        issues = await self._fetch_repository_content(queries.FETCH_REPOSITORY_ISSUES, owner, repo, "issues")
        pull_requests = await self._fetch_repository_content(
            queries.FETCH_REPOSITORY_PULL_REQUESTS, owner, repo, "pullRequests"
        )

        present = {item.content.id for item in items if item.content is not None}
        _LOG.info(
            "Found %d issues and %d PRs in repo; project has %d items.",
            len(issues),
            len(pull_requests),
            len(present),
        )

        result = BackfillResult(issues_seen=len(issues), pull_requests_seen=len(pull_requests))
        rescan = False
        for content in [*issues, *pull_requests]:
            if content.id in present:
                _LOG.debug("Item #%d already in project", content.number)
                continue
            item_id = await self._add(project_id, content)
            present.add(content.id)
            if item_id is None:
                rescan = True
                continue
            items.append(ProjectItem(id=item_id, content=content))
            result.added += 1
            _LOG.info("Added %s #%d to project.", content.typename, content.number)

        if rescan:
            # Some content is on the board without a known item ID.
            _LOG.debug("Re-reading project items to pick up untracked additions.")
            items = await fetch_project_items(self._client, project_id)

        status_field = find_field(fields, STATUS_FIELD)
        area_field = find_field(fields, AREA_FIELD)
        priority_field = find_field(fields, PRIORITY_FIELD)

        for item in items:
            if item.content is None:
                continue
            desired = (
                (status_field, derive_status(item.content)),
                (area_field, derive_area(item.content)),
                (priority_field, derive_priority(item.content)),
            )
            for field, option_name in desired:
                if await self._apply(project_id, item, field, option_name):
                    result.updated_values += 1

        result.total_items = len(items)
        _LOG.info(
            "Backfill complete. Added %d new items, updated %d field values.",
            result.added,
            result.updated_values,
        )
        return result

    async def _fetch_repository_content(
        self, query: str, owner: str, repo: str, connection: str
    ) -> list[Issue | PullRequest]:
        nodes = await paginate(
            self._client,
            query,
            {"owner": owner, "name": repo},
            ("repository", connection),
            page_size=ITEM_PAGE_SIZE,
        )
        decoded = [decode_content(node) for node in nodes]
        return [content for content in decoded if content is not None]

    async def _add(self, project_id: str, content: ItemContent) -> str | None:
        try:
            return await add_project_item(self._client, project_id, content.id)
        except TransportError as exc:
            if is_already_in_project(exc):
                _LOG.info("%s #%d is already in the project.", content.typename, content.number)
                return None
            raise ItemAddError(f"Failed to add {content.typename} #{content.number} to project: {exc}") from exc

    async def _apply(
        self, project_id: str, item: ProjectItem, field: RemoteField | None, option_name: str | None
    ) -> bool:
        if field is None or option_name is None or field.data_type != FieldType.SINGLE_SELECT.value:
            return False
        option = field.find_option(option_name)
        if option is None:
            return False
        if item.field_values.get(field.id) == option.id:
            return False
        await set_single_select_value(self._client, project_id, item.id, field.id, option.id)
        item.field_values[field.id] = option.id
        return True
