"""Decode raw GraphQL nodes into projectsync models.

Responses are decoded once, here, so reconcilers work with typed models
instead of walking untyped JSON.
"""

from __future__ import annotations

from typing import Any, TypeVar

from pydantic import BaseModel, TypeAdapter, ValidationError

from projectsync.exceptions import ResponseShapeError
from projectsync.models.github import ItemContent, Project, ProjectItem, RemoteField, Repository

_ModelT = TypeVar("_ModelT", bound=BaseModel)

_CONTENT_ADAPTER: TypeAdapter[ItemContent] = TypeAdapter(ItemContent)

SYNCABLE_CONTENT_TYPES = frozenset({"Issue", "PullRequest"})


def _validate(model: type[_ModelT], node: Any, what: str) -> _ModelT:
    try:
        return model.model_validate(node)
    except ValidationError as exc:
        raise ResponseShapeError(f"Unexpected {what} shape in GitHub response: {exc}") from exc


def decode_project(node: Any) -> Project:
    return _validate(Project, node, "project")


def decode_repository(node: Any) -> Repository:
    return _validate(Repository, node, "repository")


def decode_field(node: dict[str, Any]) -> RemoteField | None:
    """Decode a field node; returns ``None`` for nodes without an id or name."""
    if not node.get("id") or not node.get("name"):
        return None
    return _validate(RemoteField, node, "field")


def decode_content(node: Any) -> ItemContent | None:
    """Decode an issue or pull request; other content types decode to ``None``."""
    if not isinstance(node, dict) or node.get("__typename") not in SYNCABLE_CONTENT_TYPES:
        return None
    try:
        return _CONTENT_ADAPTER.validate_python(node)
    except ValidationError as exc:
        raise ResponseShapeError(f"Unexpected item content shape in GitHub response: {exc}") from exc


def _single_select_values(node: dict[str, Any]) -> dict[str, str]:
    values: dict[str, str] = {}
    for value in (node.get("fieldValues") or {}).get("nodes") or []:
        if not isinstance(value, dict):
            continue
        field_id = (value.get("field") or {}).get("id")
        option_id = value.get("optionId")
        if field_id and option_id:
            values[field_id] = option_id
    return values


def decode_project_item(node: dict[str, Any]) -> ProjectItem:
    item_id = node.get("id")
    if not isinstance(item_id, str):
        raise ResponseShapeError("Project item node is missing its id")
    return ProjectItem(
        id=item_id,
        content=decode_content(node.get("content")),
        field_values=_single_select_values(node),
    )
