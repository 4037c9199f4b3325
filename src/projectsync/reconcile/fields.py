"""Reconcile a project's custom fields and single-select options with config."""

from __future__ import annotations

import logging
from typing import Any

from projectsync.exceptions import FieldSyncError, TransportError
from projectsync.github import queries
from projectsync.github.decode import decode_field
from projectsync.github.pagination import paginate
from projectsync.github.transport import GraphQLExecutor, describe_error
from projectsync.models.config import FieldConfig, FieldOption
from projectsync.models.enums import FieldType, OptionColor
from projectsync.models.github import RemoteField, RemoteOption
from projectsync.models.results import FieldSyncResult

_LOG = logging.getLogger(__name__)

FIELD_PAGE_SIZE = 50

COLOR_SYNONYMS = {
    "GREY": OptionColor.GRAY,
    "INDIGO": OptionColor.PURPLE,
}

_VALID_COLORS = {color.value for color in OptionColor}


def normalize_type(raw: str | None) -> FieldType | None:
    """Map a config field type (``single-select``, ``Text``, ...) onto :class:`FieldType`."""
    if not raw:
        return None
    key = "_".join(str(raw).strip().lower().replace("-", " ").split()).upper()
    try:
        return FieldType(key)
    except ValueError:
        return None


def normalize_color(color: str | None, field_name: str = "field") -> OptionColor:
    """Normalize an option color, falling back to GRAY for unsupported values."""
    if not color:
        return OptionColor.GRAY
    raw = str(color).strip().upper()
    if raw in COLOR_SYNONYMS:
        return COLOR_SYNONYMS[raw]
    if raw in _VALID_COLORS:
        return OptionColor(raw)
    _LOG.warning("Option color '%s' for field '%s' is invalid; falling back to GRAY.", color, field_name)
    return OptionColor.GRAY


def normalize_options(options: list[FieldOption], field_name: str) -> list[FieldOption]:
    """Strip names, normalize colors, and drop options without a name."""
    normalized: list[FieldOption] = []
    for option in options:
        name = option.name.strip()
        if not name:
            continue
        normalized.append(
            FieldOption(
                name=name,
                color=normalize_color(option.color, field_name).value,
                description=option.description,
            )
        )
    return normalized


def _option_key(name: str, color: str | None) -> str:
    return f"{name.lower()}::{(color or '').upper()}"


def options_equal(desired: list[FieldOption], current: list[RemoteOption]) -> bool:
    """Order-independent equality of option sets by ``name::COLOR`` (name case-insensitive)."""
    if len(desired) != len(current):
        return False
    desired_keys = sorted(_option_key(o.name, o.color) for o in desired)
    current_keys = sorted(_option_key(o.name, o.color) for o in current)
    return desired_keys == current_keys


def _options_input(options: list[FieldOption]) -> list[dict[str, str]]:
    return [{"name": o.name, "color": o.color or OptionColor.GRAY.value, "description": o.description} for o in options]


async def fetch_project_fields(client: GraphQLExecutor, project_id: str) -> list[RemoteField]:
    """Fetch every field of a project, in board position order."""
    nodes = await paginate(
        client,
        queries.FETCH_PROJECT_FIELDS,
        {"projectId": project_id},
        ("node", "fields"),
        page_size=FIELD_PAGE_SIZE,
    )
    fields = [decode_field(node) for node in nodes]
    return [field for field in fields if field is not None]


def find_field(fields: list[RemoteField], name: str) -> RemoteField | None:
    """Return the field named *name* (case-insensitive), if any."""
    lower = name.lower()
    for field in fields:
        if field.name.lower() == lower:
            return field
    return None


class FieldReconciler:
    """Creates missing fields and converges single-select option sets.

    Each field is handled independently: a failure on one field is logged and
    recorded, and the remaining fields are still processed. Data type changes
    are never applied to existing fields.
    """

    def __init__(self, client: GraphQLExecutor) -> None:
        self._client = client

    async def sync_fields(self, project_id: str, fields: list[FieldConfig]) -> FieldSyncResult:
        result = FieldSyncResult()
        if not fields:
            _LOG.info("No custom fields defined in config; skipping field sync.")
            return result

        existing = await fetch_project_fields(self._client, project_id)
        _LOG.info("Syncing %d field(s); project currently has %d.", len(fields), len(existing))

        for field in fields:
            if not field.name:
                _LOG.warning("Encountered a field without a name; skipping.")
                result.skipped.append("")
                continue

            field_type = normalize_type(field.type)
            if field_type is None:
                _LOG.warning("Field '%s' uses unsupported type '%s'; skipping.", field.name, field.type)
                result.skipped.append(field.name)
                continue

            try:
                await self._sync_field(project_id, field, field_type, existing, result)
            except (FieldSyncError, TransportError) as exc:
                _LOG.warning("Failed to sync field '%s': %s", field.name, describe_error(exc))
                result.failed.append(field.name)

        return result

    async def _sync_field(
        self,
        project_id: str,
        field: FieldConfig,
        field_type: FieldType,
        existing: list[RemoteField],
        result: FieldSyncResult,
    ) -> None:
        name = field.name
        remote = find_field(existing, name)

        if remote is None:
            _LOG.info("Creating field '%s' (%s)", name, field_type.value)
            created = await self.create_field(project_id, field, field_type)
            if created is not None:
                existing.append(created)
            result.created.append(name)
            return

        if remote.data_type != field_type.value:
            _LOG.warning(
                "Field '%s' exists with type '%s', expected '%s'. Skipping update.",
                name,
                remote.data_type,
                field_type.value,
            )
            result.skipped.append(name)
            return

        if field_type is FieldType.SINGLE_SELECT:
            desired = normalize_options(field.options, name)
            if not desired:
                _LOG.warning("Field '%s' is SINGLE_SELECT but no options provided; skipping option sync.", name)
                result.skipped.append(name)
                return
            if options_equal(desired, remote.options):
                _LOG.debug("Field '%s' options already up to date.", name)
                result.unchanged.append(name)
                return
            _LOG.info("Updating options for field '%s'.", name)
            await self.update_field(remote.id, {"name": name, "singleSelectOptions": _options_input(desired)})
            result.updated.append(name)
            return

        if remote.name != name:
            _LOG.info("Renaming field '%s' to '%s'.", remote.name, name)
            await self.update_field(remote.id, {"name": name})
            result.updated.append(name)
            return

        _LOG.debug("Field '%s' already up to date.", name)
        result.unchanged.append(name)

    async def create_field(self, project_id: str, field: FieldConfig, field_type: FieldType) -> RemoteField | None:
        """Create *field* on the project.

        Raises:
            FieldSyncError: If a single-select field has no usable options.
        """
        field_input: dict[str, Any] = {"projectId": project_id, "name": field.name, "dataType": field_type.value}
        if field_type is FieldType.SINGLE_SELECT:
            options = normalize_options(field.options, field.name)
            if not options:
                raise FieldSyncError(f"Field '{field.name}' requires at least one option.")
            field_input["singleSelectOptions"] = _options_input(options)

        data = await self._client.execute(queries.CREATE_FIELD, {"input": field_input})
        node = (data.get("createProjectV2Field") or {}).get("projectV2Field")
        return decode_field(node) if isinstance(node, dict) else None

    async def update_field(self, field_id: str, changes: dict[str, Any]) -> None:
        await self._client.execute(queries.UPDATE_FIELD, {"input": {"fieldId": field_id, **changes}})
