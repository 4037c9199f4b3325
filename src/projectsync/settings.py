"""Run settings built once from the environment and injected into components.

:class:`ProjectSyncSettings` carries every value the orchestrator, the
backfill job and the milestone updater read from the workflow environment.
Nothing in projectsync reads ``os.environ`` outside :meth:`ProjectSyncSettings.from_env`.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path

from pydantic import BaseModel, Field

from projectsync.exceptions import AuthenticationError, ConfigError

DEFAULT_CONFIG_DIR = Path(".github") / "projects"

_TRUTHY = {"1", "true", "yes", "on"}


def _clean(environ: Mapping[str, str], key: str) -> str | None:
    value = (environ.get(key) or "").strip()
    return value or None


def _parse_project_number(raw: str | None) -> int | None:
    if raw is None:
        return None
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigError(f"PROJECT_NUMBER must be an integer, got {raw!r}") from exc


class ProjectSyncSettings(BaseModel):
    """Settings for one projectsync invocation.

    Attributes:
        token: GitHub token with ``project`` scope.
        repository: ``owner/name`` of the repository the workflow runs in.
        repository_owner: Login used when a config does not name an owner.
        project_name: Config to backfill (defaults to the first config).
        project_owner: Overrides the owner for backfill and milestone updates.
        milestone_name: Milestone title that triggers a status transition.
        project_number: Number of the project the milestone updater targets.
        status_field_name: Single-select field the milestone updater sets.
        status_option_name: Option the milestone updater selects.
        debug: Enables debug logging.
        event_path: Path to the webhook event payload JSON.
        config_dir: Directory holding the YAML project configs.
    """

    token: str = Field(repr=False)
    repository: str | None = None
    repository_owner: str | None = None
    project_name: str | None = None
    project_owner: str | None = None
    milestone_name: str = "Backlog"
    project_number: int | None = None
    status_field_name: str = "Status"
    status_option_name: str = "Backlog"
    debug: bool = False
    event_path: Path | None = None
    config_dir: Path = DEFAULT_CONFIG_DIR

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> ProjectSyncSettings:
        """Build settings from *environ* (defaults to ``os.environ``).

        Raises:
            AuthenticationError: If ``GITHUB_TOKEN`` is unset or empty.
            ConfigError: If ``PROJECT_NUMBER`` is not an integer.
        """
        env = os.environ if environ is None else environ
        token = _clean(env, "GITHUB_TOKEN")
        if token is None:
            raise AuthenticationError("GITHUB_TOKEN is not set or empty")

        event_path = _clean(env, "GITHUB_EVENT_PATH")
        return cls(
            token=token,
            repository=_clean(env, "GITHUB_REPOSITORY"),
            repository_owner=_clean(env, "GITHUB_REPOSITORY_OWNER"),
            project_name=_clean(env, "PROJECT_NAME"),
            project_owner=_clean(env, "PROJECT_OWNER"),
            milestone_name=_clean(env, "MILESTONE_NAME") or "Backlog",
            project_number=_parse_project_number(_clean(env, "PROJECT_NUMBER")),
            status_field_name=_clean(env, "STATUS_FIELD_NAME") or "Status",
            status_option_name=_clean(env, "STATUS_OPTION_NAME") or "Backlog",
            debug=(_clean(env, "DEBUG_PROJECT_SYNC") or "").lower() in _TRUTHY,
            event_path=Path(event_path) if event_path else None,
        )

    @property
    def effective_owner(self) -> str | None:
        """Owner for single-project jobs: ``PROJECT_OWNER`` then the repository owner."""
        return self.project_owner or self.repository_owner

    def split_repository(self) -> tuple[str, str]:
        """Split ``repository`` into ``(owner, name)``.

        Raises:
            ConfigError: If the repository is unset or not ``owner/name``.
        """
        return split_repository_name(self.repository or "")


def split_repository_name(full_name: str) -> tuple[str, str]:
    """Split ``owner/name`` into its parts.

    Raises:
        ConfigError: If *full_name* is not of the form ``owner/name``.
    """
    parts = full_name.strip().split("/")
    if len(parts) != 2 or not parts[0] or not parts[1]:
        raise ConfigError(f"Invalid repository name {full_name!r}. Expected owner/name.")
    return parts[0], parts[1]
