"""Single-project backfill job: ensure the configured project, then sync its items."""

from __future__ import annotations

import logging

from projectsync.config.loader import load_project_configs
from projectsync.exceptions import ConfigError
from projectsync.github.transport import GraphQLExecutor
from projectsync.models.config import ProjectConfig
from projectsync.models.results import BackfillResult
from projectsync.reconcile.items import ItemSyncer
from projectsync.reconcile.project import ProjectReconciler, get_repository
from projectsync.settings import ProjectSyncSettings
from projectsync.sync.progress import NullSyncProgress, SyncProgress

_LOG = logging.getLogger(__name__)


def select_config(configs: list[ProjectConfig], settings: ProjectSyncSettings) -> ProjectConfig:
    """Pick the config named by ``PROJECT_NAME``, or the first one.

    ``PROJECT_OWNER`` overrides the owner of the selected config.

    Raises:
        ConfigError: If there are no configs or none matches ``PROJECT_NAME``.
    """
    if not configs:
        raise ConfigError("No project configs found")

    if settings.project_name:
        wanted = settings.project_name.lower()
        matches = [c for c in configs if c.name.lower() == wanted]
        if not matches:
            raise ConfigError(f"No project config named '{settings.project_name}'")
        selected = matches[0]
    else:
        selected = configs[0]

    if settings.project_owner:
        selected = selected.model_copy(update={"owner": settings.project_owner})
    return selected


async def run_backfill(
    client: GraphQLExecutor,
    settings: ProjectSyncSettings,
    *,
    progress: SyncProgress | None = None,
) -> BackfillResult:
    """Backfill the configured project from ``GITHUB_REPOSITORY``.

    Any failure is fatal and propagates to the caller.
    """
    progress = progress or NullSyncProgress()
    owner, repo = settings.split_repository()

    progress.phase_start("Backfill")
    try:
        repository = await get_repository(client, f"{owner}/{repo}")
        configs = load_project_configs(settings.config_dir, settings.effective_owner or "")
        config = select_config(configs, settings)
        _LOG.info("Backfilling project '%s' owned by %s", config.name, config.owner)

        project = await ProjectReconciler(client).ensure(config, repository)
        result = await ItemSyncer(client).backfill(project.id, owner, repo)
    except Exception as exc:
        progress.phase_error("Backfill", exc)
        raise
    progress.phase_done("Backfill")
    return result
