"""Multi-project reconciliation built on top of the per-concern reconcilers."""

from __future__ import annotations

import logging

from projectsync.config.loader import load_project_configs
from projectsync.exceptions import ProjectSyncError
from projectsync.github.transport import GraphQLExecutor, describe_error
from projectsync.models.config import ProjectConfig
from projectsync.models.github import Repository
from projectsync.models.results import ProjectSyncResult, SyncSummary
from projectsync.reconcile.capabilities import sync_automation, sync_views
from projectsync.reconcile.fields import FieldReconciler
from projectsync.reconcile.project import ProjectReconciler, get_repository
from projectsync.settings import ProjectSyncSettings
from projectsync.sync.progress import NullSyncProgress, SyncProgress

_LOG = logging.getLogger(__name__)


class ProjectSyncOrchestrator:
    """Reconciles every project config in the config directory.

    A failure while reconciling one project is logged and recorded on that
    project's result; the remaining projects are still processed.
    """

    def __init__(
        self,
        client: GraphQLExecutor,
        settings: ProjectSyncSettings,
        *,
        progress: SyncProgress | None = None,
    ) -> None:
        self._client = client
        self._settings = settings
        self._progress = progress or NullSyncProgress()
        self._projects = ProjectReconciler(client)
        self._fields = FieldReconciler(client)

    async def run(self) -> SyncSummary:
        settings = self._settings
        _LOG.info(
            "Starting project sync with repo=%s owner=%s",
            settings.repository,
            settings.repository_owner,
        )
        configs = load_project_configs(settings.config_dir, settings.repository_owner or "")
        summary = SyncSummary()
        if not configs:
            _LOG.info("No project configs found. Exiting.")
            return summary

        repository = await self._resolve_repository()

        self._progress.phase_start("Projects", total=len(configs))
        for config in configs:
            result = await self.sync_project(config, repository)
            summary.results.append(result)
            self._progress.item_done("Projects", config.name, failed=not result.ok)
        self._progress.phase_done("Projects")

        if summary.failed:
            _LOG.error(
                "%d of %d project(s) failed: %s",
                len(summary.failed),
                len(summary.results),
                ", ".join(r.config.name for r in summary.failed),
            )
        return summary

    async def sync_project(self, config: ProjectConfig, repository: Repository | None) -> ProjectSyncResult:
        _LOG.info("--- Syncing project from %s (%s) ---", config.source_file, config.name)
        _LOG.info(
            "Config summary -> owner=%s, public=%s, fields=%d, views=%d, automation=%d",
            config.owner,
            config.public,
            len(config.fields),
            len(config.views),
            len(config.automation),
        )
        result = ProjectSyncResult(config=config)
        try:
            result.project = await self._projects.ensure(config, repository)
            result.fields = await self._fields.sync_fields(result.project.id, config.fields)
            sync_views(result.project.id, config.views)
            sync_automation(result.project.id, config.automation)
        except ProjectSyncError as exc:
            result.error = describe_error(exc)
            _LOG.error("Failed to sync project '%s': %s", config.name, result.error)
            return result

        _LOG.info("Finished sync for '%s' (%s).", config.name, result.project.url or result.project.id)
        return result

    async def _resolve_repository(self) -> Repository | None:
        full_name = self._settings.repository
        if not full_name:
            _LOG.warning("GITHUB_REPOSITORY env var not set; skipping repository linking.")
            return None
        try:
            repository = await get_repository(self._client, full_name)
        except ProjectSyncError as exc:
            _LOG.warning("Unable to resolve repository '%s' for linking: %s", full_name, describe_error(exc))
            return None
        _LOG.info("Repository resolved: %s", repository.name_with_owner)
        return repository
