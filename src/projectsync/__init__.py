"""projectsync: reconcile GitHub Projects (v2) boards with YAML configs.

Public API::

    from projectsync import GitHubGraphQLClient, ProjectSyncOrchestrator, ProjectSyncSettings

    settings = ProjectSyncSettings.from_env()
    async with GitHubGraphQLClient(settings.token) as client:
        summary = await ProjectSyncOrchestrator(client, settings).run()
"""

from projectsync.config import load_project_configs
from projectsync.exceptions import (
    AuthenticationError,
    ConfigError,
    FieldSyncError,
    ItemAddError,
    OwnerNotFoundError,
    ProjectNotFoundError,
    ProjectSyncError,
    RepositoryNotFoundError,
    ResponseShapeError,
    TransportError,
)
from projectsync.github import GitHubGraphQLClient, paginate
from projectsync.models import (
    BackfillResult,
    FieldConfig,
    FieldOption,
    FieldSyncResult,
    MilestoneStatusResult,
    ProjectConfig,
    ProjectSyncResult,
    SyncSummary,
)
from projectsync.reconcile import (
    FieldReconciler,
    ItemSyncer,
    MilestoneStatusUpdater,
    OwnerResolver,
    ProjectReconciler,
)
from projectsync.settings import ProjectSyncSettings
from projectsync.sync import ProjectSyncOrchestrator, run_backfill

__all__ = [
    "AuthenticationError",
    "BackfillResult",
    "ConfigError",
    "FieldConfig",
    "FieldOption",
    "FieldReconciler",
    "FieldSyncError",
    "FieldSyncResult",
    "GitHubGraphQLClient",
    "ItemAddError",
    "ItemSyncer",
    "MilestoneStatusResult",
    "MilestoneStatusUpdater",
    "OwnerNotFoundError",
    "OwnerResolver",
    "ProjectConfig",
    "ProjectNotFoundError",
    "ProjectReconciler",
    "ProjectSyncError",
    "ProjectSyncOrchestrator",
    "ProjectSyncResult",
    "ProjectSyncSettings",
    "RepositoryNotFoundError",
    "ResponseShapeError",
    "SyncSummary",
    "TransportError",
    "load_project_configs",
    "paginate",
    "run_backfill",
]
