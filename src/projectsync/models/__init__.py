"""Domain models for projectsync.

Re-exports all public model classes for convenient access::

    from projectsync.models import ProjectConfig, ProjectItem, RemoteField
"""

from projectsync.models.config import FieldConfig, FieldOption, ProjectConfig
from projectsync.models.enums import FieldType, OptionColor, OwnerType
from projectsync.models.github import (
    Issue,
    ItemContent,
    Owner,
    Project,
    ProjectItem,
    PullRequest,
    RemoteField,
    RemoteOption,
    Repository,
)
from projectsync.models.results import (
    BackfillResult,
    FieldSyncResult,
    MilestoneAction,
    MilestoneStatusResult,
    ProjectSyncResult,
    SyncSummary,
)

__all__ = [
    "BackfillResult",
    "FieldConfig",
    "FieldOption",
    "FieldSyncResult",
    "FieldType",
    "Issue",
    "ItemContent",
    "MilestoneAction",
    "MilestoneStatusResult",
    "OptionColor",
    "Owner",
    "OwnerType",
    "Project",
    "ProjectConfig",
    "ProjectItem",
    "ProjectSyncResult",
    "PullRequest",
    "RemoteField",
    "RemoteOption",
    "Repository",
    "SyncSummary",
]
