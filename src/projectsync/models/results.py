"""Models describing what a reconciliation run did."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, Field

from projectsync.models.config import ProjectConfig
from projectsync.models.github import Project


class FieldSyncResult(BaseModel):
    """Outcome of :meth:`FieldReconciler.sync_fields`, by field name."""

    created: list[str] = Field(default_factory=list)
    updated: list[str] = Field(default_factory=list)
    unchanged: list[str] = Field(default_factory=list)
    skipped: list[str] = Field(default_factory=list)
    failed: list[str] = Field(default_factory=list)

    @property
    def mutation_count(self) -> int:
        return len(self.created) + len(self.updated)


class ProjectSyncResult(BaseModel):
    """Outcome of reconciling one project config."""

    config: ProjectConfig
    project: Project | None = None
    fields: FieldSyncResult = Field(default_factory=FieldSyncResult)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class SyncSummary(BaseModel):
    """Value returned by :meth:`ProjectSyncOrchestrator.run`."""

    results: list[ProjectSyncResult] = Field(default_factory=list)

    @property
    def failed(self) -> list[ProjectSyncResult]:
        return [r for r in self.results if not r.ok]

    @property
    def ok(self) -> bool:
        return not self.failed


class BackfillResult(BaseModel):
    """Value returned by :meth:`ItemSyncer.backfill`."""

    added: int = 0
    updated_values: int = 0
    total_items: int = 0
    issues_seen: int = 0
    pull_requests_seen: int = 0


class MilestoneAction(StrEnum):
    """What the milestone status updater ended up doing."""

    NO_ISSUE = "no-issue"
    NO_MILESTONE = "no-milestone"
    MILESTONE_MISMATCH = "milestone-mismatch"
    STATUS_SET = "status-set"


class MilestoneStatusResult(BaseModel):
    """Value returned by :meth:`MilestoneStatusUpdater.run`."""

    action: MilestoneAction
    item_id: str | None = None
    option_name: str | None = None
    issue_number: int | None = None

    @property
    def changed(self) -> bool:
        return self.action is MilestoneAction.STATUS_SET
