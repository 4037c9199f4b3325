"""Multi-project orchestration and progress reporting."""

from projectsync.sync.backfill import run_backfill, select_config
from projectsync.sync.orchestrator import ProjectSyncOrchestrator
from projectsync.sync.progress import NullSyncProgress, SyncProgress

__all__ = ["NullSyncProgress", "ProjectSyncOrchestrator", "SyncProgress", "run_backfill", "select_config"]
