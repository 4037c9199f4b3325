"""Reconcilers that converge live GitHub Projects state towards config."""

from projectsync.reconcile.capabilities import sync_automation, sync_views
from projectsync.reconcile.fields import FieldReconciler
from projectsync.reconcile.items import ItemSyncer
from projectsync.reconcile.milestone import MilestoneStatusUpdater, ensure_project_item
from projectsync.reconcile.owner import OwnerResolver
from projectsync.reconcile.project import ProjectReconciler, get_repository

__all__ = [
    "FieldReconciler",
    "ItemSyncer",
    "MilestoneStatusUpdater",
    "OwnerResolver",
    "ProjectReconciler",
    "ensure_project_item",
    "get_repository",
    "sync_automation",
    "sync_views",
]
