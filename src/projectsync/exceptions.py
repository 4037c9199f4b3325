"""Custom exception hierarchy for projectsync.

All projectsync exceptions inherit from :class:`ProjectSyncError`, so the
orchestrator can isolate one project's failure with a single ``except``
clause while callers still handle specific failure modes.
"""

from __future__ import annotations

from typing import Any


class ProjectSyncError(Exception):
    """Base exception for all projectsync errors."""


class ConfigError(ProjectSyncError):
    """Raised when a config document or a setting is missing or malformed."""


class TransportError(ProjectSyncError):
    """Raised when a GraphQL call fails at the HTTP or GraphQL layer.

    Attributes:
        errors: Raw GraphQL error objects, if the API returned any.
        status_code: HTTP status code, if a response was received.
    """

    def __init__(
        self,
        message: str,
        *,
        errors: list[dict[str, Any]] | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.errors = errors or []
        self.status_code = status_code


class AuthenticationError(TransportError):
    """Raised when no token is available or GitHub rejects it."""


class ResponseShapeError(TransportError):
    """Raised when a response does not have the expected structure."""


class OwnerNotFoundError(ProjectSyncError):
    """Raised when a login resolves to neither an organization nor a user."""

    def __init__(self, login: str) -> None:
        super().__init__(f"Owner '{login}' not found or not accessible with provided token.")
        self.login = login


class RepositoryNotFoundError(ProjectSyncError):
    """Raised when a repository lookup returns nothing."""


class ProjectNotFoundError(ProjectSyncError):
    """Raised when a project lookup by owner and number returns nothing."""


class FieldSyncError(ProjectSyncError):
    """Raised when a project field cannot be created or resolved."""


class ItemAddError(ProjectSyncError):
    """Raised when an issue or pull request cannot be added to a project."""
