"""Ensure a Project v2 exists, matches its config, and is linked to a repository."""

from __future__ import annotations

import logging
from typing import Any

from projectsync.exceptions import RepositoryNotFoundError
from projectsync.github import queries
from projectsync.github.decode import decode_project, decode_repository
from projectsync.github.pagination import paginate
from projectsync.github.transport import GraphQLExecutor
from projectsync.models.config import ProjectConfig
from projectsync.models.enums import OwnerType
from projectsync.models.github import Owner, Project, Repository
from projectsync.reconcile.owner import OwnerResolver
from projectsync.settings import split_repository_name

_LOG = logging.getLogger(__name__)

PROJECT_SEARCH_PAGE_SIZE = 20
LINKED_REPOSITORY_PAGE_SIZE = 50


async def get_repository(client: GraphQLExecutor, full_name: str) -> Repository:
    """Look up a repository by ``owner/name``.

    Raises:
        ConfigError: If *full_name* is not ``owner/name``.
        RepositoryNotFoundError: If the repository does not exist or is not visible.
    """
    owner, name = split_repository_name(full_name)
    _LOG.debug("Fetching repository %s/%s", owner, name)
    data = await client.execute(queries.FETCH_REPOSITORY, {"owner": owner, "name": name}, tolerate_not_found=True)
    node = data.get("repository")
    if not node:
        raise RepositoryNotFoundError(f"Repository {full_name} not found.")
    return decode_repository(node)


def diff_project(project: Project, config: ProjectConfig) -> dict[str, Any]:
    """Return the ``updateProjectV2`` input fields that differ from *config*.

    ``public`` is only compared when the remote value is known.
    """
    updates: dict[str, Any] = {}
    if project.title != config.name:
        updates["title"] = config.name
    if project.short_description != config.description:
        updates["shortDescription"] = config.description
    if isinstance(project.public, bool) and project.public != config.public:
        updates["public"] = config.public
    return updates


class ProjectReconciler:
    """Creates, patches or leaves alone the project described by a config."""

    def __init__(self, client: GraphQLExecutor, owner_resolver: OwnerResolver | None = None) -> None:
        self._client = client
        self._owners = owner_resolver or OwnerResolver(client)

    async def ensure(self, config: ProjectConfig, repository: Repository | None = None) -> Project:
        """Converge the live project towards *config*.

        Raises:
            OwnerNotFoundError: If the config's owner cannot be resolved.
            TransportError: If any API call fails.
        """
        owner = await self._owners.resolve(config.owner)
        _LOG.info("Owner resolved: %s (%s)", owner.login, owner.type.value)

        project = await self.find_by_title(owner, config.name)
        if project is None:
            _LOG.info("Creating project '%s' for %s %s", config.name, owner.type.value, owner.login)
            project = await self._create(owner, config.name, repository)
        else:
            _LOG.info("Found existing project '%s' (#%s)", config.name, project.number)

        updates = diff_project(project, config)
        if updates:
            project = await self._update(project, updates)
            _LOG.info("Updated project settings for '%s': %s", config.name, ", ".join(sorted(updates)))

        if repository is not None:
            await self.link_repository(project, repository)
        else:
            _LOG.debug("No repository linking requested.")

        return project.model_copy(update={"owner": owner})

    async def find_by_title(self, owner: Owner, title: str) -> Project | None:
        """Find the owner's project whose title equals *title*, ignoring case.

        The server-side ``query`` filter matches substrings, so every page is
        checked for an exact match client-side.
        """
        query = (
            queries.SEARCH_ORGANIZATION_PROJECTS
            if owner.type is OwnerType.ORGANIZATION
            else queries.SEARCH_USER_PROJECTS
        )
        nodes = await paginate(
            self._client,
            query,
            {"login": owner.login, "search": title},
            ("owner", "projectsV2"),
            page_size=PROJECT_SEARCH_PAGE_SIZE,
        )
        wanted = title.lower()
        for node in nodes:
            if str(node.get("title") or "").lower() == wanted:
                return decode_project(node)
        return None

    async def link_repository(self, project: Project, repository: Repository) -> bool:
        """Link *repository* to *project* unless it is already linked.

        Returns:
            True if a link was created.
        """
        linked = await paginate(
            self._client,
            queries.FETCH_LINKED_REPOSITORIES,
            {"projectId": project.id},
            ("node", "repositories"),
            page_size=LINKED_REPOSITORY_PAGE_SIZE,
        )
        if any(node.get("id") == repository.id for node in linked):
            _LOG.debug("Project already linked to %s", repository.name_with_owner)
            return False

        await self._client.execute(
            queries.LINK_PROJECT_TO_REPOSITORY,
            {"input": {"projectId": project.id, "repositoryId": repository.id}},
        )
        _LOG.info("Linked project to repository %s", repository.name_with_owner)
        return True

    async def _create(self, owner: Owner, title: str, repository: Repository | None) -> Project:
        project_input: dict[str, Any] = {"ownerId": owner.id, "title": title}
        if repository is not None:
            project_input["repositoryId"] = repository.id
        data = await self._client.execute(queries.CREATE_PROJECT, {"input": project_input})
        return decode_project((data.get("createProjectV2") or {}).get("projectV2"))

    async def _update(self, project: Project, updates: dict[str, Any]) -> Project:
        _LOG.debug("Updating project %s with %s", project.id, updates)
        data = await self._client.execute(queries.UPDATE_PROJECT, {"input": {"projectId": project.id, **updates}})
        updated = decode_project((data.get("updateProjectV2") or {}).get("projectV2"))
        return updated.model_copy(update={"number": updated.number or project.number})
