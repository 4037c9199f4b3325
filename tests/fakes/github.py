"""In-memory GitHub Projects (v2) backend implementing ``GraphQLExecutor``."""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from projectsync.exceptions import TransportError

_OPERATION = re.compile(r"(query|mutation)\s+(\w+)")


def issue(
    node_id: str, number: int, *, state: str = "OPEN", labels: tuple[str, ...] = ()
) -> dict[str, Any]:
    return {
        "__typename": "Issue",
        "id": node_id,
        "number": number,
        "state": state,
        "labels": {"nodes": [{"name": label} for label in labels]},
    }


def pull_request(
    node_id: str, number: int, *, state: str = "OPEN", merged: bool = False, labels: tuple[str, ...] = ()
) -> dict[str, Any]:
    return {
        "__typename": "PullRequest",
        "id": node_id,
        "number": number,
        "state": state,
        "merged": merged,
        "labels": {"nodes": [{"name": label} for label in labels]},
    }


def already_exists_error() -> TransportError:
    errors = [{"message": "Content already exists in this project", "type": "UNPROCESSABLE"}]
    return TransportError("GraphQL request failed: Content already exists in this project", errors=errors)


@dataclass
class FakeProject:
    id: str
    number: int
    title: str
    owner_login: str
    short_description: str | None = None
    public: bool = False
    repositories: list[str] = field(default_factory=list)
    fields: list[dict[str, Any]] = field(default_factory=list)
    items: list[dict[str, Any]] = field(default_factory=list)

    def node(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "number": self.number,
            "title": self.title,
            "shortDescription": self.short_description,
            "public": self.public,
            "url": f"https://github.com/{self.owner_login}/projects/{self.number}",
        }


@dataclass
class _Failure:
    operation: str
    error: Exception
    when: Callable[[dict[str, Any]], bool] | None
    once: bool


class FakeGitHub:
    """Dispatches operations by name onto dict-backed state and records every call."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self.organizations: dict[str, dict[str, str]] = {}
        self.users: dict[str, dict[str, str]] = {}
        self.repositories: dict[str, dict[str, Any]] = {}
        self.projects: list[FakeProject] = []
        self.content: dict[str, dict[str, Any]] = {}
        self.return_item_id = True
        self._failures: list[_Failure] = []
        self._counter = 0

    # -- state helpers -----------------------------------------------------

    def _next_id(self, prefix: str) -> str:
        self._counter += 1
        return f"{prefix}_{self._counter}"

    def add_organization(self, login: str) -> str:
        node_id = f"O_{login}"
        self.organizations[login] = {"id": node_id, "login": login}
        return node_id

    def add_user(self, login: str) -> str:
        node_id = f"U_{login}"
        self.users[login] = {"id": node_id, "login": login}
        return node_id

    def add_repository(
        self,
        full_name: str,
        *,
        issues: list[dict[str, Any]] | None = None,
        pull_requests: list[dict[str, Any]] | None = None,
    ) -> str:
        node_id = f"R_{full_name.replace('/', '_')}"
        self.repositories[full_name] = {
            "id": node_id,
            "nameWithOwner": full_name,
            "url": f"https://github.com/{full_name}",
            "issues": list(issues or []),
            "pullRequests": list(pull_requests or []),
        }
        for node in [*(issues or []), *(pull_requests or [])]:
            self.content[node["id"]] = node
        return node_id

    def add_project(self, owner_login: str, title: str, **kwargs: Any) -> FakeProject:
        number = len(self.projects) + 1
        project = FakeProject(id=f"PVT_{number}", number=number, title=title, owner_login=owner_login, **kwargs)
        self.projects.append(project)
        return project

    def add_field(
        self, project: FakeProject, name: str, data_type: str, options: list[tuple[str, str]] | None = None
    ) -> dict[str, Any]:
        node: dict[str, Any] = {"id": self._next_id("F"), "name": name, "dataType": data_type}
        if data_type == "SINGLE_SELECT":
            node["options"] = [
                {"id": self._next_id("OPT"), "name": opt_name, "color": color} for opt_name, color in options or []
            ]
        project.fields.append(node)
        return node

    def add_item(self, project: FakeProject, content: dict[str, Any] | None) -> dict[str, Any]:
        item = {"id": self._next_id("PVTI"), "content_id": content["id"] if content else None, "values": {}}
        if content is not None:
            self.content.setdefault(content["id"], content)
        project.items.append(item)
        return item

    def project(self, project_id: str) -> FakeProject | None:
        return next((p for p in self.projects if p.id == project_id), None)

    def fail(
        self,
        operation: str,
        error: Exception,
        *,
        when: Callable[[dict[str, Any]], bool] | None = None,
        once: bool = False,
    ) -> None:
        """Make *operation* raise *error* (optionally only when *when* matches its variables)."""
        self._failures.append(_Failure(operation, error, when, once))

    def operations(self) -> list[str]:
        return [name for name, _ in self.calls]

    def mutations(self) -> list[str]:
        return [name for name in self.operations() if not name.startswith(("Fetch", "Search", "Resolve"))]

    # -- executor ----------------------------------------------------------

    async def execute(
        self,
        query: str,
        variables: dict[str, Any] | None = None,
        *,
        tolerate_not_found: bool = False,
    ) -> dict[str, Any]:
        match = _OPERATION.search(query)
        assert match, "operation must be named"
        name = match.group(2)
        variables = dict(variables or {})
        self.calls.append((name, variables))

        for failure in list(self._failures):
            if failure.operation == name and (failure.when is None or failure.when(variables)):
                if failure.once:
                    self._failures.remove(failure)
                raise failure.error

        handler = getattr(self, f"_op_{name}", None)
        assert handler is not None, f"unhandled operation {name}"
        return handler(variables)

    @staticmethod
    def _page(nodes: list[dict[str, Any]], variables: dict[str, Any]) -> dict[str, Any]:
        start = int(variables.get("after") or 0)
        size = int(variables.get("first") or 100)
        end = start + size
        return {
            "nodes": nodes[start:end],
            "pageInfo": {"hasNextPage": end < len(nodes), "endCursor": str(end)},
        }

    def _item_node(self, item: dict[str, Any]) -> dict[str, Any]:
        content = self.content.get(item["content_id"]) if item["content_id"] else None
        values = [{"optionId": option_id, "field": {"id": field_id}} for field_id, option_id in item["values"].items()]
        return {"id": item["id"], "content": content, "fieldValues": {"nodes": values}}

    def _op_ResolveOwner(self, v: dict[str, Any]) -> dict[str, Any]:
        return {"organization": self.organizations.get(v["login"]), "user": self.users.get(v["login"])}

    def _op_FetchRepository(self, v: dict[str, Any]) -> dict[str, Any]:
        repo = self.repositories.get(f"{v['owner']}/{v['name']}")
        if repo is None:
            return {"repository": None}
        return {"repository": {k: repo[k] for k in ("id", "nameWithOwner", "url")}}

    def _search(self, owners: dict[str, Any], v: dict[str, Any]) -> dict[str, Any]:
        if v["login"] not in owners:
            return {"owner": None}
        search = v["search"].lower()
        nodes = [
            p.node() for p in reversed(self.projects) if p.owner_login == v["login"] and search in p.title.lower()
        ]
        return {"owner": {"projectsV2": self._page(nodes, v)}}

    def _op_SearchOrganizationProjects(self, v: dict[str, Any]) -> dict[str, Any]:
        return self._search(self.organizations, v)

    def _op_SearchUserProjects(self, v: dict[str, Any]) -> dict[str, Any]:
        return self._search(self.users, v)

    def _op_FetchProjectByNumber(self, v: dict[str, Any]) -> dict[str, Any]:
        data: dict[str, Any] = {"user": None, "organization": None}
        for key, owners in (("user", self.users), ("organization", self.organizations)):
            if v["login"] not in owners:
                continue
            match = next((p for p in self.projects if p.owner_login == v["login"] and p.number == v["number"]), None)
            data[key] = {"project": match.node() if match else None}
        return data

    def _op_CreateProject(self, v: dict[str, Any]) -> dict[str, Any]:
        data = v["input"]
        owner_login = next(
            login for login, node in {**self.users, **self.organizations}.items() if node["id"] == data["ownerId"]
        )
        project = self.add_project(owner_login, data["title"])
        if data.get("repositoryId"):
            project.repositories.append(data["repositoryId"])
        return {"createProjectV2": {"projectV2": project.node()}}

    def _op_UpdateProject(self, v: dict[str, Any]) -> dict[str, Any]:
        data = v["input"]
        project = self.project(data["projectId"])
        assert project is not None
        if "title" in data:
            project.title = data["title"]
        if "shortDescription" in data:
            project.short_description = data["shortDescription"]
        if "public" in data:
            project.public = data["public"]
        return {"updateProjectV2": {"projectV2": project.node()}}

    def _op_FetchLinkedRepositories(self, v: dict[str, Any]) -> dict[str, Any]:
        project = self.project(v["projectId"])
        if project is None:
            return {"node": None}
        by_id = {repo["id"]: repo for repo in self.repositories.values()}
        nodes = [{"id": rid, "nameWithOwner": by_id[rid]["nameWithOwner"]} for rid in project.repositories]
        return {"node": {"repositories": self._page(nodes, v)}}

    def _op_LinkProjectToRepository(self, v: dict[str, Any]) -> dict[str, Any]:
        project = self.project(v["input"]["projectId"])
        assert project is not None
        project.repositories.append(v["input"]["repositoryId"])
        return {"linkProjectV2ToRepository": {"repository": {"id": v["input"]["repositoryId"]}}}

    def _op_FetchProjectFields(self, v: dict[str, Any]) -> dict[str, Any]:
        project = self.project(v["projectId"])
        if project is None:
            return {"node": None}
        return {"node": {"fields": self._page(project.fields, v)}}

    def _options(self, options: list[dict[str, str]]) -> list[dict[str, str]]:
        return [{"id": self._next_id("OPT"), "name": o["name"], "color": o["color"]} for o in options]

    def _op_CreateField(self, v: dict[str, Any]) -> dict[str, Any]:
        data = v["input"]
        project = self.project(data["projectId"])
        assert project is not None
        node: dict[str, Any] = {"id": self._next_id("F"), "name": data["name"], "dataType": data["dataType"]}
        if "singleSelectOptions" in data:
            node["options"] = self._options(data["singleSelectOptions"])
        project.fields.append(node)
        return {"createProjectV2Field": {"projectV2Field": node}}

    def _op_UpdateField(self, v: dict[str, Any]) -> dict[str, Any]:
        data = v["input"]
        node = next(f for p in self.projects for f in p.fields if f["id"] == data["fieldId"])
        if "name" in data:
            node["name"] = data["name"]
        if "singleSelectOptions" in data:
            node["options"] = self._options(data["singleSelectOptions"])
        return {"updateProjectV2Field": {"projectV2Field": node}}

    def _op_FetchProjectItems(self, v: dict[str, Any]) -> dict[str, Any]:
        project = self.project(v["projectId"])
        if project is None:
            return {"node": None}
        return {"node": {"items": self._page([self._item_node(i) for i in project.items], v)}}

    def _repository_connection(self, v: dict[str, Any], key: str) -> dict[str, Any]:
        repo = self.repositories.get(f"{v['owner']}/{v['name']}")
        if repo is None:
            return {"repository": None}
        return {"repository": {key: self._page(repo[key], v)}}

    def _op_FetchRepositoryIssues(self, v: dict[str, Any]) -> dict[str, Any]:
        return self._repository_connection(v, "issues")

    def _op_FetchRepositoryPullRequests(self, v: dict[str, Any]) -> dict[str, Any]:
        return self._repository_connection(v, "pullRequests")

    def _op_AddProjectItem(self, v: dict[str, Any]) -> dict[str, Any]:
        data = v["input"]
        project = self.project(data["projectId"])
        assert project is not None
        item = next((i for i in project.items if i["content_id"] == data["contentId"]), None)
        if item is None:
            item = self.add_item(project, self.content.get(data["contentId"]))
            item["content_id"] = data["contentId"]
        if not self.return_item_id:
            return {"addProjectV2ItemById": {"item": None}}
        return {"addProjectV2ItemById": {"item": {"id": item["id"]}}}

    def _op_UpdateItemFieldValue(self, v: dict[str, Any]) -> dict[str, Any]:
        data = v["input"]
        project = self.project(data["projectId"])
        assert project is not None
        item = next(i for i in project.items if i["id"] == data["itemId"])
        item["values"][data["fieldId"]] = data["value"]["singleSelectOptionId"]
        return {"updateProjectV2ItemFieldValue": {"projectV2Item": {"id": item["id"]}}}
