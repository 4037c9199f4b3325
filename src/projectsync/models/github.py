"""Snapshots of live GitHub state, decoded from GraphQL responses.

Nothing here is cached across runs; every run fetches these again.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from projectsync.models.enums import OwnerType


class Owner(BaseModel):
    """A resolved project owner."""

    id: str
    type: OwnerType
    login: str


class Repository(BaseModel):
    """A repository that projects can be linked to and backfilled from."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name_with_owner: str = Field(alias="nameWithOwner")
    url: str = ""


class Project(BaseModel):
    """A Project v2 board."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    number: int | None = None
    title: str = ""
    short_description: str = Field(default="", alias="shortDescription")
    public: bool | None = None
    url: str = ""
    owner: Owner | None = None

    @field_validator("short_description", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> str:
        return value or ""


class RemoteOption(BaseModel):
    """An existing option of a single-select field."""

    id: str = ""
    name: str
    color: str = ""


class RemoteField(BaseModel):
    """An existing project field."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    data_type: str = Field(alias="dataType")
    options: list[RemoteOption] = Field(default_factory=list)

    @field_validator("options", mode="before")
    @classmethod
    def _none_to_list(cls, value: Any) -> list[Any]:
        return value or []

    def find_option(self, name: str) -> RemoteOption | None:
        """Return the option named *name* (case-insensitive), if any."""
        lower = name.lower()
        for option in self.options:
            if option.name.lower() == lower:
                return option
        return None


def _label_names(value: Any) -> list[str]:
    if isinstance(value, dict):
        value = value.get("nodes") or []
    names: list[str] = []
    for label in value or []:
        name = label.get("name") if isinstance(label, dict) else label
        if name:
            names.append(str(name))
    return names


class Issue(BaseModel):
    """Issue content of a project item."""

    model_config = ConfigDict(populate_by_name=True)

    typename: Literal["Issue"] = Field(alias="__typename")
    id: str
    number: int
    state: str = "OPEN"
    labels: list[str] = Field(default_factory=list)

    @field_validator("labels", mode="before")
    @classmethod
    def _flatten_labels(cls, value: Any) -> list[str]:
        return _label_names(value)


class PullRequest(BaseModel):
    """Pull request content of a project item."""

    model_config = ConfigDict(populate_by_name=True)

    typename: Literal["PullRequest"] = Field(alias="__typename")
    id: str
    number: int
    state: str = "OPEN"
    merged: bool = False
    labels: list[str] = Field(default_factory=list)

    @field_validator("labels", mode="before")
    @classmethod
    def _flatten_labels(cls, value: Any) -> list[str]:
        return _label_names(value)

    @field_validator("merged", mode="before")
    @classmethod
    def _none_to_false(cls, value: Any) -> bool:
        return bool(value)


ItemContent = Annotated[Issue | PullRequest, Field(discriminator="typename")]
"""Tagged union of the content types a project item can be synced from."""


class ProjectItem(BaseModel):
    """An item on a project board.

    Attributes:
        id: Project item node ID.
        content: The linked issue or pull request, or ``None`` for drafts and
            content the token cannot see.
        field_values: Field ID → currently selected single-select option ID.
    """

    id: str
    content: ItemContent | None = None
    field_values: dict[str, str] = Field(default_factory=dict)
