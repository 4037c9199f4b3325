"""Models for the desired project state declared in YAML config files.

Values are kept close to what the user wrote; normalization of field types and
option colors happens in :mod:`projectsync.reconcile.fields` so that one bad
field only skips that field rather than the whole document.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator


class FieldOption(BaseModel):
    """One option of a single-select field as declared in config."""

    name: str = ""
    color: str | None = None
    description: str = ""

    @field_validator("name", "description", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        return "" if value is None else str(value)

    @field_validator("color", mode="before")
    @classmethod
    def _coerce_color(cls, value: Any) -> str | None:
        return None if value is None else str(value)


class FieldConfig(BaseModel):
    """A custom project field as declared in config."""

    name: str = ""
    type: str | None = None
    options: list[FieldOption] = Field(default_factory=list)

    @field_validator("name", mode="before")
    @classmethod
    def _coerce_name(cls, value: Any) -> str:
        return "" if value is None else str(value).strip()

    @field_validator("type", mode="before")
    @classmethod
    def _coerce_type(cls, value: Any) -> str | None:
        return None if value is None else str(value)

    @field_validator("options", mode="before")
    @classmethod
    def _drop_empty_options(cls, value: Any) -> list[Any]:
        if not isinstance(value, list):
            return []
        # Non-mapping entries become nameless options, which are dropped later.
        return [opt if isinstance(opt, (dict, FieldOption)) else {} for opt in value if opt]


class ProjectConfig(BaseModel):
    """Desired state of one project, loaded from one YAML document.

    Attributes:
        source_file: File name the config was loaded from.
        owner: Login of the organization or user owning the project.
        name: Project title; matched case-insensitively against existing projects.
        description: Desired short description.
        public: Desired visibility.
        fields: Custom fields to reconcile.
        views: Requested views (reported only; not supported by the API).
        automation: Requested automation rules (reported only; not supported by the API).
    """

    source_file: str
    owner: str
    name: str
    description: str = ""
    public: bool = False
    fields: list[FieldConfig] = Field(default_factory=list)
    views: list[Any] = Field(default_factory=list)
    automation: list[Any] = Field(default_factory=list)

    @field_validator("fields", mode="before")
    @classmethod
    def _nameless_malformed_fields(cls, value: Any) -> list[Any]:
        if not isinstance(value, list):
            return []
        # A non-mapping entry is kept as a nameless field so only that field is skipped.
        return [entry if isinstance(entry, (dict, FieldConfig)) else {} for entry in value]
