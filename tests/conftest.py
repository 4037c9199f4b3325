"""Shared test fixtures for projectsync tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from projectsync.models.config import FieldConfig, FieldOption, ProjectConfig
from projectsync.settings import ProjectSyncSettings
from tests.fakes.github import FakeGitHub


@pytest.fixture
def github() -> FakeGitHub:
    """A fake backend with one organization and one repository."""
    fake = FakeGitHub()
    fake.add_organization("acme")
    fake.add_repository("acme/widgets")
    return fake


@pytest.fixture
def sample_config() -> ProjectConfig:
    """A config declaring a single-select Status field and a text field."""
    return ProjectConfig(
        source_file="roadmap.yaml",
        owner="acme",
        name="Roadmap",
        description="Quarterly roadmap",
        public=False,
        fields=[
            FieldConfig(
                name="Status",
                type="single_select",
                options=[FieldOption(name="Todo", color="GRAY"), FieldOption(name="Done", color="GREEN")],
            ),
            FieldConfig(name="Notes", type="text"),
        ],
    )


@pytest.fixture
def settings(tmp_path: Path) -> ProjectSyncSettings:
    return ProjectSyncSettings(
        token="t0ken",
        repository="acme/widgets",
        repository_owner="acme",
        config_dir=tmp_path / "projects",
    )


@pytest.fixture
def write_config(tmp_path: Path):
    """Write a YAML document into the settings fixture's config directory."""
    config_dir = tmp_path / "projects"

    def _write(filename: str, text: str) -> Path:
        config_dir.mkdir(parents=True, exist_ok=True)
        path = config_dir / filename
        path.write_text(text, encoding="utf-8")
        return path

    return _write
