"""Tests for ProjectSyncOrchestrator."""

from __future__ import annotations

import logging

import pytest

from projectsync.settings import ProjectSyncSettings
from projectsync.sync.orchestrator import ProjectSyncOrchestrator
from tests.fakes.github import FakeGitHub
from tests.fakes.progress import RecordingProgress

ROADMAP = """
project:
  name: Roadmap
  description: Quarterly roadmap
fields:
  - name: Status
    type: single_select
    options:
      - {name: Todo, color: GRAY}
      - {name: Done, color: GREEN}
  - name: Notes
    type: text
views:
  - name: Board
"""


@pytest.mark.asyncio
async def test_reconciles_every_config(github: FakeGitHub, settings: ProjectSyncSettings, write_config) -> None:
    write_config("roadmap.yaml", ROADMAP)
    write_config("bugs.yml", "project:\n  name: Bugs\n  owner: acme\n")
    progress = RecordingProgress()

    summary = await ProjectSyncOrchestrator(github, settings, progress=progress).run()

    assert summary.ok
    assert [r.config.name for r in summary.results] == ["Bugs", "Roadmap"]
    roadmap = summary.results[1]
    assert roadmap.fields.created == ["Status", "Notes"]
    assert roadmap.project is not None and roadmap.project.short_description == "Quarterly roadmap"
    assert {p.title for p in github.projects} == {"Bugs", "Roadmap"}
    assert all(p.repositories == ["R_acme_widgets"] for p in github.projects)
    assert progress.events == [
        ("start", "Projects:2"),
        ("item", "Projects:Bugs"),
        ("item", "Projects:Roadmap"),
        ("done", "Projects"),
    ]


@pytest.mark.asyncio
async def test_rerun_makes_no_mutations(github: FakeGitHub, settings: ProjectSyncSettings, write_config) -> None:
    write_config("roadmap.yaml", ROADMAP)
    orchestrator = ProjectSyncOrchestrator(github, settings)
    await orchestrator.run()
    github.calls.clear()

    summary = await orchestrator.run()

    assert summary.ok
    assert github.mutations() == []
    assert summary.results[0].fields.unchanged == ["Status", "Notes"]


@pytest.mark.asyncio
async def test_one_failing_project_does_not_stop_the_others(
    github: FakeGitHub, settings: ProjectSyncSettings, write_config, caplog: pytest.LogCaptureFixture
) -> None:
    write_config("a.yaml", "project:\n  name: Ghost board\n  owner: ghost\n")
    write_config("b.yaml", ROADMAP)
    progress = RecordingProgress()

    with caplog.at_level(logging.ERROR):
        summary = await ProjectSyncOrchestrator(github, settings, progress=progress).run()

    assert not summary.ok
    assert [r.config.name for r in summary.failed] == ["Ghost board"]
    assert "Owner 'ghost' not found" in (summary.failed[0].error or "")
    assert summary.results[1].ok
    assert [p.title for p in github.projects] == ["Roadmap"]
    assert "1 of 2 project(s) failed: Ghost board" in caplog.text
    assert progress.events[1:3] == [("failed", "Projects:Ghost board"), ("item", "Projects:Roadmap")]


@pytest.mark.asyncio
async def test_no_configs_makes_no_calls(github: FakeGitHub, settings: ProjectSyncSettings) -> None:
    summary = await ProjectSyncOrchestrator(github, settings).run()

    assert summary.results == []
    assert summary.ok
    assert github.calls == []


@pytest.mark.asyncio
async def test_unresolvable_repository_skips_linking(
    github: FakeGitHub, settings: ProjectSyncSettings, write_config, caplog: pytest.LogCaptureFixture
) -> None:
    write_config("roadmap.yaml", ROADMAP)
    settings = settings.model_copy(update={"repository": "acme/missing"})

    with caplog.at_level(logging.WARNING):
        summary = await ProjectSyncOrchestrator(github, settings).run()

    assert summary.ok
    assert github.projects[0].repositories == []
    assert "Unable to resolve repository 'acme/missing'" in caplog.text


@pytest.mark.asyncio
async def test_unset_repository_skips_linking(github: FakeGitHub, write_config, tmp_path) -> None:
    write_config("roadmap.yaml", ROADMAP.replace("  name: Roadmap\n", "  name: Roadmap\n  owner: acme\n"))
    settings = ProjectSyncSettings(token="t", config_dir=tmp_path / "projects")

    summary = await ProjectSyncOrchestrator(github, settings).run()

    assert summary.ok
    assert "FetchRepository" not in github.operations()
    assert "LinkProjectToRepository" not in github.operations()
