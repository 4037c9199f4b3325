"""Command-line interface for projectsync."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from collections.abc import Mapping
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Any

from projectsync.exceptions import ProjectSyncError
from projectsync.github.transport import GitHubGraphQLClient, describe_error
from projectsync.models.results import BackfillResult, MilestoneStatusResult, SyncSummary
from projectsync.reconcile.milestone import MilestoneStatusUpdater, read_event_payload
from projectsync.settings import ProjectSyncSettings
from projectsync.sync.backfill import run_backfill
from projectsync.sync.orchestrator import ProjectSyncOrchestrator
from projectsync.sync.progress import SyncProgress

_LOG = logging.getLogger("projectsync")


def _package_version() -> str:
    try:
        return version("projectsync")
    except PackageNotFoundError:
        return "0.0.0"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="projectsync")
    parser.add_argument("--version", action="version", version=f"%(prog)s {_package_version()}")

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--config-dir",
        type=Path,
        default=None,
        help="Directory of project YAML configs (default: .github/projects)",
    )
    common.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("sync", parents=[common], help="Reconcile every configured project")

    backfill_parser = subparsers.add_parser(
        "backfill", parents=[common], help="Add repository issues/PRs to a project and derive field values"
    )
    backfill_parser.add_argument("--project-name", default=None, help="Config to backfill (env: PROJECT_NAME)")
    backfill_parser.add_argument("--project-owner", default=None, help="Override the owner (env: PROJECT_OWNER)")

    milestone_parser = subparsers.add_parser(
        "milestone-status", parents=[common], help="Set an issue's status from its milestone (issues event)"
    )
    milestone_parser.add_argument(
        "--event-path", type=Path, default=None, help="Webhook payload JSON (env: GITHUB_EVENT_PATH)"
    )
    milestone_parser.add_argument(
        "--project-number", type=int, default=None, help="Target project number (env: PROJECT_NUMBER)"
    )

    return parser


def _apply_overrides(settings: ProjectSyncSettings, args: argparse.Namespace) -> ProjectSyncSettings:
    overrides: dict[str, Any] = {}
    for arg_name, setting_name in (
        ("config_dir", "config_dir"),
        ("project_name", "project_name"),
        ("project_owner", "project_owner"),
        ("event_path", "event_path"),
        ("project_number", "project_number"),
    ):
        value = getattr(args, arg_name, None)
        if value is not None:
            overrides[setting_name] = value
    if args.verbose:
        overrides["debug"] = True
    return settings.model_copy(update=overrides) if overrides else settings


def _configure_logging(*, debug: bool, interactive: bool) -> None:
    if debug:
        level = logging.DEBUG
    elif interactive:
        level = logging.WARNING
    else:
        level = logging.INFO
    logging.basicConfig(level=level, format="%(levelname)s %(name)s %(message)s", stream=sys.stderr)


def _format_sync_summary(summary: SyncSummary) -> str:
    lines = ["", "projectsync - sync complete", ""]
    if not summary.results:
        lines.append("  No project configs found")
    for result in summary.results:
        if result.ok and result.project is not None:
            fields = result.fields
            lines.append(f"  [ok]     {result.config.name}  {result.project.url or result.project.id}")
            lines.append(
                f"           fields: {len(fields.created)} created, {len(fields.updated)} updated, "
                f"{len(fields.unchanged)} unchanged, {len(fields.skipped)} skipped, {len(fields.failed)} failed"
            )
        else:
            lines.append(f"  [failed] {result.config.name} ({result.config.source_file}): {result.error}")
    lines.append("")
    return "\n".join(lines)


def _format_backfill_summary(result: BackfillResult) -> str:
    return "\n".join(
        [
            "",
            "projectsync - backfill complete",
            "",
            f"  Repository:   {result.issues_seen} issues, {result.pull_requests_seen} pull requests",
            f"  Added:        {result.added} item{'s' if result.added != 1 else ''}",
            f"  Field values: {result.updated_values} updated",
            f"  Board:        {result.total_items} items",
            "",
        ]
    )


def _format_milestone_summary(result: MilestoneStatusResult) -> str:
    if result.changed:
        detail = f"issue #{result.issue_number} -> {result.option_name} (item {result.item_id})"
    else:
        detail = f"no change ({result.action.value})"
    return f"\nprojectsync - milestone status: {detail}\n"


async def _run_sync(settings: ProjectSyncSettings, progress: SyncProgress | None) -> bool:
    async with GitHubGraphQLClient(settings.token) as client:
        summary = await ProjectSyncOrchestrator(client, settings, progress=progress).run()
    print(_format_sync_summary(summary))
    return summary.ok


async def _run_backfill(settings: ProjectSyncSettings, progress: SyncProgress | None) -> bool:
    async with GitHubGraphQLClient(settings.token) as client:
        result = await run_backfill(client, settings, progress=progress)
    print(_format_backfill_summary(result))
    return True


async def _run_milestone_status(settings: ProjectSyncSettings, progress: SyncProgress | None) -> bool:
    payload = read_event_payload(settings.event_path)
    async with GitHubGraphQLClient(settings.token) as client:
        result = await MilestoneStatusUpdater(client, settings).run(payload)
    print(_format_milestone_summary(result))
    return True


_COMMANDS = {
    "sync": _run_sync,
    "backfill": _run_backfill,
    "milestone-status": _run_milestone_status,
}


def main(argv: list[str] | None = None, environ: Mapping[str, str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = _apply_overrides(ProjectSyncSettings.from_env(environ), args)
    except ProjectSyncError as exc:
        _configure_logging(debug=args.verbose, interactive=False)
        print(f"error: {exc}", file=sys.stderr)
        return 1

    interactive = sys.stderr.isatty() and not settings.debug
    _configure_logging(debug=settings.debug, interactive=interactive)
    command = _COMMANDS[args.command]

    try:
        if interactive:
            from projectsync.progress import RichSyncProgress

            with RichSyncProgress() as progress:
                ok = asyncio.run(command(settings, progress))
        else:
            ok = asyncio.run(command(settings, None))
    except ProjectSyncError as exc:
        _LOG.debug("Command %s failed", args.command, exc_info=True)
        print(f"error: {describe_error(exc)}", file=sys.stderr)
        return 1
    except Exception as exc:  # pragma: no cover
        _LOG.exception("Unexpected failure")
        print(f"error: {exc}", file=sys.stderr)
        return 1

    return 0 if ok else 1


if __name__ == "__main__":
    raise SystemExit(main())
