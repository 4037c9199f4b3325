"""Terminal progress view for interactive ``projectsync`` runs."""

from __future__ import annotations

from dataclasses import dataclass
from types import TracebackType

from rich.console import Console
from rich.progress import BarColumn, MofNCompleteColumn, Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.progress import TaskID as RichTaskID

from projectsync.sync.progress import SyncProgress


@dataclass
class _Phase:
    task_id: RichTaskID
    failures: int = 0


class RichSyncProgress(SyncProgress):
    """Shows one bar per phase, the project being worked on, and failures as they happen.

    Failed projects are printed above the live display so they stay on screen
    after the run; the bar keeps going.

    Use as a context manager::

        with RichSyncProgress() as progress:
            summary = await ProjectSyncOrchestrator(client, settings, progress=progress).run()
    """

    def __init__(self, console: Console | None = None) -> None:
        self._console = console or Console(stderr=True)
        self._progress = Progress(
            SpinnerColumn(),
            TextColumn("[bold]{task.description}"),
            BarColumn(bar_width=24),
            MofNCompleteColumn(),
            TextColumn("[dim]{task.fields[current]}"),
            TimeElapsedColumn(),
            console=self._console,
        )
        self._phases: dict[str, _Phase] = {}

    def __enter__(self) -> RichSyncProgress:
        self._progress.start()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self._progress.stop()

    @property
    def failures(self) -> dict[str, int]:
        """Failed item count per phase."""
        return {name: phase.failures for name, phase in self._phases.items()}

    def phase_start(self, phase: str, total: int | None = None) -> None:
        task_id = self._progress.add_task(phase, total=total, current="")
        self._phases[phase] = _Phase(task_id)

    def item_done(self, phase: str, label: str = "", *, failed: bool = False) -> None:
        state = self._phases.get(phase)
        if state is None:
            return
        if failed:
            state.failures += 1
            self._progress.console.print(f"[red]failed[/red] {label or phase}")
        self._progress.update(state.task_id, advance=1, current=label, description=self._describe(phase, state))

    def phase_done(self, phase: str) -> None:
        state = self._phases.get(phase)
        if state is None:
            return
        task = self._progress.tasks[state.task_id]
        total = task.total if task.total is not None else 1
        self._progress.update(state.task_id, total=total, completed=total, current="")

    def phase_error(self, phase: str, error: BaseException) -> None:
        state = self._phases.get(phase)
        if state is None:
            return
        self._progress.update(state.task_id, description=f"{phase} [red]error[/red]", current=type(error).__name__)
        self._progress.stop_task(state.task_id)

    @staticmethod
    def _describe(phase: str, state: _Phase) -> str:
        if not state.failures:
            return phase
        return f"{phase} [red]({state.failures} failed)[/red]"
