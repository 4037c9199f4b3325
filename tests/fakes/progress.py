"""Progress observer that records events for assertions."""

from __future__ import annotations

from projectsync.sync.progress import SyncProgress


class RecordingProgress(SyncProgress):
    def __init__(self) -> None:
        self.events: list[tuple[str, str]] = []

    def phase_start(self, phase: str, total: int | None = None) -> None:
        self.events.append(("start", f"{phase}:{total}"))

    def item_done(self, phase: str, label: str = "", *, failed: bool = False) -> None:
        self.events.append(("failed" if failed else "item", f"{phase}:{label}" if label else phase))

    def phase_done(self, phase: str) -> None:
        self.events.append(("done", phase))

    def phase_error(self, phase: str, error: BaseException) -> None:
        self.events.append(("error", phase))
