"""Progress sinks receiving per-job updates from worker threads."""

from __future__ import annotations

from rich.console import Console
from rich.progress import (
    Progress,
    SpinnerColumn,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
)

from jxl_converter.application.actions import describe
from jxl_converter.application.results import JobOutcome, RunSummary


class NullProgressSink:
    """Discard progress updates."""

    def update(self, outcome: JobOutcome, counts: RunSummary) -> None:
        """Ignore the update."""
        del outcome, counts

    def close(self) -> None:
        """Nothing to release."""


class RichProgressSink:
    """Live spinner with running counts, rendered by ``rich``.

    The total is unknown while the walker is still producing tasks, so the
    display counts processed files instead of showing a percentage.
    """

    def __init__(self, console: Console | None = None) -> None:
        self._progress = Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            TextColumn("{task.completed} files"),
            TimeElapsedColumn(),
            console=console,
        )
        self._task_id: TaskID = self._progress.add_task("Collecting files...", total=None)
        self._progress.start()

    def update(self, outcome: JobOutcome, counts: RunSummary) -> None:
        """Advance the spinner and refresh the per-category counts."""
        self._progress.update(
            self._task_id,
            advance=1,
            description=(
                f"[green]{counts.converted} converted[/green] "
                f"{counts.copied} copied {counts.skipped} skipped "
                f"[red]{counts.failed} failed[/red] "
                f"[dim](last: {describe(outcome)} {outcome.source_path.name})[/dim]"
            ),
        )

    def close(self) -> None:
        """Stop the live display."""
        self._progress.stop()
