"""Thread-safe fold of job outcomes into a run summary."""

from __future__ import annotations

import logging
import threading
from dataclasses import replace

from jxl_converter.application.ports import ProgressSink
from jxl_converter.application.results import (
    Copied,
    Converted,
    FailureDetail,
    Failed,
    JobOutcome,
    RunSummary,
    Skipped,
)

logger = logging.getLogger(__name__)


class ResultAggregator:
    """Single owner of the mutable run counters.

    ``record`` may be called from any worker thread; updates are serialized
    by one lock. Failures are kept in arrival order.
    """

    def __init__(self, progress: ProgressSink | None = None) -> None:
        self._progress = progress
        self._lock = threading.Lock()
        self._summary = RunSummary()
        self._failures: list[FailureDetail] = []
        self._finalized = False

    def record(self, outcome: JobOutcome) -> None:
        """Fold one outcome into the running totals."""
        with self._lock:
            if self._finalized:
                raise RuntimeError("cannot record outcomes after finalize()")
            self._summary = _fold(self._summary, outcome)
            if isinstance(outcome, Failed):
                self._failures.append(
                    FailureDetail(
                        path=outcome.source_path,
                        kind=outcome.kind,
                        message=outcome.message,
                    )
                )
            counts = self._summary

        if self._progress is not None:
            try:
                self._progress.update(outcome, counts)
            except Exception:
                logger.exception("progress sink failed; continuing")

    def snapshot(self) -> RunSummary:
        """Current counters (failures included) without finalizing."""
        with self._lock:
            return replace(self._summary, failures=tuple(self._failures))

    def finalize(self, *, interrupted: bool = False) -> RunSummary:
        """Freeze and return the summary once every job has completed."""
        with self._lock:
            self._finalized = True
            return replace(
                self._summary,
                failures=tuple(self._failures),
                interrupted=interrupted,
            )


def _fold(summary: RunSummary, outcome: JobOutcome) -> RunSummary:
    total = summary.total_seen + 1
    if isinstance(outcome, Converted):
        return replace(
            summary,
            total_seen=total,
            converted=summary.converted + 1,
            source_bytes=summary.source_bytes + outcome.source_size,
            output_bytes=summary.output_bytes + outcome.output_size,
        )
    if isinstance(outcome, Copied):
        return replace(summary, total_seen=total, copied=summary.copied + 1)
    if isinstance(outcome, Skipped):
        return replace(summary, total_seen=total, skipped=summary.skipped + 1)
    if isinstance(outcome, Failed):
        return replace(summary, total_seen=total, failed=summary.failed + 1)
    raise TypeError(f"unknown outcome type: {type(outcome).__name__}")
