"""Application ports for clean architecture boundaries."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from jxl_converter.application.results import JobOutcome, RunSummary


class ImageEncoder(Protocol):
    """Opaque external image encoder."""

    def encode(self, source: Path, destination: Path, target_format: str) -> None:
        """Write an encoded copy of ``source`` to ``destination``.

        Raise ``EncoderError`` (with diagnostic text) on failure.
        """


class ProgressSink(Protocol):
    """Receive per-job progress updates from worker threads."""

    def update(self, outcome: JobOutcome, counts: RunSummary) -> None:
        """Record one finished job. Must return quickly."""

    def close(self) -> None:
        """Release display resources once the run has finished."""
