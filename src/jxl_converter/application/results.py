"""Application-layer result objects."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TypeAlias

from jxl_converter.errors import error_kind
from jxl_converter.types import FileKind


@dataclass(frozen=True)
class FileTask:
    """One discovered filesystem entry slated for processing."""

    source_path: Path
    relative_path: Path
    kind: FileKind


@dataclass(frozen=True)
class WalkFailure:
    """An entry the walker could not read."""

    path: Path
    error: OSError


@dataclass(frozen=True)
class Converted:
    """Source encoded by the external encoder."""

    source_path: Path
    output_path: Path
    source_size: int
    output_size: int


@dataclass(frozen=True)
class Copied:
    """Source copied verbatim."""

    source_path: Path
    output_path: Path
    size: int


@dataclass(frozen=True)
class Skipped:
    """Source intentionally left unprocessed."""

    source_path: Path
    reason: str


@dataclass(frozen=True)
class Failed:
    """Job-scoped failure."""

    source_path: Path
    kind: str
    message: str

    @classmethod
    def from_exception(cls, source_path: Path, exc: BaseException) -> Failed:
        """Build a failed outcome carrying the taxonomy kind of ``exc``."""
        return cls(
            source_path=source_path,
            kind=error_kind(exc),
            message=str(exc) or type(exc).__name__,
        )


JobOutcome: TypeAlias = Converted | Copied | Skipped | Failed


@dataclass(frozen=True)
class FailureDetail:
    """Failure entry listed in the run summary."""

    path: Path
    kind: str
    message: str


@dataclass(frozen=True)
class RunSummary:
    """Aggregate counters and failure list for a whole run."""

    total_seen: int = 0
    converted: int = 0
    copied: int = 0
    skipped: int = 0
    failed: int = 0
    failures: tuple[FailureDetail, ...] = ()
    source_bytes: int = 0
    output_bytes: int = 0
    interrupted: bool = False

    @property
    def saved_bytes(self) -> int:
        """Storage saved by conversion (never negative)."""
        return max(self.source_bytes - self.output_bytes, 0)
