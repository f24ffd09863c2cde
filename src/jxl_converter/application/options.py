"""Typed option objects shared across conversion use-cases."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from jxl_converter.types import CollisionMode, EncoderName, TargetFormat


@dataclass(frozen=True)
class EncoderOptions:
    """External encoder configuration."""

    name: EncoderName = "ffmpeg"
    binary: str | None = None
    target_format: TargetFormat = "jxl"
    effort: int = 7


@dataclass(frozen=True)
class RunOptions:
    """Validated options for one directory run."""

    input_root: Path
    output_root: Path
    recursive: bool = False
    jobs: int = 2
    copy_all: bool = False
    overwrite: bool = False
    collision: CollisionMode = "fail"
    queue_depth: int | None = None
    encoder: EncoderOptions = EncoderOptions()

    @property
    def target_suffix(self) -> str:
        """Suffix given to converted outputs, e.g. ``.jxl``."""
        return f".{self.encoder.target_format}"

    @property
    def effective_queue_depth(self) -> int:
        """Bounded queue size between the walker and the worker pool."""
        return self.queue_depth or self.jobs * 4
