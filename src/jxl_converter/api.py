"""Public directory conversion API (delegates to application use-cases)."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from jxl_converter.application.ports import ImageEncoder, ProgressSink
from jxl_converter.application.results import RunSummary
from jxl_converter.application.use_cases import build_run_options
from jxl_converter.application.use_cases import convert_directory as _convert_directory
from jxl_converter.types import CollisionMode, EncoderName, TargetFormat


def convert_directory(
    input_root: Path,
    output_root: Path,
    *,
    recursive: bool = False,
    jobs: int = 2,
    copy_all: bool = False,
    overwrite: bool = False,
    collision: CollisionMode = "fail",
    queue_depth: Optional[int] = None,
    encoder_name: EncoderName = "ffmpeg",
    encoder_binary: Optional[str] = None,
    target_format: TargetFormat = "jxl",
    effort: int = 7,
    encoder: Optional[ImageEncoder] = None,
    progress: Optional[ProgressSink] = None,
) -> RunSummary:
    """Convert every image under ``input_root`` into ``output_root``."""
    options = build_run_options(
        input_root=Path(input_root),
        output_root=Path(output_root),
        recursive=recursive,
        jobs=jobs,
        copy_all=copy_all,
        overwrite=overwrite,
        collision=collision,
        queue_depth=queue_depth,
        encoder=encoder_name,
        encoder_binary=encoder_binary,
        target_format=target_format,
        effort=effort,
    )
    return _convert_directory(options=options, encoder=encoder, progress=progress)
