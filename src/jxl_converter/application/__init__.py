"""Application-layer use-cases and option objects."""

from __future__ import annotations

from pathlib import Path

from jxl_converter.application.options import EncoderOptions, RunOptions
from jxl_converter.application.ports import ImageEncoder, ProgressSink
from jxl_converter.application.results import (
    Copied,
    Converted,
    Failed,
    FailureDetail,
    FileTask,
    JobOutcome,
    RunSummary,
    Skipped,
    WalkFailure,
)
from jxl_converter.types import CollisionMode, EncoderName, TargetFormat


def build_run_options(
    *,
    input_root: Path,
    output_root: Path,
    recursive: bool = False,
    jobs: int = 2,
    copy_all: bool = False,
    overwrite: bool = False,
    collision: CollisionMode = "fail",
    queue_depth: int | None = None,
    encoder: EncoderName = "ffmpeg",
    encoder_binary: str | None = None,
    target_format: TargetFormat = "jxl",
    effort: int = 7,
) -> RunOptions:
    """Build typed run options via lazy use-case import."""
    from jxl_converter.application.use_cases import build_run_options as _impl

    return _impl(
        input_root=input_root,
        output_root=output_root,
        recursive=recursive,
        jobs=jobs,
        copy_all=copy_all,
        overwrite=overwrite,
        collision=collision,
        queue_depth=queue_depth,
        encoder=encoder,
        encoder_binary=encoder_binary,
        target_format=target_format,
        effort=effort,
    )


def convert_directory(
    *,
    options: RunOptions,
    encoder: ImageEncoder | None = None,
    progress: ProgressSink | None = None,
) -> RunSummary:
    """Run a directory conversion via lazy use-case import."""
    from jxl_converter.application.use_cases import convert_directory as _impl

    return _impl(options=options, encoder=encoder, progress=progress)


__all__ = [
    "Copied",
    "Converted",
    "EncoderOptions",
    "Failed",
    "FailureDetail",
    "FileTask",
    "ImageEncoder",
    "JobOutcome",
    "ProgressSink",
    "RunOptions",
    "RunSummary",
    "Skipped",
    "WalkFailure",
    "build_run_options",
    "convert_directory",
]
