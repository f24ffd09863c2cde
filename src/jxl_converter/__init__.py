"""Top-level API for bulk image-to-JPEG XL conversion."""

from __future__ import annotations

from pathlib import Path

from jxl_converter.application.ports import ImageEncoder, ProgressSink
from jxl_converter.application.results import RunSummary
from jxl_converter.classify import ACCEPTED_EXTENSIONS, classify
from jxl_converter.types import CollisionMode, EncoderName, FileKind, TargetFormat

__version__ = "0.1.0"


def convert_directory(
    input_root: Path,
    output_root: Path,
    *,
    recursive: bool = False,
    jobs: int = 2,
    copy_all: bool = False,
    overwrite: bool = False,
    collision: CollisionMode = "fail",
    queue_depth: int | None = None,
    encoder_name: EncoderName = "ffmpeg",
    encoder_binary: str | None = None,
    target_format: TargetFormat = "jxl",
    effort: int = 7,
    encoder: ImageEncoder | None = None,
    progress: ProgressSink | None = None,
) -> RunSummary:
    """Convert a directory tree, mirroring it under ``output_root``.

    Parameters
    ----------
    input_root : Path
        Directory to scan.
    output_root : Path
        Directory receiving converted images (and copies); created if absent.
    recursive : bool, default=False
        Descend into subdirectories.
    jobs : int, default=2
        Worker-pool size; values below 1 run one job at a time.
    copy_all : bool, default=False
        Copy non-image files verbatim instead of skipping them. Images are
        converted either way.
    overwrite : bool, default=False
        Replace outputs that already exist instead of skipping them.
    collision : {"fail", "suffix"}, default="fail"
        What to do when two sources map to the same output path.
    queue_depth : int | None, default=None
        Bound on tasks queued ahead of the workers (``jobs * 4``).
    encoder_name : {"ffmpeg", "cjxl"}, default="ffmpeg"
        External encoder backend.
    encoder_binary : str | None, default=None
        Explicit encoder executable.
    target_format : {"jxl", "webp", "png"}, default="jxl"
        Output format; also the output suffix.
    effort : int, default=7
        Encoder effort (1-9).
    encoder : ImageEncoder | None, default=None
        Pre-built encoder overriding ``encoder_name``/``encoder_binary``.
    progress : ProgressSink | None, default=None
        Receives one update per finished job.

    Returns
    -------
    RunSummary
        Final counters and failure list.

    Raises
    ------
    ConfigurationError
        If the options are invalid, the input root is unusable, or the output
        root cannot be created.
    """
    from .api import convert_directory as _impl

    return _impl(
        input_root=input_root,
        output_root=output_root,
        recursive=recursive,
        jobs=jobs,
        copy_all=copy_all,
        overwrite=overwrite,
        collision=collision,
        queue_depth=queue_depth,
        encoder_name=encoder_name,
        encoder_binary=encoder_binary,
        target_format=target_format,
        effort=effort,
        encoder=encoder,
        progress=progress,
    )


__all__ = [
    "ACCEPTED_EXTENSIONS",
    "FileKind",
    "RunSummary",
    "classify",
    "convert_directory",
]
