"""Per-file jobs: routing, conversion and verbatim copy."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from jxl_converter.application.options import RunOptions
from jxl_converter.application.ports import ImageEncoder
from jxl_converter.application.results import (
    Copied,
    Converted,
    Failed,
    FileTask,
    JobOutcome,
    Skipped,
)
from jxl_converter.application.targets import (
    TargetRegistry,
    output_target,
    suffixed_target,
)
from jxl_converter.errors import ConverterError, FilesystemError
from jxl_converter.infrastructure import metadata
from jxl_converter.infrastructure.filesystem import (
    copy_verbatim,
    ensure_parent,
    remove_partial,
)
from jxl_converter.types import FileKind

logger = logging.getLogger(__name__)

SKIP_NOT_REGULAR = "not a regular file"
SKIP_NOT_IMAGE = "not a convertible image"
SKIP_EXISTS = "output exists"


@dataclass
class JobContext:
    """Collaborators shared by every job of a run."""

    options: RunOptions
    encoder: ImageEncoder
    registry: TargetRegistry = field(default_factory=TargetRegistry)


def process_task(task: FileTask, context: JobContext) -> JobOutcome:
    """Route ``task`` to the conversion or copy action.

    Images are always converted; other files are copied in copy-all mode and
    skipped otherwise. Entries that do not resolve to a regular file (special
    files, broken or directory symlinks) are skipped.
    """
    if not task.source_path.is_file():
        logger.info("skipping %s: %s", task.source_path, SKIP_NOT_REGULAR)
        return Skipped(source_path=task.source_path, reason=SKIP_NOT_REGULAR)
    if task.kind is FileKind.IMAGE:
        return convert_task(task, context)
    if context.options.copy_all:
        return copy_task(task, context)
    logger.info("skipping non-image file %s", task.source_path)
    return Skipped(source_path=task.source_path, reason=SKIP_NOT_IMAGE)


def convert_task(task: FileTask, context: JobContext) -> JobOutcome:
    """Encode one image and carry its timestamps/EXIF over to the output."""
    options = context.options
    suffix = options.target_suffix
    try:
        target = context.registry.reserve(
            task,
            output_target(task, options.output_root, suffix),
            suffixed_target(task, options.output_root, suffix),
        )
    except ConverterError as exc:
        return Failed.from_exception(task.source_path, exc)

    existed = target.exists()
    if existed and not options.overwrite:
        logger.info("skipping existing output %s", target)
        return Skipped(source_path=task.source_path, reason=SKIP_EXISTS)

    logger.info("converting %s -> %s", task.source_path, target)
    try:
        ensure_parent(target)
        snapshot = metadata.capture(task.source_path)
        context.encoder.encode(task.source_path, target, options.encoder.target_format)
        if not target.is_file():
            raise FilesystemError(
                f"encoder reported success but produced no file at {target}",
                path=task.source_path,
            )
        snapshot.apply(target)
        source_size = task.source_path.stat().st_size
        output_size = target.stat().st_size
    except Exception as exc:
        if not existed or options.overwrite:
            remove_partial(target)
        logger.error("conversion failed for %s: %s", task.source_path, exc)
        return Failed.from_exception(task.source_path, exc)

    logger.info("compressed %s: %d -> %d bytes", task.source_path, source_size, output_size)
    return Converted(
        source_path=task.source_path,
        output_path=target,
        source_size=source_size,
        output_size=output_size,
    )


def copy_task(task: FileTask, context: JobContext) -> JobOutcome:
    """Copy one file verbatim, preserving permissions and timestamps."""
    options = context.options
    try:
        target = context.registry.reserve(task, output_target(task, options.output_root))
    except ConverterError as exc:
        return Failed.from_exception(task.source_path, exc)

    existed = target.exists()
    if existed and not options.overwrite:
        logger.info("skipping existing file %s", target)
        return Skipped(source_path=task.source_path, reason=SKIP_EXISTS)

    logger.info("copying %s -> %s", task.source_path, target)
    try:
        ensure_parent(target)
        snapshot = metadata.capture(task.source_path, read_exif=False)
        size = copy_verbatim(task.source_path, target)
        snapshot.apply(target)
    except Exception as exc:
        remove_partial(target)
        logger.error("copy failed for %s: %s", task.source_path, exc)
        return Failed.from_exception(task.source_path, exc)

    return Copied(source_path=task.source_path, output_path=target, size=size)


def describe(outcome: JobOutcome) -> str:
    """Short label used by progress displays."""
    if isinstance(outcome, Converted):
        return "converted"
    if isinstance(outcome, Copied):
        return "copied"
    if isinstance(outcome, Skipped):
        return "skipped"
    return "failed"

