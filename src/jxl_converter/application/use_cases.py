"""Application use-cases orchestrating directory conversion runs."""

from __future__ import annotations

import logging
from dataclasses import replace
from functools import partial
from pathlib import Path

from pydantic import ValidationError

from jxl_converter.adapters.encoders import create_encoder
from jxl_converter.application.actions import JobContext, process_task
from jxl_converter.application.aggregator import ResultAggregator
from jxl_converter.application.dispatcher import WorkerPool
from jxl_converter.application.options import EncoderOptions, RunOptions
from jxl_converter.application.ports import ImageEncoder, ProgressSink
from jxl_converter.application.results import RunSummary
from jxl_converter.application.targets import TargetRegistry
from jxl_converter.errors import ConfigurationError
from jxl_converter.infrastructure.filesystem import ensure_output_root
from jxl_converter.schemas import RunConfig
from jxl_converter.types import CollisionMode, EncoderName, TargetFormat
from jxl_converter.walker import walk

logger = logging.getLogger(__name__)


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
    """Build typed run options from command/API params.

    Raises
    ------
    ConfigurationError
        If any parameter fails validation.
    """
    try:
        config = RunConfig(
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
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid run options: {exc}") from exc

    return RunOptions(
        input_root=config.input_root,
        output_root=config.output_root,
        recursive=config.recursive,
        jobs=config.jobs,
        copy_all=config.copy_all,
        overwrite=config.overwrite,
        collision=config.collision,
        queue_depth=config.queue_depth,
        encoder=EncoderOptions(
            name=config.encoder,
            binary=config.encoder_binary,
            target_format=config.target_format,
            effort=config.effort,
        ),
    )


def convert_directory(
    *,
    options: RunOptions,
    encoder: ImageEncoder | None = None,
    progress: ProgressSink | None = None,
) -> RunSummary:
    """Use-case: mirror ``options.input_root`` into ``options.output_root``.

    Images are encoded through ``encoder``; other files are copied in
    copy-all mode and skipped otherwise. Per-file failures are collected in
    the returned summary.

    Raises
    ------
    ConfigurationError
        If the input root is unusable or the output root cannot be created.
        Raised before any job starts.
    """
    try:
        summary = _run(options, encoder, progress)
    finally:
        if progress is not None:
            progress.close()

    logger.info(
        "run finished: %d seen, %d converted, %d copied, %d skipped, %d failed",
        summary.total_seen,
        summary.converted,
        summary.copied,
        summary.skipped,
        summary.failed,
    )
    return summary


def _run(
    options: RunOptions,
    encoder: ImageEncoder | None,
    progress: ProgressSink | None,
) -> RunSummary:
    input_root = Path(options.input_root).absolute()
    tasks = walk(
        input_root,
        options.recursive,
        exclude=[Path(options.output_root).absolute()],
    )
    try:
        output_root = ensure_output_root(options.output_root)
    except OSError as exc:
        raise ConfigurationError(
            f"Output directory cannot be created: {options.output_root}: {exc}",
            path=Path(options.output_root),
        ) from exc
    options = replace(options, input_root=input_root, output_root=output_root)

    context = JobContext(
        options=options,
        encoder=encoder or create_encoder(options.encoder, overwrite=options.overwrite),
        registry=TargetRegistry(options.collision),
    )
    pool = WorkerPool(
        partial(process_task, context=context),
        jobs=options.jobs,
        queue_depth=options.effective_queue_depth,
        aggregator=ResultAggregator(progress),
    )
    return pool.run(tasks)
