#!/usr/bin/env python3
"""
jxl_converter.cli.cli

Typer-based CLI for bulk-converting image directories to JPEG XL.

Images are encoded by an external tool (``ffmpeg`` with ``libjxl`` by
default, or ``cjxl``); everything else is skipped, or copied verbatim with
``--copy-all``. Modification times are preserved on every output.

Examples
--------
Convert the top level of a directory with two workers:

    convert-to-jxl convert ~/Pictures ~/Pictures-jxl --yes

Mirror a whole tree, copying non-image files too:

    convert-to-jxl convert ~/Pictures /mnt/backup -r -c -j 8 --yes
"""

from __future__ import annotations

import logging
import shutil
import subprocess
import sys
import traceback
from pathlib import Path
from typing import Any

import typer
from rich.console import Console
from rich.logging import RichHandler

from jxl_converter.errors import ConverterError

app = typer.Typer(
    name="convert-to-jxl",
    help="Bulk-convert image directories to JPEG XL, preserving timestamps.",
    no_args_is_help=True,
)

EXIT_INTERRUPTED = 130
ENCODER_BINARY_HELP = "Encoder executable (defaults to the backend name on PATH)."


# -----------------------------
# Utilities
# -----------------------------
def _configure_logging(verbose: bool, debug: bool, console: Console) -> None:
    """Route package logs through a rich handler on stderr.

    Parameters
    ----------
    verbose : bool
        Log per-file events (INFO).
    debug : bool
        Log everything (DEBUG) with rich tracebacks.
    console : Console
        Console shared with the progress display so log lines render above it.
    """
    level = logging.DEBUG if debug else logging.INFO if verbose else logging.WARNING
    package_logger = logging.getLogger("jxl_converter")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
    handler = RichHandler(
        console=console,
        show_path=False,
        rich_tracebacks=debug,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    package_logger.addHandler(handler)
    package_logger.setLevel(level)


def _print_conversion_error(exc: Exception, debug: bool) -> int:
    """Print a user-friendly conversion error.

    Parameters
    ----------
    exc : Exception
        Exception raised during the run.
    debug : bool
        Whether to include traceback details.

    Returns
    -------
    int
        Process exit code.
    """
    typer.secho(f"✗ {type(exc).__name__}: {exc}", fg=typer.colors.RED, err=True)
    if debug:
        typer.echo("\nTraceback:", err=True)
        typer.echo("".join(traceback.format_exception(type(exc), exc, exc.__traceback__)), err=True)
    code = getattr(exc, "exit_code", None)
    if isinstance(code, int) and code > 0:
        return code
    return 1


def _build_progress(enabled: bool, console: Console):
    """Return a progress sink for the run."""
    if not enabled:
        from jxl_converter.infrastructure.progress import NullProgressSink

        return NullProgressSink()
    from jxl_converter.infrastructure.progress import RichProgressSink

    return RichProgressSink(console=console)


# -----------------------------
# Global options
# -----------------------------
@app.callback()
def _main(
    ctx: typer.Context,
    debug: bool = typer.Option(False, "--debug", help="Show full tracebacks and debug logs."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every processed file."),
) -> None:
    """Initialize shared CLI state.

    Parameters
    ----------
    ctx : typer.Context
        Typer context object used to store shared state.
    debug : bool, default=False
        Whether to enable debug error output.
    verbose : bool, default=False
        Whether to log per-file events.
    """
    console = Console(stderr=True)
    _configure_logging(verbose=verbose, debug=debug, console=console)
    ctx.obj = {"debug": debug, "console": console}


# -----------------------------
# Commands
# -----------------------------
@app.command("convert")
def convert_cmd(
    ctx: typer.Context,
    input_dir: Path = typer.Argument(..., help="Directory to scan for images."),
    output_dir: Path = typer.Argument(..., help="Directory to mirror results into (created if absent)."),
    recursive: bool = typer.Option(False, "--recursive", "-r", help="Descend into subdirectories."),
    jobs: int = typer.Option(2, "--jobs", "-j", help="Number of files processed concurrently."),
    copy_all: bool = typer.Option(
        False,
        "--copy-all",
        "-c",
        help="Copy non-image files verbatim (images are still converted).",
    ),
    effort: int = typer.Option(7, "--effort", "-e", min=1, max=9, help="Encoder effort (1-9)."),
    target_format: str = typer.Option("jxl", "--format", "-f", help="Output format: jxl, webp or png."),
    encoder: str = typer.Option("ffmpeg", "--encoder", help="Encoder backend: ffmpeg or cjxl."),
    encoder_binary: str | None = typer.Option(None, "--encoder-binary", help=ENCODER_BINARY_HELP),
    collision: str = typer.Option(
        "fail",
        "--collision",
        help="When two sources map to one output: fail, or suffix (img.png.jxl).",
    ),
    overwrite: bool = typer.Option(False, "--overwrite", help="Replace outputs that already exist."),
    queue_depth: int | None = typer.Option(
        None, "--queue-depth", help="Tasks queued ahead of the workers (default: jobs x 4)."
    ),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation."),
    no_progress: bool = typer.Option(False, "--no-progress", help="Disable the live progress display."),
) -> None:
    """Convert images under INPUT_DIR into OUTPUT_DIR.

    Parameters
    ----------
    ctx : typer.Context
        Typer context containing global options.
    input_dir : Path
        Root directory to scan.
    output_dir : Path
        Root directory receiving the mirrored results.
    jobs : int, default=2
        Worker-pool size.

    Notes
    -----
    - Exit status is 0 even when individual files fail; failures are listed
      in the summary.
    - Exit status 2 means the input or output directory is unusable, 130 that
      the run was interrupted.
    """
    debug: bool = bool(ctx.obj.get("debug", False))
    console: Console = ctx.obj["console"]

    try:
        from jxl_converter.application.use_cases import (
            build_run_options,
            convert_directory,
        )
        from jxl_converter.report import format_overview, format_summary

        kwargs: dict[str, Any] = {
            "input_root": input_dir,
            "output_root": output_dir,
            "recursive": recursive,
            "jobs": jobs,
            "copy_all": copy_all,
            "overwrite": overwrite,
            "collision": collision.strip().lower(),
            "encoder": encoder.strip().lower(),
            "target_format": target_format,
            "effort": effort,
        }
        if encoder_binary:
            kwargs["encoder_binary"] = encoder_binary
        if queue_depth is not None:
            kwargs["queue_depth"] = queue_depth

        options = build_run_options(**kwargs)
        typer.echo(format_overview(options))
        if not yes and not typer.confirm("Are you sure to proceed?", default=False):
            typer.echo("Aborting...")
            raise typer.Exit(code=0)

        progress = _build_progress(not no_progress, console)
        summary = convert_directory(options=options, progress=progress)
        typer.echo(format_summary(summary))
    except (typer.Exit, typer.Abort):
        raise
    except KeyboardInterrupt:
        typer.secho("✗ Interrupted", fg=typer.colors.YELLOW, err=True)
        raise typer.Exit(code=EXIT_INTERRUPTED)
    except ConverterError as exc:
        raise typer.Exit(code=_print_conversion_error(exc, debug))
    except Exception as exc:
        # Unexpected crash: still show a clean message; debug prints traceback.
        raise typer.Exit(code=_print_conversion_error(exc, debug))

    if summary.interrupted:
        raise typer.Exit(code=EXIT_INTERRUPTED)


@app.command("doctor")
def doctor_cmd() -> None:
    """Print encoder availability and installed library versions."""
    import importlib.metadata as metadata

    typer.echo(f"Python: {sys.version.split()[0]}")
    for module in ("typer", "rich", "pydantic", "pillow", "piexif"):
        try:
            version = metadata.version(module)
            typer.echo(f"{module}: {version}")
        except metadata.PackageNotFoundError:
            typer.echo(f"{module}: <not installed>")

    for binary in ("ffmpeg", "cjxl"):
        location = shutil.which(binary)
        typer.echo(f"{binary}: {location or '<not found>'}")

    ffmpeg = shutil.which("ffmpeg")
    if ffmpeg is None:
        return
    try:
        result = subprocess.run(
            [ffmpeg, "-hide_banner", "-encoders"],
            capture_output=True,
            text=True,
            check=False,
        )
    except OSError as exc:
        typer.echo(f"ffmpeg encoders: <unavailable: {exc}>")
        return
    has_libjxl = "libjxl" in result.stdout
    typer.echo(f"ffmpeg libjxl: {'yes' if has_libjxl else 'no'}")


if __name__ == "__main__":
    app()
