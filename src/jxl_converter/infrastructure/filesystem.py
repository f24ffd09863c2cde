"""Filesystem helpers used by the conversion and copy actions."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from jxl_converter.errors import FilesystemError

logger = logging.getLogger(__name__)


def ensure_parent(path: Path) -> None:
    """Create the parent directory of ``path``; concurrent callers are fine."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise FilesystemError(
            f"cannot create directory {path.parent}: {exc}", path=path
        ) from exc


def ensure_output_root(path: Path) -> Path:
    """Create the output root if needed and return its absolute form."""
    root = Path(path).absolute()
    root.mkdir(parents=True, exist_ok=True)
    if not root.is_dir():
        raise NotADirectoryError(f"Output path is not a directory: {root}")
    return root


def copy_verbatim(source: Path, destination: Path) -> int:
    """Copy file content and permission bits; return the byte count.

    Raises
    ------
    FilesystemError
        If the copy fails or the destination size differs from the source.
    """
    try:
        expected = source.stat().st_size
        shutil.copy2(source, destination)
        written = destination.stat().st_size
    except OSError as exc:
        raise FilesystemError(f"copy failed: {exc}", path=source) from exc
    if written != expected:
        raise FilesystemError(
            f"short copy: wrote {written} of {expected} bytes", path=source
        )
    return written


def remove_partial(path: Path) -> None:
    """Delete a partially written output, logging rather than raising."""
    try:
        path.unlink(missing_ok=True)
    except OSError as exc:
        logger.warning("could not remove partial output %s: %s", path, exc)
    else:
        logger.debug("removed partial output %s", path)
