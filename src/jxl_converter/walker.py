"""Lazy directory traversal producing file tasks."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import TypeAlias

from jxl_converter.application.results import FileTask, WalkFailure
from jxl_converter.classify import classify
from jxl_converter.errors import ConfigurationError

logger = logging.getLogger(__name__)

WalkItem: TypeAlias = FileTask | WalkFailure


def walk(
    root: Path,
    recursive: bool = False,
    exclude: Iterable[Path] = (),
) -> Iterator[WalkItem]:
    """Enumerate files under ``root``.

    The root is validated eagerly; entries are produced lazily so a consumer
    can start working before the tree is fully enumerated.

    Parameters
    ----------
    root : Path
        Input directory.
    recursive : bool, default=False
        Descend into subdirectories (depth-first, entries sorted by name).
    exclude : Iterable[Path], default=()
        Directories never descended into, e.g. an output root nested inside
        the input root.

    Returns
    -------
    Iterator[FileTask | WalkFailure]
        One ``FileTask`` per non-directory entry, or a ``WalkFailure`` for an
        entry that could not be read.

    Raises
    ------
    ConfigurationError
        If ``root`` is missing, not a directory, or not readable.
    """
    root = Path(root).absolute()
    if not root.exists():
        raise ConfigurationError(f"Input path does not exist: {root}", path=root)
    if not root.is_dir():
        raise ConfigurationError(f"Input path is not a directory: {root}", path=root)
    try:
        with os.scandir(root):
            pass
    except OSError as exc:
        raise ConfigurationError(
            f"Input directory is not readable: {root}: {exc}", path=root
        ) from exc
    excluded = frozenset(Path(path).absolute() for path in exclude)
    return _walk_dir(root, root, recursive, excluded)


def _walk_dir(
    root: Path,
    directory: Path,
    recursive: bool,
    excluded: frozenset[Path],
) -> Iterator[WalkItem]:
    try:
        with os.scandir(directory) as it:
            entries = sorted(it, key=lambda entry: entry.name)
    except OSError as exc:
        logger.warning("cannot read directory %s: %s", directory, exc)
        yield WalkFailure(path=directory, error=exc)
        return

    for entry in entries:
        path = Path(entry.path)
        try:
            is_dir = entry.is_dir(follow_symlinks=False)
            is_symlink_dir = not is_dir and entry.is_symlink() and path.is_dir()
        except OSError as exc:
            yield WalkFailure(path=path, error=exc)
            continue

        if is_dir:
            if recursive and path not in excluded:
                yield from _walk_dir(root, path, recursive, excluded)
            continue
        if is_symlink_dir:
            logger.debug("not following directory symlink %s", path)
            continue

        yield FileTask(
            source_path=path,
            relative_path=path.relative_to(root),
            kind=classify(path),
        )
