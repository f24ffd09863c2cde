"""Output path computation and per-run target reservation."""

from __future__ import annotations

import os
import threading
from pathlib import Path

from jxl_converter.application.results import FileTask
from jxl_converter.classify import classify
from jxl_converter.errors import DuplicateTargetError
from jxl_converter.types import CollisionMode, FileKind


def output_target(task: FileTask, output_root: Path, suffix: str | None = None) -> Path:
    """Mirror ``task.relative_path`` under ``output_root``.

    When ``suffix`` is given the file suffix is rewritten (``a/b.png`` ->
    ``a/b.jxl``).
    """
    relative = task.relative_path
    if suffix is not None:
        relative = relative.with_suffix(suffix)
    return output_root / relative


def suffixed_target(task: FileTask, output_root: Path, suffix: str) -> Path:
    """Disambiguated target keeping the source extension: ``b.png.jxl``."""
    relative = task.relative_path
    return output_root / relative.with_name(f"{relative.name}{suffix}")


def _is_image_file(entry: os.DirEntry[str]) -> bool:
    if classify(entry.name) is not FileKind.IMAGE:
        return False
    try:
        return entry.is_file()
    except OSError:
        return False


def stem_owners(directory: Path) -> dict[str, str]:
    """Map each image stem in ``directory`` to its first image by name.

    ``a.jpg`` owns stem ``a`` over ``a.png``. An unreadable directory has no
    owners.
    """
    owners: dict[str, str] = {}
    try:
        with os.scandir(directory) as it:
            names = sorted(entry.name for entry in it if _is_image_file(entry))
    except OSError:
        return owners
    for name in names:
        owners.setdefault(Path(name).stem, name)
    return owners


class TargetRegistry:
    """Thread-safe set of output paths claimed during one run.

    Images sharing a stem in one directory resolve by name rather than by
    which worker gets there first: the stem owner (see ``stem_owners``) takes
    the plain target and its siblings are displaced.
    """

    def __init__(self, collision: CollisionMode = "fail") -> None:
        self._collision = collision
        self._claimed: set[Path] = set()
        self._owners: dict[Path, dict[str, str]] = {}
        self._lock = threading.Lock()

    def claim(self, path: Path) -> bool:
        """Reserve ``path``; return ``False`` if another job already holds it."""
        with self._lock:
            if path in self._claimed:
                return False
            self._claimed.add(path)
            return True

    def owns_stem(self, source: Path) -> bool:
        """Whether ``source`` is the image its directory maps its stem to."""
        directory = source.parent
        with self._lock:
            owners = self._owners.get(directory)
        if owners is None:
            owners = stem_owners(directory)
            with self._lock:
                owners = self._owners.setdefault(directory, owners)
        return owners.get(source.stem, source.name) == source.name

    def reserve(self, task: FileTask, primary: Path, fallback: Path | None = None) -> Path:
        """Claim the output path for ``task``.

        Parameters
        ----------
        task : FileTask
            Task the target belongs to.
        primary : Path
            Preferred output path.
        fallback : Path | None, default=None
            Alternative path tried in ``suffix`` collision mode. Passing one
            marks ``task`` as an image subject to stem ownership.

        Returns
        -------
        Path
            The claimed path.

        Raises
        ------
        DuplicateTargetError
            If the target (and fallback, when allowed) is already claimed.
        """
        displaced = fallback is not None and not self.owns_stem(task.source_path)
        if not displaced and self.claim(primary):
            return primary
        if self._collision == "suffix" and fallback is not None and self.claim(fallback):
            return fallback
        raise DuplicateTargetError(
            f"duplicate target {primary} (claimed by another source)",
            path=task.source_path,
        )

    def __len__(self) -> int:
        with self._lock:
            return len(self._claimed)
