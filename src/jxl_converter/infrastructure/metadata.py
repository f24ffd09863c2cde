"""Capture source metadata and re-apply it to produced outputs."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

import piexif
from PIL import Image

from jxl_converter.errors import FilesystemError, MetadataError

logger = logging.getLogger(__name__)

# Output suffixes piexif can insert an EXIF segment into.
EXIF_WRITABLE_SUFFIXES = frozenset({".jpg", ".jpeg", ".jpe", ".jfif", ".webp"})
EXIF_HEADER = b"Exif\x00\x00"


@dataclass(frozen=True)
class MetadataSnapshot:
    """Timestamps and embedded tags captured before transformation."""

    modified_ns: int
    accessed_ns: int | None = None
    exif: bytes | None = None

    def apply(self, destination: Path) -> None:
        """Apply timestamps (and EXIF, where supported) to ``destination``.

        EXIF is applied first: rewriting the file would otherwise bump the
        modification time again.

        Raises
        ------
        MetadataError
            If the timestamps or tags cannot be written.
        """
        if self.exif and destination.suffix.lower() in EXIF_WRITABLE_SUFFIXES:
            if not _has_exif(destination):
                try:
                    piexif.insert(self.exif, str(destination))
                except (ValueError, OSError, piexif.InvalidImageDataError) as exc:
                    raise MetadataError(
                        f"could not re-inject EXIF into {destination}: {exc}",
                        path=destination,
                    ) from exc
                logger.debug("re-injected %d EXIF bytes into %s", len(self.exif), destination)

        accessed_ns = self.accessed_ns if self.accessed_ns is not None else self.modified_ns
        try:
            os.utime(destination, ns=(accessed_ns, self.modified_ns))
        except OSError as exc:
            raise MetadataError(
                f"could not set timestamps on {destination}: {exc}", path=destination
            ) from exc


def capture(source: Path, *, read_exif: bool = True) -> MetadataSnapshot:
    """Capture timestamps and, when readable, the EXIF block of ``source``."""
    try:
        stat = source.stat()
    except OSError as exc:
        raise FilesystemError(f"cannot stat source: {exc}", path=source) from exc
    exif = _read_exif(source) if read_exif else None
    return MetadataSnapshot(
        modified_ns=stat.st_mtime_ns,
        accessed_ns=stat.st_atime_ns,
        exif=exif,
    )


def _read_exif(source: Path) -> bytes | None:
    # Pillow only parses the header here; formats it cannot open carry no tags we
    # can re-inject anyway.
    try:
        with Image.open(source) as img:
            raw = img.info.get("exif")
    except (OSError, ValueError, Image.DecompressionBombError) as exc:
        logger.debug("no EXIF read from %s: %s", source, exc)
        return None
    if not raw:
        return None
    if isinstance(raw, str):
        raw = raw.encode("latin-1")
    # piexif.insert expects the APP1 "Exif\0\0" header, which Pillow omits for
    # some containers.
    if not raw.startswith(EXIF_HEADER):
        raw = EXIF_HEADER + raw
    return bytes(raw)


def _has_exif(path: Path) -> bool:
    try:
        loaded = piexif.load(str(path))
    except (ValueError, OSError, piexif.InvalidImageDataError, KeyError):
        return False
    return any(loaded.get(ifd) for ifd in ("0th", "Exif", "GPS", "1st"))
