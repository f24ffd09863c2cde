"""Extension-based classification of source files."""

from __future__ import annotations

from pathlib import PurePath

from jxl_converter.types import FileKind

ACCEPTED_EXTENSIONS: frozenset[str] = frozenset(
    {
        # JPEG
        "jpg",
        "jpeg",
        "jpe",
        "jif",
        "jfif",
        "jfi",
        # PNG / WebP / GIF
        "png",
        "webp",
        "gif",
        # Bitmap
        "bmp",
        "dib",
        # Netpbm family
        "ppm",
        "pgm",
        "pam",
        "pbm",
        "pfm",
        "pgmyuv",
        "phm",
        # TIFF
        "tif",
        "tiff",
        # Targa
        "tga",
        "icb",
        "vda",
        "vst",
        # DirectDraw Surface
        "dds",
        # HDR formats
        "exr",
        "hdr",
        "pic",
        # Icons / scientific
        "ico",
        "fits",
        # PIX
        "pix",
        "brender_pix",
        # JPEG 2000 / JPEG-LS
        "j2k",
        "jp2",
        "jpt",
        "jls",
        "pgx",
        # Misc raster formats ffmpeg can decode
        "pcx",
        "pcd",
        "pct",
        "pict",
        "psd",
        "qdraw",
        "qoi",
        "sgi",
        "ras",
        "vbn",
        "xbm",
        "xpm",
        "xwd",
    }
)


def classify(path: str | PurePath) -> FileKind:
    """Classify ``path`` by its final suffix (case-insensitive).

    Parameters
    ----------
    path : str | PurePath
        File path; only the name is inspected, the file is never opened.

    Returns
    -------
    FileKind
        ``FileKind.IMAGE`` for allow-listed extensions, otherwise
        ``FileKind.OTHER`` (including files without a suffix).
    """
    suffix = PurePath(path).suffix
    if suffix.lower().lstrip(".") in ACCEPTED_EXTENSIONS:
        return FileKind.IMAGE
    return FileKind.OTHER


def is_convertible(path: str | PurePath) -> bool:
    """Return ``True`` when ``path`` classifies as a convertible image."""
    return classify(path) is FileKind.IMAGE
