"""External encoder processes implementing the ``ImageEncoder`` port."""

from __future__ import annotations

import logging
import os
import subprocess
from collections.abc import Sequence
from pathlib import Path

from jxl_converter.application.options import EncoderOptions
from jxl_converter.errors import ConfigurationError, EncoderError

logger = logging.getLogger(__name__)

_WINDOWS = os.name == "nt"


def _detached_kwargs() -> dict[str, object]:
    """Keep encoders out of the terminal's process group.

    Ctrl-C is delivered to the foreground group only, so in-flight encoders
    finish while the pool drains instead of dying half-written.
    """
    if _WINDOWS:
        return {"creationflags": subprocess.CREATE_NEW_PROCESS_GROUP}
    return {"start_new_session": True}


def _run_encoder(command: Sequence[str], source: Path) -> None:
    """Run ``command`` and raise ``EncoderError`` on a non-zero exit."""
    logger.debug("running encoder: %s", " ".join(command))
    try:
        completed = subprocess.run(
            list(command),
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.PIPE,
            text=True,
            errors="replace",
            check=False,
            **_detached_kwargs(),
        )
    except FileNotFoundError as exc:
        raise EncoderError(
            f"encoder executable not found: {command[0]}", path=source
        ) from exc
    except OSError as exc:
        raise EncoderError(f"could not start encoder: {exc}", path=source) from exc

    if completed.returncode != 0:
        stderr = completed.stderr.strip()
        detail = stderr or "no diagnostic output"
        raise EncoderError(
            f"encoder exited with status {completed.returncode}: {detail}",
            path=source,
            returncode=completed.returncode,
            stderr=completed.stderr,
        )


class FfmpegEncoder:
    """Encode images with ``ffmpeg``; metadata is mapped from the input."""

    def __init__(
        self,
        binary: str = "ffmpeg",
        effort: int = 7,
        overwrite: bool = False,
    ) -> None:
        self.binary = binary
        self.effort = effort
        self.overwrite = overwrite

    def codec_args(self, target_format: str) -> list[str]:
        """Codec selection and tuning arguments for ``target_format``."""
        if target_format == "jxl":
            return ["-c:v", "libjxl", "-effort", str(self.effort)]
        if target_format == "webp":
            return [
                "-c:v",
                "libwebp",
                "-lossless",
                "1",
                "-compression_level",
                str(min(self.effort, 6)),
            ]
        if target_format == "png":
            return ["-c:v", "png"]
        raise EncoderError(f"unsupported target format: {target_format}")

    def command(self, source: Path, destination: Path, target_format: str) -> list[str]:
        """Build the ffmpeg argument vector."""
        return [
            self.binary,
            "-hide_banner",
            "-nostdin",
            "-loglevel",
            "error",
            "-i",
            str(source),
            "-map",
            "0",
            *self.codec_args(target_format),
            "-map_metadata",
            "0",
            "-y" if self.overwrite else "-n",
            str(destination),
        ]

    def encode(self, source: Path, destination: Path, target_format: str) -> None:
        """Encode ``source`` into ``destination``."""
        _run_encoder(self.command(source, destination, target_format), source)


class CjxlEncoder:
    """Encode images with the libjxl reference ``cjxl`` tool."""

    def __init__(self, binary: str = "cjxl", effort: int = 7) -> None:
        self.binary = binary
        self.effort = effort

    def command(self, source: Path, destination: Path, target_format: str) -> list[str]:
        """Build the cjxl argument vector."""
        if target_format != "jxl":
            raise EncoderError(f"cjxl cannot produce {target_format} output")
        return [self.binary, str(source), str(destination), "-e", str(self.effort)]

    def encode(self, source: Path, destination: Path, target_format: str) -> None:
        """Encode ``source`` into ``destination``."""
        _run_encoder(self.command(source, destination, target_format), source)


def create_encoder(options: EncoderOptions, *, overwrite: bool = False) -> FfmpegEncoder | CjxlEncoder:
    """Build the encoder adapter selected by ``options``."""
    if options.name == "ffmpeg":
        return FfmpegEncoder(
            binary=options.binary or "ffmpeg",
            effort=options.effort,
            overwrite=overwrite,
        )
    if options.name == "cjxl":
        return CjxlEncoder(binary=options.binary or "cjxl", effort=options.effort)
    raise ConfigurationError(f"unknown encoder: {options.name}")
