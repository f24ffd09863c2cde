"""Integration tests driving a real encoder subprocess.

A small executable script stands in for ``ffmpeg``: it reads ``-i <input>``
and writes the last argument, failing like ffmpeg on inputs named
``corrupt*``.
"""

from __future__ import annotations

import os
import stat
import sys
from collections.abc import Callable
from pathlib import Path

import pytest

from jxl_converter import convert_directory
from jxl_converter.adapters.encoders import FfmpegEncoder
from jxl_converter.errors import EncoderError

pytestmark = pytest.mark.skipif(os.name == "nt", reason="requires executable scripts")

_FAKE_FFMPEG = """\
import sys
from pathlib import Path

args = sys.argv[1:]
source = Path(args[args.index("-i") + 1])
destination = Path(args[-1])
if "-n" in args and destination.exists():
    sys.stderr.write(f"File '{destination}' already exists. Exiting.\\n")
    sys.exit(1)
destination.write_bytes(b"partial")
if source.name.startswith("corrupt"):
    sys.stderr.write(f"{source}: Invalid data found when processing input\\n")
    sys.exit(1)
destination.write_bytes(b"JXL" + source.read_bytes())
"""


@pytest.fixture
def fake_ffmpeg(tmp_path: Path) -> Path:
    """Executable ffmpeg stand-in using the current interpreter."""
    script = tmp_path / "bin" / "fake-ffmpeg"
    script.parent.mkdir()
    script.write_text(f"#!{sys.executable}\n{_FAKE_FFMPEG}")
    script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return script


def test_adapter_runs_external_process(
    tmp_path: Path, make_file: Callable[..., Path], fake_ffmpeg: Path
) -> None:
    """The adapter passes input and output paths to the executable."""
    source = make_file(tmp_path / "a.png", b"pixels")
    destination = tmp_path / "a.jxl"

    FfmpegEncoder(binary=str(fake_ffmpeg)).encode(source, destination, "jxl")

    assert destination.read_bytes() == b"JXLpixels"


def test_adapter_surfaces_stderr(
    tmp_path: Path, make_file: Callable[..., Path], fake_ffmpeg: Path
) -> None:
    """Diagnostics from a failing process end up in the error."""
    source = make_file(tmp_path / "corrupt.jpg")

    with pytest.raises(EncoderError) as excinfo:
        FfmpegEncoder(binary=str(fake_ffmpeg)).encode(source, tmp_path / "c.jxl", "jxl")

    assert excinfo.value.returncode == 1
    assert "Invalid data found" in excinfo.value.stderr


def test_full_run_with_external_encoder(
    tmp_path: Path, make_file: Callable[..., Path], fake_ffmpeg: Path, fixed_mtime_ns: int
) -> None:
    """Good images convert, corrupt ones fail without leftovers."""
    make_file(tmp_path / "in" / "a.png", b"a")
    make_file(tmp_path / "in" / "sub" / "b.jpg", b"b")
    make_file(tmp_path / "in" / "sub" / "corrupt.jpg", b"???")

    summary = convert_directory(
        tmp_path / "in",
        tmp_path / "out",
        recursive=True,
        jobs=3,
        encoder_binary=str(fake_ffmpeg),
    )

    assert (summary.converted, summary.failed) == (2, 1)
    assert summary.failures[0].kind == "encoder"
    assert "Invalid data found" in summary.failures[0].message
    assert (tmp_path / "out" / "sub" / "b.jxl").read_bytes() == b"JXLb"
    assert (tmp_path / "out" / "a.jxl").stat().st_mtime_ns == fixed_mtime_ns
    assert not (tmp_path / "out" / "sub" / "corrupt.jxl").exists()


def test_missing_encoder_fails_each_image(
    tmp_path: Path, make_file: Callable[..., Path]
) -> None:
    """Without an encoder binary every image fails; the run itself completes."""
    make_file(tmp_path / "in" / "a.png")
    make_file(tmp_path / "in" / "b.png")

    summary = convert_directory(
        tmp_path / "in",
        tmp_path / "out",
        encoder_binary=str(tmp_path / "nowhere" / "ffmpeg"),
    )

    assert summary.failed == 2
    assert {failure.kind for failure in summary.failures} == {"encoder"}
    assert list((tmp_path / "out").iterdir()) == []
