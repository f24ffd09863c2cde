"""Unit tests for filesystem helpers and progress sinks."""

from __future__ import annotations

import io
import threading
from collections.abc import Callable
from pathlib import Path

import pytest
from rich.console import Console

from jxl_converter.application.results import RunSummary, Skipped
from jxl_converter.errors import FilesystemError
from jxl_converter.infrastructure.filesystem import (
    copy_verbatim,
    ensure_output_root,
    ensure_parent,
    remove_partial,
)
from jxl_converter.infrastructure.progress import NullProgressSink, RichProgressSink


def test_ensure_parent_tolerates_concurrent_creation(tmp_path: Path) -> None:
    """Many jobs creating one directory at once all succeed."""
    target = tmp_path / "a" / "b" / "c" / "file.jxl"
    barrier = threading.Barrier(8)
    errors: list[BaseException] = []

    def create() -> None:
        barrier.wait()
        try:
            ensure_parent(target)
        except BaseException as exc:  # pragma: no cover - failure path
            errors.append(exc)

    threads = [threading.Thread(target=create) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert errors == []
    assert target.parent.is_dir()


def test_ensure_parent_blocked_by_file(
    tmp_path: Path, make_file: Callable[..., Path]
) -> None:
    """A regular file in the way is a filesystem error."""
    make_file(tmp_path / "blocker")
    with pytest.raises(FilesystemError, match="cannot create directory"):
        ensure_parent(tmp_path / "blocker" / "x" / "file.jxl")


def test_ensure_output_root_returns_absolute_path(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Relative roots are resolved against the working directory."""
    monkeypatch.chdir(tmp_path)
    root = ensure_output_root(Path("out"))
    assert root == tmp_path / "out"
    assert root.is_dir()


def test_copy_verbatim_returns_size(tmp_path: Path, make_file: Callable[..., Path]) -> None:
    """Copies are byte-identical."""
    source = make_file(tmp_path / "a.bin", b"\x00\x01\x02")
    destination = tmp_path / "b.bin"

    assert copy_verbatim(source, destination) == 3
    assert destination.read_bytes() == b"\x00\x01\x02"


def test_copy_verbatim_missing_source(tmp_path: Path) -> None:
    """Unreadable sources are filesystem errors."""
    with pytest.raises(FilesystemError, match="copy failed"):
        copy_verbatim(tmp_path / "missing", tmp_path / "out")


def test_remove_partial_is_idempotent(tmp_path: Path, make_file: Callable[..., Path]) -> None:
    """Removing a missing partial output is not an error."""
    partial = make_file(tmp_path / "partial.jxl")
    remove_partial(partial)
    remove_partial(partial)
    assert not partial.exists()


def test_null_sink_accepts_updates() -> None:
    """The null sink is a no-op."""
    sink = NullProgressSink()
    sink.update(Skipped(Path("a"), reason="x"), RunSummary(total_seen=1, skipped=1))
    sink.close()


def test_rich_sink_renders_counts() -> None:
    """The live display shows running counts and the last processed file."""
    buffer = io.StringIO()
    console = Console(file=buffer, force_terminal=False, width=200)
    sink = RichProgressSink(console=console)

    sink.update(
        Skipped(Path("/in/notes.txt"), reason="x"),
        RunSummary(total_seen=1, skipped=1),
    )
    sink.close()

    output = buffer.getvalue()
    assert "1 skipped" in output
    assert "notes.txt" in output
