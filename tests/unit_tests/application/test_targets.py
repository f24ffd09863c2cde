"""Unit tests for output path mapping and target reservation."""

from __future__ import annotations

import threading
from pathlib import Path

import pytest

from jxl_converter.application.results import FileTask
from jxl_converter.application.targets import (
    TargetRegistry,
    output_target,
    stem_owners,
    suffixed_target,
)
from jxl_converter.errors import DuplicateTargetError
from jxl_converter.types import FileKind


def _task(relative: str) -> FileTask:
    return FileTask(
        source_path=Path("/in") / relative,
        relative_path=Path(relative),
        kind=FileKind.IMAGE,
    )


def test_output_target_mirrors_relative_path() -> None:
    """The relative layout is kept and only the suffix changes."""
    task = _task("2021/trip/IMG_1.JPG")
    assert output_target(task, Path("/out"), ".jxl") == Path("/out/2021/trip/IMG_1.jxl")
    assert output_target(task, Path("/out")) == Path("/out/2021/trip/IMG_1.JPG")


def test_suffixed_target_keeps_source_extension() -> None:
    """The fallback name appends the new suffix to the full file name."""
    assert suffixed_target(_task("a/b.png"), Path("/out"), ".jxl") == Path("/out/a/b.png.jxl")


def test_second_claim_fails_in_fail_mode() -> None:
    """Two sources with one target: the second gets a duplicate-target error."""
    registry = TargetRegistry("fail")
    target = Path("/out/a.jxl")
    assert registry.reserve(_task("a.png"), target) == target

    with pytest.raises(DuplicateTargetError, match="duplicate target") as excinfo:
        registry.reserve(_task("a.jpg"), target, Path("/out/a.jpg.jxl"))
    assert excinfo.value.kind == "duplicate_target"
    assert excinfo.value.path == Path("/in/a.jpg")


def test_suffix_mode_falls_back() -> None:
    """In suffix mode the loser of a collision gets the disambiguated path."""
    registry = TargetRegistry("suffix")
    registry.reserve(_task("a.png"), Path("/out/a.jxl"))
    chosen = registry.reserve(_task("a.jpg"), Path("/out/a.jxl"), Path("/out/a.jpg.jxl"))
    assert chosen == Path("/out/a.jpg.jxl")
    assert len(registry) == 2


def test_concurrent_claims_have_single_winner() -> None:
    """Exactly one thread wins a contested path."""
    registry = TargetRegistry()
    barrier = threading.Barrier(8)
    wins: list[bool] = []
    lock = threading.Lock()

    def contend() -> None:
        barrier.wait()
        won = registry.claim(Path("/out/same.jxl"))
        with lock:
            wins.append(won)

    threads = [threading.Thread(target=contend) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert wins.count(True) == 1


def test_stem_owners_pick_first_image_by_name(tmp_path: Path) -> None:
    """Only regular image files compete; the lowest name owns the stem."""
    for name in ("a.png", "a.jpg", "b.gif", "a.txt", "c.tiff"):
        (tmp_path / name).write_bytes(b"x")
    (tmp_path / "c.bmp").mkdir()

    assert stem_owners(tmp_path) == {"a": "a.jpg", "b": "b.gif", "c": "c.tiff"}
    assert stem_owners(tmp_path / "missing") == {}


@pytest.mark.parametrize("first", ["a.png", "a.jpg"])
def test_suffix_mode_winner_does_not_depend_on_order(tmp_path: Path, first: str) -> None:
    """Whichever sibling is reserved first, ``a.jpg`` keeps the plain name."""
    (tmp_path / "a.png").write_bytes(b"png")
    (tmp_path / "a.jpg").write_bytes(b"jpeg")
    registry = TargetRegistry("suffix")
    order = [first, "a.jpg" if first == "a.png" else "a.png"]

    chosen: dict[str, Path] = {}
    for name in order:
        task = FileTask(source_path=tmp_path / name, relative_path=Path(name), kind=FileKind.IMAGE)
        chosen[name] = registry.reserve(
            task, Path("/out/a.jxl"), Path(f"/out/{name}.jxl")
        )

    assert chosen == {"a.jpg": Path("/out/a.jxl"), "a.png": Path("/out/a.png.jxl")}


def test_fail_mode_always_fails_the_displaced_sibling(tmp_path: Path) -> None:
    """Reserving the non-owner first still leaves the plain target to the owner."""
    (tmp_path / "a.png").write_bytes(b"png")
    (tmp_path / "a.jpg").write_bytes(b"jpeg")
    registry = TargetRegistry("fail")

    def task(name: str) -> FileTask:
        return FileTask(source_path=tmp_path / name, relative_path=Path(name), kind=FileKind.IMAGE)

    with pytest.raises(DuplicateTargetError):
        registry.reserve(task("a.png"), Path("/out/a.jxl"), Path("/out/a.png.jxl"))
    assert registry.reserve(task("a.jpg"), Path("/out/a.jxl"), Path("/out/a.jpg.jxl")) == Path(
        "/out/a.jxl"
    )
