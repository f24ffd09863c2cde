"""Shared pytest configuration, marker assignment and fake collaborators."""

from __future__ import annotations

import logging
import os
import threading
import time
from collections.abc import Callable, Iterable, Iterator
from pathlib import Path

import pytest

from jxl_converter.errors import EncoderError

# 2001-09-09T01:46:40Z, far from "now" so a missed utime is obvious.
FIXED_MTIME_NS = 1_000_000_000 * 1_000_000_000


def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    """Attach suite markers based on test file path."""
    del config
    for item in items:
        path = Path(str(item.fspath))
        parts = set(path.parts)
        if "e2e_tests" in parts:
            item.add_marker(pytest.mark.e2e)
        elif "integration_tests" in parts:
            item.add_marker(pytest.mark.integration)
        elif "unit_tests" in parts:
            item.add_marker(pytest.mark.unit)


class FakeEncoder:
    """In-process encoder writing a marker payload instead of real JXL."""

    def __init__(self, fail_names: Iterable[str] = (), delay: float = 0.0) -> None:
        self.fail_names = set(fail_names)
        self.delay = delay
        self.calls: list[tuple[Path, Path, str]] = []
        self.active = 0
        self.max_active = 0
        self._lock = threading.Lock()

    def encode(self, source: Path, destination: Path, target_format: str) -> None:
        with self._lock:
            self.calls.append((source, destination, target_format))
            self.active += 1
            self.max_active = max(self.max_active, self.active)
        try:
            if self.delay:
                time.sleep(self.delay)
            if source.name in self.fail_names:
                destination.write_bytes(b"half-written")
                raise EncoderError(
                    "encoder exited with status 1: Invalid data found when processing input",
                    path=source,
                    returncode=1,
                    stderr="Invalid data found when processing input",
                )
            destination.write_bytes(b"FAKEJXL:" + source.read_bytes())
        finally:
            with self._lock:
                self.active -= 1


@pytest.fixture
def fake_encoder() -> FakeEncoder:
    """Encoder double that always succeeds."""
    return FakeEncoder()


@pytest.fixture
def make_file() -> Callable[..., Path]:
    """Create a file with content and a fixed modification time."""

    def _make(path: Path, content: bytes = b"data", mtime_ns: int = FIXED_MTIME_NS) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)
        os.utime(path, ns=(mtime_ns, mtime_ns))
        return path

    return _make


@pytest.fixture
def encoder_factory() -> type[FakeEncoder]:
    """Build encoder doubles with failure names or an artificial delay."""
    return FakeEncoder


@pytest.fixture
def fixed_mtime_ns() -> int:
    """Modification time given to files created by ``make_file``."""
    return FIXED_MTIME_NS


@pytest.fixture(autouse=True)
def _reset_package_logger() -> Iterator[None]:
    """Undo handlers and levels installed by CLI invocations."""
    package_logger = logging.getLogger("jxl_converter")
    handlers = list(package_logger.handlers)
    level = package_logger.level
    yield
    package_logger.handlers[:] = handlers
    package_logger.setLevel(level)
