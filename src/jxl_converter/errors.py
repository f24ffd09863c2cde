"""Exception hierarchy for batch conversion runs.

Only :class:`ConfigurationError` is fatal to a run. Every other error is
job-scoped: it is caught at the worker boundary and recorded as a ``Failed``
outcome carrying its :attr:`ConverterError.kind`.
"""

from __future__ import annotations

from pathlib import Path


class ConverterError(Exception):
    """Base class for all conversion errors."""

    kind: str = "unexpected"
    exit_code: int = 1

    def __init__(self, message: str, *, path: Path | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.path = path


class ConfigurationError(ConverterError):
    """Input/output roots or run options are unusable."""

    kind = "configuration"
    exit_code = 2


class FilesystemError(ConverterError):
    """Source unreadable, destination unwritable, or short copy."""

    kind = "filesystem"


class EncoderError(ConverterError):
    """External encoder exited non-zero, crashed, or could not be started."""

    kind = "encoder"

    def __init__(
        self,
        message: str,
        *,
        path: Path | None = None,
        returncode: int | None = None,
        stderr: str = "",
    ) -> None:
        super().__init__(message, path=path)
        self.returncode = returncode
        self.stderr = stderr


class MetadataError(ConverterError):
    """Timestamps or embedded tags could not be applied to the output."""

    kind = "metadata"


class DuplicateTargetError(ConverterError):
    """Two source files map to the same output path."""

    kind = "duplicate_target"


def error_kind(exc: BaseException) -> str:
    """Return the taxonomy name recorded for ``exc`` in a failed outcome."""
    if isinstance(exc, ConverterError):
        return exc.kind
    if isinstance(exc, OSError):
        return FilesystemError.kind
    return ConverterError.kind
