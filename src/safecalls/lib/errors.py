"""Structured errors raised when a native call returns its failure sentinel."""

from __future__ import annotations

import errno as errno_codes
from dataclasses import dataclass
from enum import StrEnum


class ErrorKind(StrEnum):
    """Call group a wrapped operation belongs to."""

    EXEC = "exec"
    PCNTL = "pcntl"
    SHMOP = "shmop"
    ZIP = "zip"


@dataclass(frozen=True, slots=True)
class LastError:
    """Snapshot of the last-error channel taken right after one native call."""

    code: int | None
    message: str

    @property
    def errno_name(self) -> str | None:
        if self.code is None:
            return None
        return errno_codes.errorcode.get(self.code)


class SafeCallError(OSError):
    """Base class for every wrapped-call failure.

    ``errno`` and ``strerror`` mirror the captured ``last_error`` so callers
    can handle these like any other ``OSError``.
    """

    kind: ErrorKind = ErrorKind.EXEC

    def __init__(self, operation: str, last_error: LastError) -> None:
        if last_error.code is None:
            super().__init__(last_error.message)
        else:
            super().__init__(last_error.code, last_error.message)
        self.operation = operation
        self.last_error = last_error

    def __str__(self) -> str:
        return self.last_error.message

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(operation={self.operation!r}, "
            f"code={self.last_error.code!r}, message={self.last_error.message!r})"
        )


class ExecError(SafeCallError):
    """Process execution failed."""

    kind = ErrorKind.EXEC


class PcntlError(SafeCallError):
    """Process priority or signal control failed."""

    kind = ErrorKind.PCNTL


class ShmopError(SafeCallError):
    """Shared-memory segment access failed."""

    kind = ErrorKind.SHMOP


class ZipError(SafeCallError):
    """Zip archive or entry access failed."""

    kind = ErrorKind.ZIP


_ERROR_CLASSES: dict[ErrorKind, type[SafeCallError]] = {
    ErrorKind.EXEC: ExecError,
    ErrorKind.PCNTL: PcntlError,
    ErrorKind.SHMOP: ShmopError,
    ErrorKind.ZIP: ZipError,
}


def error_class_for(kind: ErrorKind) -> type[SafeCallError]:
    return _ERROR_CLASSES[kind]


__all__ = [
    "ErrorKind",
    "ExecError",
    "LastError",
    "PcntlError",
    "SafeCallError",
    "ShmopError",
    "ZipError",
    "error_class_for",
]
