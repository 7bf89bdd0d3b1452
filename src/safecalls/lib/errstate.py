"""Thread-affine last-error channel shared by the native runtime and the wrapper.

libc bindings are loaded with ``use_errno=True``, so ctypes keeps a private,
thread-local copy of ``errno`` that is swapped in and out around every foreign
call. Natives written in Python report failures explicitly through
:func:`report`. Each wrapped invocation runs inside its own :func:`error_scope`
frame, so a nested invocation on the same thread (a signal handler running
between the native call and the capture, for example) can neither read nor
clobber the outer call's error.
"""

from __future__ import annotations

import ctypes
import os
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass

from safecalls.lib.errors import LastError, SafeCallError


@dataclass(slots=True)
class ErrorFrame:
    """Per-invocation slot for an explicitly reported error."""

    reported: LastError | None = None


class _ThreadState(threading.local):
    def __init__(self) -> None:
        self.frames: list[ErrorFrame] = []
        self.last: SafeCallError | None = None


_STATE = _ThreadState()


@contextmanager
def error_scope() -> Iterator[ErrorFrame]:
    """Clear the channel for one native call and restore the outer state after."""

    saved_errno = ctypes.get_errno()
    frame = ErrorFrame()
    _STATE.frames.append(frame)
    ctypes.set_errno(0)
    try:
        yield frame
    finally:
        _STATE.frames.pop()
        ctypes.set_errno(saved_errno)


def report(code: int | None, message: str) -> None:
    """Record a failure from a Python-implemented native in the current frame.

    Outside any scope this is a no-op: there is no caller to consume it.
    """

    if _STATE.frames:
        _STATE.frames[-1].reported = LastError(code=code, message=message)


def report_errno(message: str | None = None) -> None:
    """Record the current ctypes ``errno`` with an optional message prefix."""

    code = ctypes.get_errno()
    reason = os.strerror(code) if code else "Unknown error"
    report(code or None, f"{message}: {reason}" if message else reason)


def capture(frame: ErrorFrame) -> LastError | None:
    """Snapshot the channel for ``frame``; explicit reports win over ``errno``."""

    if frame.reported is not None:
        return frame.reported
    code = ctypes.get_errno()
    if code:
        return LastError(code=code, message=os.strerror(code))
    return None


def remember(error: SafeCallError) -> None:
    _STATE.last = error


def last_error() -> SafeCallError | None:
    """Return the most recent wrapped failure raised on this thread."""

    return _STATE.last


def clear_last_error() -> None:
    _STATE.last = None
