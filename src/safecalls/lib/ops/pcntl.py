"""Process-control operations (raise PcntlError)."""

from __future__ import annotations

import os

from safecalls.lib.errors import ErrorKind
from safecalls.lib.native import pcntl
from safecalls.lib.ops.invoke import call_operation
from safecalls.lib.ops.registry import NativeOperation, operation
from safecalls.lib.sentinel import MINUS_ONE, MINUS_ONE_WITH_ERRNO
from safecalls.lib.types import SignalInfo

# `process_id=None` means "the current process": the native default, so the
# keyword is left out rather than forwarded.
_CURRENT_PROCESS = (("process_id", None),)

GETPRIORITY = operation(
    NativeOperation(
        name="pcntl.getpriority",
        native=pcntl.getpriority,
        sentinel=MINUS_ONE_WITH_ERRNO,
        kind=ErrorKind.PCNTL,
        description="Get the priority of a process, process group or user.",
        omit_defaults=_CURRENT_PROCESS,
    )
)
SETPRIORITY = operation(
    NativeOperation(
        name="pcntl.setpriority",
        native=pcntl.setpriority,
        sentinel=MINUS_ONE,
        kind=ErrorKind.PCNTL,
        description="Change the priority of a process, process group or user.",
        omit_defaults=_CURRENT_PROCESS,
    )
)
SIGNAL_DISPATCH = operation(
    NativeOperation(
        name="pcntl.signal_dispatch",
        native=pcntl.signal_dispatch,
        sentinel=MINUS_ONE,
        kind=ErrorKind.PCNTL,
        description="Run handlers for pending signals.",
    )
)
SIGPROCMASK = operation(
    NativeOperation(
        name="pcntl.sigprocmask",
        native=pcntl.sigprocmask,
        sentinel=MINUS_ONE,
        kind=ErrorKind.PCNTL,
        description="Examine and change blocked signals.",
    )
)
SIGTIMEDWAIT = operation(
    NativeOperation(
        name="pcntl.sigtimedwait",
        native=pcntl.sigtimedwait,
        sentinel=MINUS_ONE,
        kind=ErrorKind.PCNTL,
        description="Wait for signals, with a timeout.",
    )
)
SIGWAITINFO = operation(
    NativeOperation(
        name="pcntl.sigwaitinfo",
        native=pcntl.sigwaitinfo,
        sentinel=MINUS_ONE,
        kind=ErrorKind.PCNTL,
        description="Wait for signals.",
    )
)


def pcntl_getpriority(process_id: int | None = None, mode: int = os.PRIO_PROCESS) -> int:
    """Return the priority of ``process_id`` (current process when ``None``).

    ``0`` and ``-1`` are ordinary priorities here; only a recorded errno
    makes the call fail.
    """

    return call_operation(GETPRIORITY.name, process_id=process_id, mode=mode)


def pcntl_setpriority(
    priority: int,
    process_id: int | None = None,
    mode: int = os.PRIO_PROCESS,
) -> None:
    call_operation(SETPRIORITY.name, priority, process_id=process_id, mode=mode)


def pcntl_signal_dispatch() -> None:
    call_operation(SIGNAL_DISPATCH.name)


def pcntl_sigprocmask(
    how: int,
    signals: list[int],
    old_signals: list[int] | None = None,
) -> None:
    """Block, unblock or set the signal mask; ``old_signals`` receives the previous mask."""

    call_operation(SIGPROCMASK.name, how, signals, old_signals)


def pcntl_sigtimedwait(
    signals: list[int],
    info: SignalInfo | None = None,
    seconds: int = 0,
    nanoseconds: int = 0,
) -> int:
    return call_operation(SIGTIMEDWAIT.name, signals, info, seconds, nanoseconds)


def pcntl_sigwaitinfo(signals: list[int], info: SignalInfo | None = None) -> int:
    return call_operation(SIGWAITINFO.name, signals, info)
