"""Process-control natives: priorities, signal masks and synchronous signal waits."""

from __future__ import annotations

import ctypes
import os
import signal

from safecalls.lib.native.libc import (
    build_sigset,
    load_libc,
    siginfo_t,
    sigset_members,
    timespec,
)
from safecalls.lib.types import SignalInfo

# A `who` of 0 means the calling process, group or user for every `which`.
CURRENT = 0

_FAULT_SIGNALS = frozenset({signal.SIGILL, signal.SIGFPE, signal.SIGSEGV, signal.SIGBUS})
_POLL_SIGNAL = getattr(signal, "SIGPOLL", getattr(signal, "SIGIO", None))


def getpriority(process_id: int = CURRENT, mode: int = os.PRIO_PROCESS) -> int:
    """getpriority(2); -1 is both a valid priority and the failure value."""

    return load_libc().getpriority(mode, process_id)


def setpriority(priority: int, process_id: int = CURRENT, mode: int = os.PRIO_PROCESS) -> int:
    return load_libc().setpriority(mode, process_id, priority)


def signal_dispatch() -> int:
    """Run the Python-level handlers of any signals that arrived.

    A handler that raises makes the underlying call return -1; ctypes
    re-raises that exception here.
    """

    return ctypes.pythonapi.PyErr_CheckSignals()


def sigprocmask(how: int, signals: list[int], old_signals: list[int] | None = None) -> int:
    """sigprocmask(2); ``old_signals`` is replaced with the previous mask."""

    lib = load_libc()
    sigset = build_sigset(signals)
    if sigset is None:
        return -1
    previous = type(sigset)()
    if lib.sigprocmask(how, ctypes.byref(sigset), ctypes.byref(previous)) == -1:
        return -1
    if old_signals is not None:
        old_signals[:] = sigset_members(previous)
    return 0


def _fill_info(info: SignalInfo, raw: siginfo_t) -> None:
    info.clear()
    info["signo"] = raw.si_signo
    info["errno"] = raw.si_errno
    info["code"] = raw.si_code
    if raw.si_signo == signal.SIGCHLD:
        child = raw.fields.sigchld
        info["status"] = child.si_status
        info["utime"] = child.si_utime
        info["stime"] = child.si_stime
        info["pid"] = child.si_pid
        info["uid"] = child.si_uid
    elif raw.si_signo in _FAULT_SIGNALS:
        info["addr"] = raw.fields.sigfault.si_addr or 0
    elif _POLL_SIGNAL is not None and raw.si_signo == _POLL_SIGNAL:
        info["band"] = raw.fields.sigpoll.si_band
        info["fd"] = raw.fields.sigpoll.si_fd


def sigwaitinfo(signals: list[int], info: SignalInfo | None = None) -> int:
    """sigwaitinfo(2); blocks until one of ``signals`` is pending."""

    lib = load_libc()
    sigset = build_sigset(signals)
    if sigset is None:
        return -1
    raw = siginfo_t()
    signo = lib.sigwaitinfo(ctypes.byref(sigset), ctypes.byref(raw))
    if signo != -1 and info is not None:
        _fill_info(info, raw)
    return signo


def sigtimedwait(
    signals: list[int],
    info: SignalInfo | None = None,
    seconds: int = 0,
    nanoseconds: int = 0,
) -> int:
    """sigtimedwait(2); an expired timeout fails with EAGAIN."""

    lib = load_libc()
    sigset = build_sigset(signals)
    if sigset is None:
        return -1
    raw = siginfo_t()
    timeout = timespec(tv_sec=seconds, tv_nsec=nanoseconds)
    signo = lib.sigtimedwait(ctypes.byref(sigset), ctypes.byref(raw), ctypes.byref(timeout))
    if signo != -1 and info is not None:
        _fill_info(info, raw)
    return signo
