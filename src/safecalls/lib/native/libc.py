"""ctypes bindings for the libc calls the native runtime is built on.

The library is loaded once, lazily, with ``use_errno=True`` so every call
swaps ctypes' thread-local ``errno`` copy in and out. Struct layouts follow
64-bit Linux glibc.
"""

from __future__ import annotations

import ctypes
import ctypes.util
import signal
from functools import cache

import structlog

from safecalls.lib.config.settings import get_config

logger = structlog.get_logger(__name__)

c_pid_t = ctypes.c_int
c_uid_t = ctypes.c_uint
c_key_t = ctypes.c_int
c_clock_t = ctypes.c_long

# shmat() reports failure as (void *) -1.
SHMAT_FAILED = ctypes.c_void_p(-1).value

IPC_CREAT = 0o1000
IPC_EXCL = 0o2000
IPC_RMID = 0
IPC_STAT = 2
SHM_RDONLY = 0o10000


class sigset_t(ctypes.Structure):
    _fields_ = [("val", ctypes.c_ulong * (1024 // (8 * ctypes.sizeof(ctypes.c_ulong))))]


class timespec(ctypes.Structure):
    _fields_ = [("tv_sec", ctypes.c_long), ("tv_nsec", ctypes.c_long)]


class _sigchld_fields(ctypes.Structure):
    _fields_ = [
        ("si_pid", c_pid_t),
        ("si_uid", c_uid_t),
        ("si_status", ctypes.c_int),
        ("si_utime", c_clock_t),
        ("si_stime", c_clock_t),
    ]


class _sigfault_fields(ctypes.Structure):
    _fields_ = [("si_addr", ctypes.c_void_p)]


class _sigpoll_fields(ctypes.Structure):
    _fields_ = [("si_band", ctypes.c_long), ("si_fd", ctypes.c_int)]


class _sifields(ctypes.Union):
    _fields_ = [
        ("sigchld", _sigchld_fields),
        ("sigfault", _sigfault_fields),
        ("sigpoll", _sigpoll_fields),
        ("pad", ctypes.c_int * 28),
    ]


class siginfo_t(ctypes.Structure):
    _fields_ = [
        ("si_signo", ctypes.c_int),
        ("si_errno", ctypes.c_int),
        ("si_code", ctypes.c_int),
        ("fields", _sifields),
    ]


class ipc_perm(ctypes.Structure):
    _fields_ = [
        ("key", c_key_t),
        ("uid", c_uid_t),
        ("gid", ctypes.c_uint),
        ("cuid", c_uid_t),
        ("cgid", ctypes.c_uint),
        ("mode", ctypes.c_ushort),
        ("pad1", ctypes.c_ushort),
        ("seq", ctypes.c_ushort),
        ("pad2", ctypes.c_ushort),
        ("reserved1", ctypes.c_ulong),
        ("reserved2", ctypes.c_ulong),
    ]


class shmid_ds(ctypes.Structure):
    _fields_ = [
        ("shm_perm", ipc_perm),
        ("shm_segsz", ctypes.c_size_t),
        ("shm_atime", ctypes.c_long),
        ("shm_dtime", ctypes.c_long),
        ("shm_ctime", ctypes.c_long),
        ("shm_cpid", c_pid_t),
        ("shm_lpid", c_pid_t),
        ("shm_nattch", ctypes.c_ulong),
        ("reserved4", ctypes.c_ulong),
        ("reserved5", ctypes.c_ulong),
    ]


_PROTOTYPES: dict[str, tuple[object, list[object]]] = {
    # process execution
    "popen": (ctypes.c_void_p, [ctypes.c_char_p, ctypes.c_char_p]),
    "pclose": (ctypes.c_int, [ctypes.c_void_p]),
    "fileno": (ctypes.c_int, [ctypes.c_void_p]),
    "read": (ctypes.c_ssize_t, [ctypes.c_int, ctypes.c_char_p, ctypes.c_size_t]),
    "nice": (ctypes.c_int, [ctypes.c_int]),
    # priorities
    "getpriority": (ctypes.c_int, [ctypes.c_int, c_uid_t]),
    "setpriority": (ctypes.c_int, [ctypes.c_int, c_uid_t, ctypes.c_int]),
    # signals
    "sigemptyset": (ctypes.c_int, [ctypes.POINTER(sigset_t)]),
    "sigaddset": (ctypes.c_int, [ctypes.POINTER(sigset_t), ctypes.c_int]),
    "sigismember": (ctypes.c_int, [ctypes.POINTER(sigset_t), ctypes.c_int]),
    "sigprocmask": (
        ctypes.c_int,
        [ctypes.c_int, ctypes.POINTER(sigset_t), ctypes.POINTER(sigset_t)],
    ),
    "sigwaitinfo": (ctypes.c_int, [ctypes.POINTER(sigset_t), ctypes.POINTER(siginfo_t)]),
    "sigtimedwait": (
        ctypes.c_int,
        [ctypes.POINTER(sigset_t), ctypes.POINTER(siginfo_t), ctypes.POINTER(timespec)],
    ),
    # System V shared memory
    "shmget": (ctypes.c_int, [c_key_t, ctypes.c_size_t, ctypes.c_int]),
    "shmat": (ctypes.c_void_p, [ctypes.c_int, ctypes.c_void_p, ctypes.c_int]),
    "shmdt": (ctypes.c_int, [ctypes.c_void_p]),
    "shmctl": (ctypes.c_int, [ctypes.c_int, ctypes.c_int, ctypes.POINTER(shmid_ds)]),
}


def resolve_libc_path() -> str | None:
    configured = get_config().libc_path
    if configured:
        return configured
    return ctypes.util.find_library("c")


@cache
def load_libc() -> ctypes.CDLL:
    """Load libc once and declare the prototypes used by the native runtime."""

    path = resolve_libc_path()
    lib = ctypes.CDLL(path, use_errno=True)
    for name, (restype, argtypes) in _PROTOTYPES.items():
        func = getattr(lib, name)
        func.restype = restype
        func.argtypes = argtypes
    logger.debug("libc loaded", path=path)
    return lib


def build_sigset(signals: list[int] | tuple[int, ...]) -> sigset_t | None:
    """Build a ``sigset_t``; returns ``None`` after recording errno for a bad signal."""

    lib = load_libc()
    sigset = sigset_t()
    lib.sigemptyset(ctypes.byref(sigset))
    for signum in signals:
        if lib.sigaddset(ctypes.byref(sigset), int(signum)) == -1:
            return None
    return sigset


def sigset_members(sigset: sigset_t) -> list[int]:
    lib = load_libc()
    return [
        signum
        for signum in range(1, signal.NSIG)
        if lib.sigismember(ctypes.byref(sigset), signum) == 1
    ]
