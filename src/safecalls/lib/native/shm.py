"""System V shared-memory natives (shmget/shmat/shmdt/shmctl)."""

from __future__ import annotations

import ctypes
import errno
from dataclasses import dataclass
from types import TracebackType
from typing import Literal

from safecalls.lib.errstate import report, report_errno
from safecalls.lib.native.libc import (
    IPC_CREAT,
    IPC_EXCL,
    IPC_RMID,
    IPC_STAT,
    SHM_RDONLY,
    SHMAT_FAILED,
    load_libc,
    shmid_ds,
)
from safecalls.lib.types import ShmKey

# access mode -> (shmget flags, shmat flags, writable)
_ACCESS_MODES: dict[str, tuple[int, int, bool]] = {
    "a": (0, SHM_RDONLY, False),
    "c": (IPC_CREAT, 0, True),
    "n": (IPC_CREAT | IPC_EXCL, 0, True),
    "w": (0, 0, True),
}


@dataclass(slots=True, eq=False)
class Shmop:
    """An attached shared-memory segment."""

    shmid: int
    key: ShmKey
    size: int
    writable: bool
    address: int | None

    @property
    def closed(self) -> bool:
        return self.address is None

    def close(self) -> None:
        """Detach from the segment; the segment itself survives until deleted."""

        if self.address is None:
            return
        address, self.address = self.address, None
        load_libc().shmdt(ctypes.c_void_p(address))

    def __enter__(self) -> Shmop:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


def _require_attached(shmop: Shmop) -> int | None:
    if shmop.address is None:
        report(errno.EBADF, "Shared memory segment is closed")
        return None
    return shmop.address


def shmop_open(key: int, mode: str, permissions: int, size: int) -> Shmop | Literal[False]:
    access = _ACCESS_MODES.get(mode)
    if access is None:
        report(errno.EINVAL, f"Access mode '{mode}' is invalid")
        return False
    get_flags, attach_flags, writable = access
    if get_flags & IPC_CREAT and size < 1:
        report(errno.EINVAL, "Shared memory segment size must be greater than zero")
        return False

    lib = load_libc()
    shmid = lib.shmget(key, max(size, 0), get_flags | permissions)
    if shmid == -1:
        report_errno("Unable to attach or create shared memory segment")
        return False

    stat = shmid_ds()
    if lib.shmctl(shmid, IPC_STAT, ctypes.byref(stat)) == -1:
        report_errno("Unable to get shared memory segment information")
        return False

    address = lib.shmat(shmid, None, attach_flags)
    if address is None or address == SHMAT_FAILED:
        report_errno("Unable to attach to shared memory segment")
        return False

    return Shmop(
        shmid=shmid,
        key=ShmKey(key),
        size=stat.shm_segsz,
        writable=writable,
        address=address,
    )


def shmop_read(shmop: Shmop, offset: int, size: int) -> bytes | Literal[False]:
    """Read ``size`` bytes at ``offset``; a size of 0 reads to the end of the segment."""

    address = _require_attached(shmop)
    if address is None:
        return False
    if offset < 0 or offset > shmop.size:
        report(errno.EINVAL, "Start is out of range")
        return False
    if size < 0 or offset + size > shmop.size:
        report(errno.EINVAL, "Count is out of range")
        return False
    count = size if size else shmop.size - offset
    return ctypes.string_at(address + offset, count)


def shmop_write(shmop: Shmop, data: bytes, offset: int) -> int | Literal[False]:
    """Write ``data`` at ``offset``, truncated at the end of the segment."""

    address = _require_attached(shmop)
    if address is None:
        return False
    if not shmop.writable:
        report(errno.EACCES, "Read-only segment cannot be written")
        return False
    if offset < 0 or offset > shmop.size:
        report(errno.EINVAL, "Offset is out of range")
        return False
    count = min(len(data), shmop.size - offset)
    ctypes.memmove(address + offset, data, count)
    return count


def shmop_delete(shmop: Shmop) -> bool:
    if load_libc().shmctl(shmop.shmid, IPC_RMID, None) == -1:
        report_errno("Can't mark segment for deletion (are you the owner?)")
        return False
    return True
