"""Shared-memory operations (raise ShmopError)."""

from __future__ import annotations

from safecalls.lib.errors import ErrorKind
from safecalls.lib.native import shm
from safecalls.lib.native.shm import Shmop
from safecalls.lib.ops.invoke import call_operation
from safecalls.lib.ops.registry import NativeOperation, operation
from safecalls.lib.sentinel import FALSE

SHMOP_OPEN = operation(
    NativeOperation(
        name="shmop.open",
        native=shm.shmop_open,
        sentinel=FALSE,
        kind=ErrorKind.SHMOP,
        description="Create or attach a shared memory segment.",
    )
)
SHMOP_READ = operation(
    NativeOperation(
        name="shmop.read",
        native=shm.shmop_read,
        sentinel=FALSE,
        kind=ErrorKind.SHMOP,
        description="Read data from a shared memory segment.",
    )
)
SHMOP_WRITE = operation(
    NativeOperation(
        name="shmop.write",
        native=shm.shmop_write,
        sentinel=FALSE,
        kind=ErrorKind.SHMOP,
        description="Write data into a shared memory segment.",
    )
)
SHMOP_DELETE = operation(
    NativeOperation(
        name="shmop.delete",
        native=shm.shmop_delete,
        sentinel=FALSE,
        kind=ErrorKind.SHMOP,
        description="Mark a shared memory segment for deletion.",
    )
)


def shmop_open(key: int, mode: str, permissions: int, size: int) -> Shmop:
    """Open segment ``key``.

    ``mode`` is ``"a"`` (read-only attach), ``"c"`` (create or attach),
    ``"w"`` (read-write attach) or ``"n"`` (create, failing if it exists).
    """

    return call_operation(SHMOP_OPEN.name, key, mode, permissions, size)


def shmop_read(shmop: Shmop, offset: int, size: int) -> bytes:
    """Read ``size`` bytes from ``offset``; ``size=0`` reads to the end."""

    return call_operation(SHMOP_READ.name, shmop, offset, size)


def shmop_write(shmop: Shmop, data: bytes, offset: int) -> int:
    return call_operation(SHMOP_WRITE.name, shmop, data, offset)


def shmop_delete(shmop: Shmop) -> None:
    call_operation(SHMOP_DELETE.name, shmop)
