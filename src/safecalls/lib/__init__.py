"""Core safecalls library: error channel, sentinels, registry and call groups."""

from safecalls.lib.errors import (
    ErrorKind,
    ExecError,
    LastError,
    PcntlError,
    SafeCallError,
    ShmopError,
    ZipError,
)
from safecalls.lib.types import Ref

__all__ = [
    "ErrorKind",
    "ExecError",
    "LastError",
    "PcntlError",
    "Ref",
    "SafeCallError",
    "ShmopError",
    "ZipError",
]
