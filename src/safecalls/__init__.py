"""Exception-raising wrappers for OS calls that signal failure with a sentinel."""

from safecalls.lib.errors import (
    ErrorKind,
    ExecError,
    LastError,
    PcntlError,
    SafeCallError,
    ShmopError,
    ZipError,
)
from safecalls.lib.errstate import clear_last_error, last_error
from safecalls.lib.native.legacy_zip import ZipDirectory, ZipEntry
from safecalls.lib.native.shm import Shmop
from safecalls.lib.ops.exec import exec_command, proc_nice, shell_exec, system
from safecalls.lib.ops.pcntl import (
    pcntl_getpriority,
    pcntl_setpriority,
    pcntl_signal_dispatch,
    pcntl_sigprocmask,
    pcntl_sigtimedwait,
    pcntl_sigwaitinfo,
)
from safecalls.lib.ops.shmop import shmop_delete, shmop_open, shmop_read, shmop_write
from safecalls.lib.ops.zip import (
    zip_close,
    zip_entries,
    zip_entry_close,
    zip_entry_compressedsize,
    zip_entry_compressionmethod,
    zip_entry_filesize,
    zip_entry_name,
    zip_entry_open,
    zip_entry_read,
    zip_open,
    zip_read,
)
from safecalls.lib.types import Ref

__version__ = "0.1.0"

__all__ = [
    "ErrorKind",
    "ExecError",
    "LastError",
    "PcntlError",
    "Ref",
    "SafeCallError",
    "Shmop",
    "ShmopError",
    "ZipDirectory",
    "ZipEntry",
    "ZipError",
    "__version__",
    "clear_last_error",
    "exec_command",
    "last_error",
    "pcntl_getpriority",
    "pcntl_setpriority",
    "pcntl_signal_dispatch",
    "pcntl_sigprocmask",
    "pcntl_sigtimedwait",
    "pcntl_sigwaitinfo",
    "proc_nice",
    "shell_exec",
    "shmop_delete",
    "shmop_open",
    "shmop_read",
    "shmop_write",
    "system",
    "zip_close",
    "zip_entries",
    "zip_entry_close",
    "zip_entry_compressedsize",
    "zip_entry_compressionmethod",
    "zip_entry_filesize",
    "zip_entry_name",
    "zip_entry_open",
    "zip_entry_read",
    "zip_open",
    "zip_read",
]
