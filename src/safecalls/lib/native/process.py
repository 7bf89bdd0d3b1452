"""Process-execution natives: shell commands through popen(3), and nice(2).

These follow the runtime convention: failure returns the call's sentinel and
leaves the reason in the last-error channel.
"""

from __future__ import annotations

import ctypes
import errno
import os
import sys
from collections.abc import Callable
from typing import Literal

from safecalls.lib.config.settings import get_config
from safecalls.lib.errstate import report, report_errno
from safecalls.lib.native.libc import load_libc
from safecalls.lib.types import Ref

LineHandler = Callable[[str], None]


def _decode(raw: bytes) -> str:
    return raw.decode("utf-8", errors="replace")


def _exit_status(wait_status: int) -> int:
    if os.WIFEXITED(wait_status):
        return os.WEXITSTATUS(wait_status)
    return wait_status


def _run_pipe(command: str, on_chunk: Callable[[bytes], None]) -> int | None:
    """Run ``command`` and feed its stdout to ``on_chunk`` line by line.

    Returns the raw wait status, or ``None`` after reporting a failure.
    """

    if "\0" in command:
        report(errno.EINVAL, "Command must not contain any null bytes")
        return None
    if not command.strip():
        report(errno.EINVAL, "Cannot execute a blank command")
        return None

    lib = load_libc()
    # Anything Python buffered must reach the terminal before the child writes.
    sys.stdout.flush()
    stream = lib.popen(os.fsencode(command), b"r")
    if not stream:
        report_errno(f"Unable to fork [{command}]")
        return None

    buffer_size = get_config().exec_buffer_size
    buffer = ctypes.create_string_buffer(buffer_size)
    fd = lib.fileno(stream)
    pending = b""
    read_errno = 0
    while True:
        count = lib.read(fd, buffer, buffer_size)
        if count == -1:
            if ctypes.get_errno() == errno.EINTR:
                continue
            read_errno = ctypes.get_errno()
            break
        if count == 0:
            break
        # raw, not value: the output may contain NUL bytes.
        pending += buffer.raw[:count]
        while (newline := pending.find(b"\n")) != -1:
            on_chunk(pending[: newline + 1])
            pending = pending[newline + 1 :]
    if pending:
        on_chunk(pending)

    status = lib.pclose(stream)
    if read_errno:
        report(
            read_errno,
            f"Error reading the output of [{command}]: {os.strerror(read_errno)}",
        )
        return None
    if status == -1:
        report_errno(f"Unable to close the pipe for [{command}]")
        return None
    return status


def _collect_lines(
    command: str,
    output: list[str] | None,
    result_code: Ref[int] | None,
    on_line: LineHandler | None,
) -> str | Literal[False]:
    last_line = ""

    def _on_chunk(chunk: bytes) -> None:
        nonlocal last_line
        text = _decode(chunk)
        if on_line is not None:
            on_line(text)
        last_line = text.rstrip()
        if output is not None:
            output.append(last_line)

    status = _run_pipe(command, _on_chunk)
    if status is None:
        return False
    if result_code is not None:
        result_code.value = _exit_status(status)
    return last_line


def exec_command(
    command: str,
    output: list[str] | None = None,
    result_code: Ref[int] | None = None,
) -> str | Literal[False]:
    """Run ``command``; append its lines to ``output`` and return the last one."""

    return _collect_lines(command, output, result_code, on_line=None)


def system(command: str, result_code: Ref[int] | None = None) -> str | Literal[False]:
    """Run ``command`` passing its output through to ``sys.stdout``."""

    def _passthrough(text: str) -> None:
        sys.stdout.write(text)
        sys.stdout.flush()

    return _collect_lines(command, None, result_code, on_line=_passthrough)


def shell_exec(command: str) -> str | None:
    """Run ``command`` and return its complete output (``None`` on failure).

    A command that prints nothing returns ``""``. The legacy ``shell_exec``
    contract returns null for empty output as well, so callers of that API saw
    an error there; here only a failed pipe is an error.
    """

    chunks: list[bytes] = []
    if _run_pipe(command, chunks.append) is None:
        return None
    return _decode(b"".join(chunks))


def nice(priority: int) -> int:
    """nice(2): returns the new nice value, or -1 with errno set."""

    return load_libc().nice(priority)
