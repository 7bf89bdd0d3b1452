"""Process-execution operations (raise ExecError)."""

from __future__ import annotations

from safecalls.lib.errors import ErrorKind
from safecalls.lib.native import process
from safecalls.lib.ops.invoke import call_operation
from safecalls.lib.ops.registry import NativeOperation, operation
from safecalls.lib.sentinel import FALSE, MINUS_ONE_WITH_ERRNO, NONE
from safecalls.lib.types import Ref

EXEC = operation(
    NativeOperation(
        name="exec.exec",
        native=process.exec_command,
        sentinel=FALSE,
        kind=ErrorKind.EXEC,
        description="Run a shell command and collect its output lines.",
    )
)
PROC_NICE = operation(
    NativeOperation(
        name="exec.proc_nice",
        native=process.nice,
        sentinel=MINUS_ONE_WITH_ERRNO,
        kind=ErrorKind.EXEC,
        description="Change the priority of the current process.",
    )
)
SHELL_EXEC = operation(
    NativeOperation(
        name="exec.shell_exec",
        native=process.shell_exec,
        sentinel=NONE,
        kind=ErrorKind.EXEC,
        description="Run a shell command and return its complete output.",
    )
)
SYSTEM = operation(
    NativeOperation(
        name="exec.system",
        native=process.system,
        sentinel=FALSE,
        kind=ErrorKind.EXEC,
        description="Run a shell command, passing its output through to stdout.",
    )
)


def exec_command(
    command: str,
    output: list[str] | None = None,
    result_code: Ref[int] | None = None,
) -> str:
    """Run ``command``; returns the last output line.

    Every line (trailing whitespace stripped) is appended to ``output`` and
    the exit status lands in ``result_code.value``.
    """

    return call_operation(EXEC.name, command, output, result_code)


def proc_nice(priority: int) -> None:
    """Add ``priority`` to the nice value of the current process."""

    call_operation(PROC_NICE.name, priority)


def shell_exec(command: str) -> str:
    """Return the complete output of ``command``; empty output is ``""``, not an error."""

    return call_operation(SHELL_EXEC.name, command)


def system(command: str, result_code: Ref[int] | None = None) -> str:
    return call_operation(SYSTEM.name, command, result_code)
