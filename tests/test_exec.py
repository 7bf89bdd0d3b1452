"""Process-execution wrappers against a real /bin/sh."""

from __future__ import annotations

import ctypes
import errno
import sys
from collections.abc import Callable
from typing import Any

import pytest

from safecalls import ExecError, Ref, exec_command, proc_nice, shell_exec, system
from safecalls.lib.errstate import last_error

pytestmark = pytest.mark.skipif(sys.platform == "win32", reason="popen(3) needs a POSIX shell")

SwapNative = Callable[[str, Callable[..., Any]], None]


def test_exec_command_collects_lines_and_status() -> None:
    output: list[str] = ["existing"]
    result_code: Ref[int] = Ref()

    last = exec_command("printf 'one  \\ntwo\\n'", output, result_code)

    assert last == "two"
    assert output == ["existing", "one", "two"]
    assert result_code.value == 0


def test_exec_command_reports_nonzero_exit_without_raising() -> None:
    result_code: Ref[int] = Ref()

    assert exec_command("exit 3", result_code=result_code) == ""
    assert result_code.value == 3


def test_exec_command_handles_lines_longer_than_buffer(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SAFECALLS_EXEC_BUFFER_SIZE", "8")
    output: list[str] = []

    last = exec_command("printf 'abcdefghijklmnopqrstuvwxyz\\nend'", output)

    assert output == ["abcdefghijklmnopqrstuvwxyz", "end"]
    assert last == "end"


def test_shell_exec_returns_full_output() -> None:
    assert shell_exec("echo hi; echo there") == "hi\nthere\n"


def test_shell_exec_empty_output_is_not_a_failure() -> None:
    assert shell_exec("true") == ""


def test_blank_command_raises_exec_error() -> None:
    with pytest.raises(ExecError) as excinfo:
        exec_command("   ")

    assert excinfo.value.errno == errno.EINVAL
    assert str(excinfo.value) == "Cannot execute a blank command"
    assert last_error() is excinfo.value

    with pytest.raises(ExecError):
        shell_exec("")


def test_nul_bytes_in_output_are_kept() -> None:
    output: list[str] = []

    last = exec_command("printf 'a\\000b\\nc\\n'", output)

    assert output == ["a\x00b", "c"]
    assert last == "c"
    assert shell_exec("printf 'a\\000b'") == "a\x00b"


def test_command_with_nul_byte_raises_exec_error() -> None:
    output: list[str] = []

    with pytest.raises(ExecError, match="null bytes") as excinfo:
        exec_command("echo safe\x00; echo injected", output)

    assert excinfo.value.errno == errno.EINVAL
    assert output == []
    with pytest.raises(ExecError):
        shell_exec("echo safe\x00")


def test_system_passes_output_through(capsys: pytest.CaptureFixture[str]) -> None:
    result_code: Ref[int] = Ref()

    last = system("echo first; echo second", result_code)

    assert last == "second"
    assert result_code.value == 0
    assert capsys.readouterr().out == "first\nsecond\n"


def test_proc_nice_zero_increment_succeeds() -> None:
    assert proc_nice(0) is None


def test_proc_nice_raises_when_errno_is_set(swap_native: SwapNative) -> None:
    def _denied(priority: int) -> int:
        ctypes.set_errno(errno.EPERM)
        return -1

    swap_native("exec.proc_nice", _denied)

    with pytest.raises(ExecError) as excinfo:
        proc_nice(-20)

    assert excinfo.value.errno == errno.EPERM


def test_proc_nice_accepts_minus_one_as_a_priority(swap_native: SwapNative) -> None:
    # nice(2) returning -1 with errno untouched is the new priority -1.
    swap_native("exec.proc_nice", lambda priority: -1)

    assert proc_nice(-1) is None
