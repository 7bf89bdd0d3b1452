"""Operation registry bootstrap and registration guards."""

from __future__ import annotations

from dataclasses import FrozenInstanceError

import pytest

from safecalls.lib.errors import ErrorKind
from safecalls.lib.ops import registry
from safecalls.lib.ops.registry import NativeOperation, get_all_operations, get_operation, operation
from safecalls.lib.sentinel import FALSE, MINUS_ONE


def _noop() -> int:
    return 0


def test_get_all_operations_bootstraps_every_call_group() -> None:
    names = [spec.name for spec in get_all_operations()]

    assert names == sorted(names)
    assert set(names) == {
        "exec.exec",
        "exec.proc_nice",
        "exec.shell_exec",
        "exec.system",
        "pcntl.getpriority",
        "pcntl.setpriority",
        "pcntl.signal_dispatch",
        "pcntl.sigprocmask",
        "pcntl.sigtimedwait",
        "pcntl.sigwaitinfo",
        "shmop.delete",
        "shmop.open",
        "shmop.read",
        "shmop.write",
        "zip.entry_close",
        "zip.entry_compressedsize",
        "zip.entry_compressionmethod",
        "zip.entry_filesize",
        "zip.entry_name",
        "zip.entry_open",
        "zip.entry_read",
        "zip.open",
        "zip.read",
    }


def test_operation_kind_matches_name_prefix() -> None:
    for spec in get_all_operations():
        assert spec.group == spec.kind.value


def test_priority_operations_omit_process_id_placeholder() -> None:
    assert get_operation("pcntl.getpriority").omit_defaults == (("process_id", None),)
    assert get_operation("pcntl.setpriority").omit_defaults == (("process_id", None),)
    assert get_operation("exec.exec").omit_defaults == ()


def test_operation_rejects_duplicate_names(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(registry, "_REGISTRY", {})
    spec = NativeOperation(
        name="exec.noop",
        native=_noop,
        sentinel=FALSE,
        kind=ErrorKind.EXEC,
        description="noop",
    )
    operation(spec)

    with pytest.raises(ValueError, match="Duplicate operation name 'exec.noop'"):
        operation(spec)


def test_operation_rejects_kind_mismatch(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(registry, "_REGISTRY", {})
    spec = NativeOperation(
        name="exec.noop",
        native=_noop,
        sentinel=MINUS_ONE,
        kind=ErrorKind.PCNTL,
        description="noop",
    )

    with pytest.raises(ValueError, match="must be named 'pcntl.<call>'"):
        operation(spec)


def test_operation_rejects_repeated_omitted_keyword(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(registry, "_REGISTRY", {})
    spec = NativeOperation(
        name="pcntl.noop",
        native=_noop,
        sentinel=MINUS_ONE,
        kind=ErrorKind.PCNTL,
        description="noop",
        omit_defaults=(("process_id", None), ("process_id", 0)),
    )

    with pytest.raises(ValueError, match="omits 'process_id' twice"):
        operation(spec)


def test_registered_operations_are_frozen() -> None:
    spec = get_operation("zip.open")

    with pytest.raises(FrozenInstanceError):
        spec.sentinel = FALSE  # type: ignore[misc]
