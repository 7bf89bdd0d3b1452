"""Diagnostics: registered operations and platform support for each call group."""

from __future__ import annotations

import platform
import sys
from dataclasses import dataclass

from safecalls.lib.errors import ErrorKind
from safecalls.lib.native.libc import load_libc, resolve_libc_path
from safecalls.lib.ops.registry import get_all_operations


@dataclass(frozen=True, slots=True)
class OperationRow:
    name: str
    kind: str
    sentinel: str
    omits: tuple[str, ...]
    description: str


@dataclass(frozen=True, slots=True)
class OperationListOutput:
    operations: tuple[OperationRow, ...]

    def format_text(self) -> str:
        from safecalls.cli.output import tabular

        rows = [["NAME", "KIND", "SENTINEL", "OMITS"]]
        for row in self.operations:
            rows.append([row.name, row.kind, row.sentinel, ",".join(row.omits) or "-"])
        return tabular(rows)


@dataclass(frozen=True, slots=True)
class GroupStatus:
    group: str
    available: bool
    reason: str = ""


@dataclass(frozen=True, slots=True)
class DoctorOutput:
    ok: bool
    platform: str
    python: str
    libc_path: str | None
    libc_loaded: bool
    groups: tuple[GroupStatus, ...]
    warnings: tuple[str, ...] = ()

    def format_text(self) -> str:
        lines = [
            f"ok: {'ok' if self.ok else 'WARNINGS'}",
            f"platform: {self.platform}",
            f"python: {self.python}",
            f"libc: {self.libc_path or '-'} ({'loaded' if self.libc_loaded else 'not loaded'})",
        ]
        for status in self.groups:
            state = "available" if status.available else f"unavailable ({status.reason})"
            lines.append(f"{status.group}: {state}")
        lines.extend(f"warning: {warning}" for warning in self.warnings)
        return "\n".join(lines)


def list_operations(kind: ErrorKind | None = None) -> OperationListOutput:
    rows = tuple(
        OperationRow(
            name=spec.name,
            kind=spec.kind.value,
            sentinel=spec.sentinel.label,
            omits=tuple(keyword for keyword, _placeholder in spec.omit_defaults),
            description=spec.description,
        )
        for spec in get_all_operations()
        if kind is None or spec.kind == kind
    )
    return OperationListOutput(operations=rows)


def _group_status(kind: ErrorKind, *, libc_loaded: bool, linux_layouts: bool) -> GroupStatus:
    if kind == ErrorKind.ZIP:
        return GroupStatus(group=kind.value, available=True)
    if not libc_loaded:
        return GroupStatus(group=kind.value, available=False, reason="libc not loaded")
    if kind in {ErrorKind.PCNTL, ErrorKind.SHMOP} and not linux_layouts:
        return GroupStatus(
            group=kind.value,
            available=False,
            reason="struct layouts target 64-bit Linux",
        )
    return GroupStatus(group=kind.value, available=True)


def doctor() -> DoctorOutput:
    warnings: list[str] = []
    libc_path = resolve_libc_path()
    try:
        load_libc()
    except OSError as exc:
        libc_loaded = False
        warnings.append(f"Unable to load libc from {libc_path!r}: {exc}")
    else:
        libc_loaded = True

    linux_layouts = sys.platform.startswith("linux") and sys.maxsize > 2**32
    groups = tuple(
        _group_status(kind, libc_loaded=libc_loaded, linux_layouts=linux_layouts)
        for kind in ErrorKind
    )
    warnings.extend(
        f"Call group '{status.group}' is unavailable: {status.reason}."
        for status in groups
        if not status.available
    )
    return DoctorOutput(
        ok=not warnings,
        platform=platform.platform(),
        python=platform.python_version(),
        libc_path=libc_path,
        libc_loaded=libc_loaded,
        groups=groups,
        warnings=tuple(warnings),
    )
