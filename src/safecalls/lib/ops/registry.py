"""Native operation registry shared by the wrappers and the CLI."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable

    from safecalls.lib.errors import ErrorKind
    from safecalls.lib.sentinel import Sentinel


@dataclass(frozen=True, slots=True)
class NativeOperation:
    """Single source of truth for one wrapped native call."""

    name: str
    native: Callable[..., Any]
    sentinel: Sentinel
    kind: ErrorKind
    description: str
    # (keyword, placeholder) pairs dropped from the native call when passed as-is.
    omit_defaults: tuple[tuple[str, object], ...] = ()

    @property
    def group(self) -> str:
        return self.name.partition(".")[0]


_REGISTRY: dict[str, NativeOperation] = {}
_bootstrapped = False


def operation(spec: NativeOperation) -> NativeOperation:
    """Register an operation and guard against duplicates."""

    if spec.group != spec.kind.value:
        raise ValueError(
            f"Operation '{spec.name}' must be named '{spec.kind.value}.<call>' "
            f"for error kind '{spec.kind.value}'"
        )
    if spec.name in _REGISTRY:
        raise ValueError(
            f"Duplicate operation name '{spec.name}': already registered by "
            f"{_REGISTRY[spec.name].native}"
        )
    seen: set[str] = set()
    for keyword, _placeholder in spec.omit_defaults:
        if keyword in seen:
            raise ValueError(f"Operation '{spec.name}' omits '{keyword}' twice")
        seen.add(keyword)
    _REGISTRY[spec.name] = spec
    return spec


def get_all_operations() -> list[NativeOperation]:
    """Return all registered operations sorted by canonical name."""

    _ensure_bootstrapped()
    return [_REGISTRY[name] for name in sorted(_REGISTRY)]


def get_operation(name: str) -> NativeOperation:
    """Fetch one operation by canonical name."""

    _ensure_bootstrapped()
    return _REGISTRY[name]


def _bootstrap_operation_modules() -> None:
    # Operation modules self-register via `operation(...)` on import.
    import safecalls.lib.ops.exec as exec_ops
    import safecalls.lib.ops.pcntl as pcntl_ops
    import safecalls.lib.ops.shmop as shmop_ops
    import safecalls.lib.ops.zip as zip_ops

    _ = (exec_ops, pcntl_ops, shmop_ops, zip_ops)


def _ensure_bootstrapped() -> None:
    global _bootstrapped
    if _bootstrapped:
        return
    # Only mark bootstrapped after a successful import sequence so failures retry.
    _bootstrap_operation_modules()
    _bootstrapped = True
