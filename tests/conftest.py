"""Shared pytest fixtures for library and CLI checks."""

from __future__ import annotations

import os
import subprocess
import sys
from dataclasses import dataclass, replace
from pathlib import Path
from typing import TYPE_CHECKING, Any

import pytest

from safecalls.lib.config.settings import reset_config
from safecalls.lib.errstate import clear_last_error
from safecalls.lib.ops import registry

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

PACKAGE_ROOT = Path(__file__).resolve().parents[1]


@dataclass(frozen=True, slots=True)
class CliResult:
    args: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Iterator[None]:
    """Keep user config files and SAFECALLS_* variables out of every test."""

    for name in list(os.environ):
        if name.startswith("SAFECALLS_"):
            monkeypatch.delenv(name)
    monkeypatch.setenv("SAFECALLS_CONFIG", str(tmp_path / "no-config.toml"))
    reset_config()
    clear_last_error()
    yield
    reset_config()


@pytest.fixture
def swap_native(monkeypatch: pytest.MonkeyPatch) -> Callable[[str, Callable[..., Any]], None]:
    """Replace the native callable behind one registered operation."""

    def _swap(name: str, native: Callable[..., Any]) -> None:
        spec = registry.get_operation(name)
        monkeypatch.setitem(registry._REGISTRY, name, replace(spec, native=native))

    return _swap


@pytest.fixture
def package_root() -> Path:
    return PACKAGE_ROOT


@pytest.fixture
def cli_env(package_root: Path, tmp_path: Path) -> dict[str, str]:
    env = {key: value for key, value in os.environ.items() if not key.startswith("SAFECALLS_")}
    existing = env.get("PYTHONPATH", "")
    root = str(package_root / "src")
    env["PYTHONPATH"] = root if not existing else f"{root}:{existing}"
    env["SAFECALLS_CONFIG"] = str(tmp_path / "cli-config.toml")
    return env


@pytest.fixture
def run_safecalls(package_root: Path, cli_env: dict[str, str]) -> Callable[..., CliResult]:
    def _run(args: list[str], timeout: float = 15.0) -> CliResult:
        completed = subprocess.run(
            [sys.executable, "-m", "safecalls", *args],
            cwd=package_root,
            env=cli_env,
            capture_output=True,
            text=True,
            check=False,
            timeout=timeout,
        )
        return CliResult(
            args=tuple(args),
            returncode=completed.returncode,
            stdout=completed.stdout,
            stderr=completed.stderr,
        )

    return _run
