"""CLI smoke tests for the diagnostics entry point."""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

from safecalls import __version__

RunSafecalls = Callable[..., Any]


def test_help_lists_commands(run_safecalls: RunSafecalls) -> None:
    result = run_safecalls(["--help"])

    assert result.returncode == 0
    assert "ops" in result.stdout
    assert "doctor" in result.stdout


def test_version_flag(run_safecalls: RunSafecalls) -> None:
    result = run_safecalls(["--version"])

    assert result.returncode == 0
    assert __version__ in result.stdout


def test_ops_json_lists_every_operation(run_safecalls: RunSafecalls) -> None:
    result = run_safecalls(["ops", "--json"])

    assert result.returncode == 0, result.stderr
    payload = json.loads(result.stdout)
    rows = {row["name"]: row for row in payload["operations"]}
    assert len(rows) == 23
    assert rows["pcntl.setpriority"]["omits"] == ["process_id"]
    assert rows["pcntl.getpriority"]["sentinel"] == "-1 with errno"
    assert rows["zip.open"]["sentinel"] == "error number"
    assert rows["exec.shell_exec"]["sentinel"] == "null"
    assert rows["zip.read"]["kind"] == "zip"


def test_ops_text_filters_by_kind(run_safecalls: RunSafecalls) -> None:
    result = run_safecalls(["ops", "--kind", "shmop"])

    assert result.returncode == 0, result.stderr
    lines = result.stdout.strip().splitlines()
    assert lines[0].split() == ["NAME", "KIND", "SENTINEL", "OMITS"]
    assert [line.split()[0] for line in lines[1:]] == [
        "shmop.delete",
        "shmop.open",
        "shmop.read",
        "shmop.write",
    ]


def test_ops_rejects_unknown_kind(run_safecalls: RunSafecalls) -> None:
    result = run_safecalls(["ops", "--kind", "posix"])

    assert result.returncode == 1
    assert "Unknown call group 'posix'" in result.stderr


def test_doctor_json_reports_every_group(run_safecalls: RunSafecalls) -> None:
    result = run_safecalls(["doctor", "--json"])

    assert result.returncode == 0, result.stderr
    payload = json.loads(result.stdout)
    groups = {status["group"]: status for status in payload["groups"]}
    assert set(groups) == {"exec", "pcntl", "shmop", "zip"}
    assert groups["zip"]["available"] is True
    assert payload["ok"] is (not payload["warnings"])


def test_invalid_config_file_exits_with_error(
    run_safecalls: RunSafecalls,
    cli_env: dict[str, str],
) -> None:
    Path(cli_env["SAFECALLS_CONFIG"]).write_text("[exec]\nbuffer_size = 'big'\n", encoding="utf-8")

    result = run_safecalls(["ops"])

    assert result.returncode == 1
    assert "exec.buffer_size" in result.stderr


def test_bad_libc_path_is_reported_by_doctor(
    run_safecalls: RunSafecalls,
    cli_env: dict[str, str],
) -> None:
    cli_env["SAFECALLS_LIBC_PATH"] = "/nonexistent/libc.so"

    result = run_safecalls(["doctor", "--json"])

    payload = json.loads(result.stdout)
    assert payload["libc_loaded"] is False
    assert payload["ok"] is False
    assert any("Unable to load libc" in warning for warning in payload["warnings"])
