"""Config file loading and environment overrides."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from safecalls.lib.config.settings import (
    SafecallsConfig,
    get_config,
    load_config,
    reset_config,
    resolve_config_path,
)


def _write_config(tmp_path: Path, content: str) -> Path:
    config_path = tmp_path / "config.toml"
    config_path.write_text(content, encoding="utf-8")
    return config_path


def test_load_config_missing_file_returns_defaults() -> None:
    assert load_config() == SafecallsConfig()


def test_load_config_reads_every_section(tmp_path: Path) -> None:
    config_path = _write_config(
        tmp_path,
        "[native]\n"
        "libc_path = '/lib/custom/libc.so.6'\n"
        "\n"
        "[exec]\n"
        "buffer_size = 128\n"
        "\n"
        "[logging]\n"
        "verbosity = 2\n"
        "json = true\n",
    )

    loaded = load_config(config_path)

    assert loaded == SafecallsConfig(
        libc_path="/lib/custom/libc.so.6",
        exec_buffer_size=128,
        verbosity=2,
        log_json=True,
    )


def test_config_path_from_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    config_path = _write_config(tmp_path, "[exec]\nbuffer_size = 64\n")
    monkeypatch.setenv("SAFECALLS_CONFIG", str(config_path))

    assert resolve_config_path() == config_path
    assert resolve_config_path(tmp_path / "explicit.toml") == tmp_path / "explicit.toml"
    assert get_config().exec_buffer_size == 64


def test_default_config_path_lives_under_home(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("SAFECALLS_CONFIG")

    assert resolve_config_path() == Path("~/.config/safecalls/config.toml").expanduser()


def test_env_overrides_win_over_file(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    config_path = _write_config(
        tmp_path,
        "[exec]\n"
        "buffer_size = 128\n"
        "\n"
        "[logging]\n"
        "json = true\n",
    )
    monkeypatch.setenv("SAFECALLS_EXEC_BUFFER_SIZE", "16")
    monkeypatch.setenv("SAFECALLS_LOG_JSON", "off")
    monkeypatch.setenv("SAFECALLS_LIBC_PATH", " libc.so.6 ")

    loaded = load_config(config_path)

    assert loaded.exec_buffer_size == 16
    assert loaded.log_json is False
    assert loaded.libc_path == "libc.so.6"
    assert loaded.verbosity == 0


def test_get_config_is_cached_until_reset(monkeypatch: pytest.MonkeyPatch) -> None:
    first = get_config()
    monkeypatch.setenv("SAFECALLS_VERBOSITY", "3")

    assert get_config() is first

    reset_config()
    assert get_config().verbosity == 3


def test_load_config_warns_on_unknown_keys(
    caplog: pytest.LogCaptureFixture,
    tmp_path: Path,
) -> None:
    config_path = _write_config(
        tmp_path,
        "[exec]\n"
        "buffer_size = 32\n"
        "shell = '/bin/zsh'\n"
        "\n"
        "[mystery]\n"
        "value = 123\n",
    )
    caplog.set_level(logging.WARNING, logger="safecalls.lib.config.settings")

    loaded = load_config(config_path)

    assert loaded.exec_buffer_size == 32
    messages = [record.getMessage() for record in caplog.records]
    assert any("exec.shell" in message for message in messages)
    assert any("mystery" in message for message in messages)


def test_load_config_rejects_type_errors(
    monkeypatch: pytest.MonkeyPatch,
    tmp_path: Path,
) -> None:
    config_path = _write_config(tmp_path, "[exec]\nbuffer_size = 'large'\n")
    with pytest.raises(ValueError, match=r"exec\.buffer_size.*expected int"):
        load_config(config_path)

    config_path = _write_config(tmp_path, "[logging]\njson = 'yes'\n")
    with pytest.raises(ValueError, match=r"logging\.json.*expected bool"):
        load_config(config_path)

    config_path = _write_config(tmp_path, "[native]\nlibc_path = 5\n")
    with pytest.raises(ValueError, match=r"native\.libc_path.*expected str"):
        load_config(config_path)

    config_path = _write_config(tmp_path, "native = 'libc.so.6'\n")
    with pytest.raises(ValueError, match="expected table"):
        load_config(config_path)

    _write_config(tmp_path, "")
    monkeypatch.setenv("SAFECALLS_VERBOSITY", "loud")
    with pytest.raises(ValueError, match=r"SAFECALLS_VERBOSITY.*expected int"):
        load_config(config_path)


@pytest.mark.parametrize("value", (0, -4))
def test_load_config_rejects_empty_buffer(tmp_path: Path, value: int) -> None:
    config_path = _write_config(tmp_path, f"[exec]\nbuffer_size = {value}\n")

    with pytest.raises(ValueError, match=r"exec\.buffer_size.*>= 1"):
        load_config(config_path)


def test_env_bool_override_rejects_garbage(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SAFECALLS_LOG_JSON", "maybe")

    with pytest.raises(ValueError, match=r"SAFECALLS_LOG_JSON.*expected bool"):
        load_config()
