"""User-level operational config loader."""

from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass, fields
from functools import cache
from pathlib import Path
from typing import cast

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("~/.config/safecalls/config.toml")


@dataclass(frozen=True, slots=True)
class SafecallsConfig:
    """Resolved operational configuration for safecalls."""

    libc_path: str | None = None
    exec_buffer_size: int = 4096
    verbosity: int = 0
    log_json: bool = False


_SECTION_KEY_MAP: dict[str, dict[str, str]] = {
    "native": {
        "libc_path": "libc_path",
        "libc": "libc_path",
    },
    "exec": {
        "buffer_size": "exec_buffer_size",
    },
    "logging": {
        "verbosity": "verbosity",
        "json": "log_json",
    },
}

_ENV_OVERRIDE_MAP: dict[str, str] = {
    "SAFECALLS_LIBC_PATH": "libc_path",
    "SAFECALLS_EXEC_BUFFER_SIZE": "exec_buffer_size",
    "SAFECALLS_VERBOSITY": "verbosity",
    "SAFECALLS_LOG_JSON": "log_json",
}

_TRUE_STRINGS = frozenset({"1", "true", "yes", "on"})
_FALSE_STRINGS = frozenset({"0", "false", "no", "off", ""})


def _expected_type_name(field_name: str) -> str:
    if field_name in {"exec_buffer_size", "verbosity"}:
        return "int"
    if field_name == "log_json":
        return "bool"
    return "str"


def _check_int_range(*, field_name: str, value: int, source: str) -> int:
    minimum = 1 if field_name == "exec_buffer_size" else 0
    if value < minimum:
        raise ValueError(
            f"Invalid value for '{source}': expected int >= {minimum}, got {value!r}."
        )
    return value


def _coerce_file_value(*, field_name: str, raw_value: object, source: str) -> object:
    expected = _expected_type_name(field_name)
    if expected == "int":
        if isinstance(raw_value, bool) or not isinstance(raw_value, int):
            raise ValueError(
                f"Invalid value for '{source}': expected int, got "
                f"{type(raw_value).__name__} ({raw_value!r})."
            )
        return _check_int_range(field_name=field_name, value=raw_value, source=source)

    if expected == "bool":
        if not isinstance(raw_value, bool):
            raise ValueError(
                f"Invalid value for '{source}': expected bool, got "
                f"{type(raw_value).__name__} ({raw_value!r})."
            )
        return raw_value

    if not isinstance(raw_value, str):
        raise ValueError(
            f"Invalid value for '{source}': expected str, got "
            f"{type(raw_value).__name__} ({raw_value!r})."
        )
    normalized = raw_value.strip()
    if not normalized:
        raise ValueError(f"Invalid value for '{source}': expected non-empty string.")
    return normalized


def _coerce_env_value(*, field_name: str, raw_value: str, env_name: str) -> object:
    expected = _expected_type_name(field_name)
    if expected == "int":
        try:
            parsed = int(raw_value.strip())
        except ValueError as error:
            raise ValueError(
                f"Invalid environment override '{env_name}': expected int, got {raw_value!r}."
            ) from error
        return _check_int_range(field_name=field_name, value=parsed, source=env_name)

    if expected == "bool":
        normalized = raw_value.strip().lower()
        if normalized in _TRUE_STRINGS:
            return True
        if normalized in _FALSE_STRINGS:
            return False
        raise ValueError(
            f"Invalid environment override '{env_name}': expected bool, got {raw_value!r}."
        )

    normalized = raw_value.strip()
    if not normalized:
        raise ValueError(
            f"Invalid environment override '{env_name}': expected non-empty string."
        )
    return normalized


def _default_values() -> dict[str, object]:
    defaults = SafecallsConfig()
    return {field.name: getattr(defaults, field.name) for field in fields(SafecallsConfig)}


def _apply_toml_payload(
    *,
    values: dict[str, object],
    payload: dict[str, object],
    path: Path,
) -> None:
    for key, raw_value in payload.items():
        section_map = _SECTION_KEY_MAP.get(key)
        if section_map is None:
            logger.warning("Ignoring unknown safecalls config key '%s'.", key)
            continue
        if not isinstance(raw_value, dict):
            raise ValueError(f"Invalid value for '{key}' in '{path}': expected table.")
        for section_key, section_value in cast("dict[str, object]", raw_value).items():
            field_name = section_map.get(section_key)
            if field_name is None:
                logger.warning(
                    "Ignoring unknown safecalls config key '%s.%s'.",
                    key,
                    section_key,
                )
                continue
            values[field_name] = _coerce_file_value(
                field_name=field_name,
                raw_value=section_value,
                source=f"{key}.{section_key}",
            )


def _apply_env_overrides(values: dict[str, object]) -> None:
    for env_name, field_name in _ENV_OVERRIDE_MAP.items():
        raw_value = os.getenv(env_name)
        if raw_value is None:
            continue
        values[field_name] = _coerce_env_value(
            field_name=field_name,
            raw_value=raw_value,
            env_name=env_name,
        )


def resolve_config_path(explicit: Path | None = None) -> Path:
    """Resolve the config file location.

    Precedence:
    1. Explicit function argument.
    2. `SAFECALLS_CONFIG` environment variable.
    3. `~/.config/safecalls/config.toml`.
    """

    if explicit is not None:
        return explicit.expanduser()
    env_path = os.getenv("SAFECALLS_CONFIG")
    if env_path:
        return Path(env_path).expanduser()
    return DEFAULT_CONFIG_PATH.expanduser()


def load_config(path: Path | None = None) -> SafecallsConfig:
    """Load the TOML config file (when present) and apply environment overrides."""

    values = _default_values()
    config_path = resolve_config_path(path)
    if config_path.is_file():
        payload_obj = tomllib.loads(config_path.read_text(encoding="utf-8"))
        payload = cast("dict[str, object]", payload_obj)
        _apply_toml_payload(values=values, payload=payload, path=config_path)

    _apply_env_overrides(values)
    return SafecallsConfig(
        libc_path=cast("str | None", values["libc_path"]),
        exec_buffer_size=cast("int", values["exec_buffer_size"]),
        verbosity=cast("int", values["verbosity"]),
        log_json=cast("bool", values["log_json"]),
    )


@cache
def get_config() -> SafecallsConfig:
    """Return the process-wide config, loading it on first use."""

    return load_config()


def reset_config() -> None:
    get_config.cache_clear()
