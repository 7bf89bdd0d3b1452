"""Configuration loading."""

from safecalls.lib.config.settings import (
    SafecallsConfig,
    get_config,
    load_config,
    reset_config,
    resolve_config_path,
)

__all__ = [
    "SafecallsConfig",
    "get_config",
    "load_config",
    "reset_config",
    "resolve_config_path",
]
