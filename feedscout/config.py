"""Configuration loading and management."""

from pathlib import Path
from typing import Any

import yaml

from feedscout import DEFAULT_USER_AGENT
from feedscout.models import (
    COMMON_FEED_PATHS,
    DEFAULT_MAX_CONCURRENCY,
    DEFAULT_TIMEOUT,
    MAX_HEAD_SIZE,
)

DEFAULT_CONFIG_PATHS = [
    Path("feedscout.yaml"),
    Path.home() / ".feedscout" / "config.yaml",
]


def load_config(config_path: Path | None = None) -> dict[str, Any]:
    """Load configuration from file.

    The first file found is merged over the built-in defaults.

    Args:
        config_path: Optional path to config file. If not provided,
                    searches default locations.

    Returns:
        Configuration dictionary.

    Raises:
        FileNotFoundError: If an explicit config path does not exist.
    """
    if config_path is not None and not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    paths_to_try = [config_path] if config_path else DEFAULT_CONFIG_PATHS

    for path in paths_to_try:
        if path.exists():
            with open(path, encoding="utf-8") as f:
                config = yaml.safe_load(f)
                return merge_configs(get_default_config(), config or {})

    return get_default_config()


def get_default_config() -> dict[str, Any]:
    """Return default configuration."""
    return {
        "discovery": {
            "scan_common_paths": False,
            "max_concurrency": DEFAULT_MAX_CONCURRENCY,
            "timeout": DEFAULT_TIMEOUT,
            "max_head_size": MAX_HEAD_SIZE,
            "user_agent": DEFAULT_USER_AGENT,
            "common_paths": list(COMMON_FEED_PATHS),
        },
        "logging": {
            "level": "WARNING",
        },
    }


def merge_configs(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge two configuration dictionaries.

    Args:
        base: Base configuration.
        override: Override configuration (takes precedence).

    Returns:
        Merged configuration.
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = merge_configs(result[key], value)
        else:
            result[key] = value

    return result
