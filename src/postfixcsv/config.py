"""Configuration loading from ``postfixcsv.yaml``, with defaults."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from postfixcsv.errors import ConfigError

CONFIG_FILENAME = "postfixcsv.yaml"

DEFAULT_CONFIG = {
    "separator": ",",
    "max_depth": 255,
    "error_token": "#ERR",
    "overwrite": False,
    "logging_dir": None,  # NDJSON event log directory; None disables
    "logging_fsync": False,
}


def load_config(path: Path | None = None) -> dict[str, Any]:
    """Load configuration, merged over :data:`DEFAULT_CONFIG`.

    Args:
        path: Explicit config file.  When omitted, ``postfixcsv.yaml`` in
            the current directory is used if it exists.

    Returns:
        Merged configuration dict.  Unknown keys are kept.

    Raises:
        ConfigError: If the file is not valid YAML, is not a mapping, or
            a value is invalid.
        FileNotFoundError: If an explicit *path* does not exist.
    """
    config = dict(DEFAULT_CONFIG)
    if path is None:
        candidate = Path.cwd() / CONFIG_FILENAME
        path = candidate if candidate.exists() else None
    elif not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    if path is not None:
        try:
            user_config = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as e:
            raise ConfigError("<root>", f"invalid YAML in {path}: {e}") from e
        if not isinstance(user_config, dict):
            raise ConfigError("<root>", f"expected a mapping in {path}")
        config.update(user_config)

    validate_config(config)
    return config


def validate_config(config: dict[str, Any]) -> None:
    """Check the known keys of *config*.

    Raises:
        ConfigError: On the first invalid value.
    """
    sep = config.get("separator")
    if not isinstance(sep, str) or not sep:
        raise ConfigError("separator", "must be a non-empty string")

    depth = config.get("max_depth")
    # bool is an int subclass
    if isinstance(depth, bool) or not isinstance(depth, int) or depth < 1:
        raise ConfigError("max_depth", "must be a positive integer")

    token = config.get("error_token")
    if not isinstance(token, str) or not token:
        raise ConfigError("error_token", "must be a non-empty string")

    log_dir = config.get("logging_dir")
    if log_dir is not None and not isinstance(log_dir, str):
        raise ConfigError("logging_dir", "must be a path string or null")
