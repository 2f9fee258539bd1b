"""
Toolkit configuration — TOML file merged over defaults, then env overrides.

Lookup order for the file: ``LBX_CONFIG`` env var, then ~/.lbx/config.toml.

Example config.toml:
    palette_file = "/games/moo2/FONTS.LBX"
    log_level = "INFO"
    max_file_size = 67108864
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

from lbx import CONFIG_DIR_NAME, CONFIG_FILE_NAME, LBX_MAX_FILE_SIZE

log = logging.getLogger(__name__)

DEFAULT_CONFIG: dict[str, Any] = {
    "palette_file": None,
    "log_level": "WARNING",
    "max_file_size": LBX_MAX_FILE_SIZE,
}

# Environment variable -> config key
ENV_OVERRIDES = {
    "LBX_PALETTE": "palette_file",
    "LBX_LOG_LEVEL": "log_level",
}


def default_config_path() -> Path:
    env_path = os.environ.get("LBX_CONFIG", "").strip()
    if env_path:
        return Path(env_path)
    return Path.home() / CONFIG_DIR_NAME / CONFIG_FILE_NAME


def load_config(config_path: Path | None = None) -> dict[str, Any]:
    """Load config from TOML file, falling back to defaults."""
    config = dict(DEFAULT_CONFIG)

    path = config_path or default_config_path()
    if path.is_file():
        try:
            import tomllib
        except ImportError:
            import tomli as tomllib

        try:
            with open(path, "rb") as f:
                file_config = tomllib.load(f)
            config.update({k: v for k, v in file_config.items() if k in DEFAULT_CONFIG})
        except (OSError, tomllib.TOMLDecodeError) as e:
            log.warning("Failed to load config from %s: %s", path, e)

    for env_name, key in ENV_OVERRIDES.items():
        value = os.environ.get(env_name, "").strip()
        if value:
            config[key] = value

    if not isinstance(config["max_file_size"], int) or config["max_file_size"] <= 0:
        log.warning("Ignoring invalid max_file_size %r", config["max_file_size"])
        config["max_file_size"] = LBX_MAX_FILE_SIZE

    return config
