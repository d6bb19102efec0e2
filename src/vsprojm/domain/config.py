from __future__ import annotations

"""
Configuration Domain Management.

Loads and persists the user's JSON preferences. The file lives in the user
data directory unless overridden by '--config' or the VSPROJM_CONFIG
environment variable. Values read here are raw; the validator normalizes
them.
"""

import json
import logging
import os
from typing import Any, Dict, Optional

from vsprojm.domain.constants import (
    CURRENT_CONFIG_VERSION,
    DEFAULT_EXTENSION,
    DEFAULT_SOURCE_EXTENSIONS,
)
from vsprojm.infra.fs import get_user_data_dir, normalize_path

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "VSPROJM_CONFIG"
CONFIG_FILE_NAME = "config.json"

# -----------------------------------------------------------------------------
# Defaults
# -----------------------------------------------------------------------------

def get_default_config() -> Dict[str, Any]:
    """
    Return the default preferences.

    Returns:
        Dict[str, Any]: A fresh dictionary safe to mutate.
    """
    return {
        "version": CURRENT_CONFIG_VERSION,
        "source_extensions": list(DEFAULT_SOURCE_EXTENSIONS),
        "default_extension": DEFAULT_EXTENSION,
        "log_level": "WARNING",
        "log_file": "",
        "assume_yes": False,
        "recursive": True,
    }


def resolve_config_path(path: Optional[str] = None) -> str:
    """Pick the config file: explicit path, then $VSPROJM_CONFIG, then the user data dir."""
    default_path = os.path.join(get_user_data_dir(), CONFIG_FILE_NAME)
    return normalize_path(path or os.environ.get(CONFIG_ENV_VAR), default_path)

# -----------------------------------------------------------------------------
# Persistence Logic
# -----------------------------------------------------------------------------

def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load preferences merged over the defaults.

    A missing file is normal. An unreadable or malformed file is logged and
    the defaults are used, so a broken preference file never blocks editing
    a project.

    Args:
        path: Optional explicit config file.

    Returns:
        Dict[str, Any]: Defaults updated with the stored values.
    """
    config = get_default_config()
    config_path = resolve_config_path(path)

    if not os.path.exists(config_path):
        logger.debug(f"Config file not found at '{config_path}'. Using defaults.")
        return config

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.error(f"Failed to load config '{config_path}': {e}. Using defaults.")
        return config

    if not isinstance(data, dict):
        logger.warning(f"Config file '{config_path}' does not hold an object. Using defaults.")
        return config

    config.update(data)
    config["version"] = CURRENT_CONFIG_VERSION
    return config


def save_config(config: Dict[str, Any], path: Optional[str] = None) -> str:
    """
    Persist preferences as pretty-printed JSON.

    Returns:
        str: The path written.

    Raises:
        OSError: If the file cannot be written.
    """
    config_path = resolve_config_path(path)
    os.makedirs(os.path.dirname(config_path), exist_ok=True)
    with open(config_path, "w", encoding="utf-8") as f:
        json.dump(config, f, indent=2, ensure_ascii=False)
    logger.debug(f"Config saved to '{config_path}'")
    return config_path
