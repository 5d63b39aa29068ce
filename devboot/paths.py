"""Configuration path helpers for devboot."""

import os
from pathlib import Path


def get_config_dir() -> Path:
    """Return XDG-compliant config directory: ~/.config/devboot"""
    xdg_home = os.environ.get("XDG_CONFIG_HOME")
    if xdg_home:
        return Path(xdg_home) / "devboot"
    return Path.home() / ".config" / "devboot"


def get_config_path() -> Path:
    """Return path to the user settings file.

    Priority:
    1. DEVBOOT_CONFIG environment variable (if set)
    2. ~/.config/devboot/config.json (default XDG location)
    """
    if "DEVBOOT_CONFIG" in os.environ:
        return Path(os.environ["DEVBOOT_CONFIG"])
    return get_config_dir() / "config.json"
