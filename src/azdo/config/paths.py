"""
Platform-specific locations of azdo configuration and state.
"""

import os
import platform
from pathlib import Path

from azdo.constants import (
    APP_DIR_NAME,
    ENV_CONFIG_DIR,
    GENERAL_CONFIG_FILE,
    ORGANIZATIONS_CONFIG_FILE,
    WINDOWS_APP_DIR_NAME,
)


def _is_windows() -> bool:
    return platform.system() == "Windows"


def config_dir() -> Path:
    """Get config directory: AZDO_CONFIG_DIR, XDG_CONFIG_HOME, AppData (Windows), HOME"""
    override = os.environ.get(ENV_CONFIG_DIR, "")
    if override:
        return Path(override)

    xdg_config = os.environ.get("XDG_CONFIG_HOME", "")
    if xdg_config:
        return Path(xdg_config) / APP_DIR_NAME

    app_data = os.environ.get("AppData", "") or os.environ.get("APPDATA", "")
    if _is_windows() and app_data:
        return Path(app_data) / WINDOWS_APP_DIR_NAME

    return Path.home() / ".config" / APP_DIR_NAME


def state_dir() -> Path:
    """Get state directory: XDG_STATE_HOME, LocalAppData (Windows), HOME"""
    xdg_state = os.environ.get("XDG_STATE_HOME", "")
    if xdg_state:
        return Path(xdg_state) / APP_DIR_NAME

    local_app_data = os.environ.get("LOCALAPPDATA", "")
    if _is_windows() and local_app_data:
        return Path(local_app_data) / WINDOWS_APP_DIR_NAME

    return Path.home() / ".local" / "state" / APP_DIR_NAME


def general_config_file() -> Path:
    return config_dir() / GENERAL_CONFIG_FILE


def organizations_config_file() -> Path:
    return config_dir() / ORGANIZATIONS_CONFIG_FILE
