#!/usr/bin/env python3
"""
Platform detection utilities for ConfigVault.

Provides consistent platform detection and the per-user data directory
where the settings files live.

Usage:
    from configvault.utils.platform import get_data_dir, is_windows

    settings_dir = get_data_dir()
"""
import os
import sys
from pathlib import Path

# Environment variable that overrides the data directory
DATA_DIR_ENV = "CONFIGVAULT_DATA_DIR"

APP_NAME = "ConfigVault"


def is_windows() -> bool:
    """Check if running on Windows."""
    return sys.platform == "win32"


def is_macos() -> bool:
    """Check if running on macOS."""
    return sys.platform == "darwin"


def get_data_dir() -> Path:
    """
    Get the directory holding appdefaults.json / appsettings.json.

    Resolution order:
    1. $CONFIGVAULT_DATA_DIR
    2. %LOCALAPPDATA%\\ConfigVault on Windows
    3. ~/Library/Application Support/ConfigVault on macOS
    4. $XDG_CONFIG_HOME/configvault (default ~/.config/configvault)

    The directory is not created here; the persister creates it on first write.
    """
    override = os.environ.get(DATA_DIR_ENV)
    if override:
        return Path(override).expanduser()

    if is_windows():
        base = os.environ.get("LOCALAPPDATA")
        if base:
            return Path(base) / APP_NAME
        return Path.home() / "AppData" / "Local" / APP_NAME

    if is_macos():
        return Path.home() / "Library" / "Application Support" / APP_NAME

    xdg = os.environ.get("XDG_CONFIG_HOME")
    base_path = Path(xdg).expanduser() if xdg else Path.home() / ".config"
    return base_path / APP_NAME.lower()
