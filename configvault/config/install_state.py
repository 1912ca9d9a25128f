"""
Install state detection for ConfigVault.

The state is derived from which files exist in the data directory and is
never persisted. Retiring appdefaults.json to appdefaults.backup after a
load is what moves an install from FRESH_INSTALL / UPGRADE_IN_PLACE to
ALREADY_INSTALLED.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional, Union

from configvault.utils.platform import get_data_dir

DEFAULTS_FILENAME = "appdefaults.json"
SETTINGS_FILENAME = "appsettings.json"


class InstallState(str, Enum):
    """Where the settings lifecycle stands for this data directory."""

    FRESH_INSTALL = "fresh_install"  # Shipped defaults only
    UPGRADE_IN_PLACE = "upgrade_in_place"  # Shipped defaults and user settings
    ALREADY_INSTALLED = "already_installed"  # User settings only
    UNRECOVERABLE = "unrecoverable"  # Neither


@dataclass(frozen=True)
class SettingsPaths:
    """All files the settings subsystem touches, derived from one directory."""

    data_dir: Path

    @classmethod
    def from_dir(cls, data_dir: Optional[Union[str, Path]] = None) -> "SettingsPaths":
        return cls(Path(data_dir) if data_dir is not None else get_data_dir())

    @property
    def defaults_file(self) -> Path:
        return self.data_dir / DEFAULTS_FILENAME

    @property
    def defaults_marker(self) -> Path:
        return self.defaults_file.with_suffix(".backup")

    @property
    def settings_file(self) -> Path:
        return self.data_dir / SETTINGS_FILENAME

    @property
    def settings_backup(self) -> Path:
        return self.settings_file.with_suffix(".backup")


def detect_install_state(paths: SettingsPaths) -> InstallState:
    has_defaults = paths.defaults_file.exists()
    has_settings = paths.settings_file.exists()

    if has_defaults and not has_settings:
        return InstallState.FRESH_INSTALL
    if has_defaults and has_settings:
        return InstallState.UPGRADE_IN_PLACE
    if has_settings:
        return InstallState.ALREADY_INSTALLED
    return InstallState.UNRECOVERABLE
