"""
ConfigVault settings subsystem.

Persists application settings and the model template catalog across
upgrades without losing user customizations:

    config/
    ├── schemas/          # Pydantic models for the settings document
    ├── loaders/          # Persister, merger, template reconciler, template IO
    ├── install_state.py  # InstallState + file layout of the data directory
    ├── manager.py        # SettingsManager (load/save entry point)
    └── errors.py         # Custom exceptions

Usage:
    from configvault.config import SettingsManager

    settings = SettingsManager().load_settings()
"""

from .errors import (
    ConfigVaultError,
    PersistenceError,
    SettingsNotFoundError,
    SettingsParseError,
    TemplateExportError,
    TemplateImportError,
    UnrecoverableConfigError,
)
from .install_state import InstallState, SettingsPaths, detect_install_state
from .manager import SettingsManager
from .schemas import AppSettings, ModelTemplate, TemplateCategory, TemplateGroup

__all__ = [
    "SettingsManager",
    "SettingsPaths",
    "InstallState",
    "detect_install_state",
    "AppSettings",
    "ModelTemplate",
    "TemplateCategory",
    "TemplateGroup",
    "ConfigVaultError",
    "SettingsNotFoundError",
    "SettingsParseError",
    "UnrecoverableConfigError",
    "PersistenceError",
    "TemplateImportError",
    "TemplateExportError",
]
