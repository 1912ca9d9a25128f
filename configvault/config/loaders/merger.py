"""
Settings Merger for ConfigVault.

Builds the settings that replace a user's configuration after an upgrade.
The shipped defaults are the skeleton and user values are grafted on:

- Schema version mismatch: the defaults are returned as-is (hard reset)
- DEFAULT fields keep the shipped value (templates are reconciled by id)
- USER fields take the user's value when it is not None

Fields new in the defaults keep their default value; fields the defaults no
longer have are dropped because the result has the defaults' shape.

Usage:
    from configvault.config.loaders import merge_settings

    if not is_schema_compatible(current, defaults):
        persister.backup_file(settings_file)
    merged = merge_settings(current, defaults)
"""

from copy import deepcopy

from configvault.utils.logger import logger

from ..schemas.base import FieldAuthority
from ..schemas.settings import SETTINGS_FIELD_AUTHORITY, AppSettings
from .templates import reconcile_templates


def is_schema_compatible(current: AppSettings, defaults: AppSettings) -> bool:
    """True when a field-level merge is safe."""
    return current.schema_version == defaults.schema_version


def merge_settings(current: AppSettings, defaults: AppSettings) -> AppSettings:
    """
    Merge the user's settings onto the shipped defaults.

    Pure: performs no I/O and does not modify either argument.

    Args:
        current: The user's existing settings
        defaults: The newly shipped default settings

    Returns:
        Initialized settings to become the new configuration
    """
    result = defaults.model_copy(deep=True)

    if not is_schema_compatible(current, defaults):
        logger.info(
            f"Settings schema changed (v{current.schema_version} -> "
            f"v{defaults.schema_version}), resetting to defaults"
        )
        return result.initialize()

    for name, authority in SETTINGS_FIELD_AUTHORITY:
        if authority == FieldAuthority.DEFAULT:
            if name == "templates":
                result.templates = reconcile_templates(current.templates, defaults.templates)
            continue

        value = getattr(current, name)
        if value is not None:
            setattr(result, name, deepcopy(value))

    return result.initialize()
