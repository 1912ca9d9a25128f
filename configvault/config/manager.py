#!/usr/bin/env python3
"""Settings Manager for ConfigVault.

The entry point used by the host application:

- load_settings(): resolve the install state, merge shipped defaults into
  the user's settings on upgrade, and always return usable settings
- save_settings(): atomically persist edited settings
- template import/export and clean-shutdown tracking

Usage:
    from configvault.config import SettingsManager

    manager = SettingsManager()
    settings = manager.load_settings()
    settings.auto_save_image = True
    manager.save_settings(settings)

Not thread-safe: a host with several threads must serialize save_settings().
"""
from pathlib import Path
from typing import Optional, Tuple, Union

from configvault.utils.logger import logger

from .errors import (
    ConfigVaultError,
    PersistenceError,
    TemplateExportError,
    TemplateImportError,
    UnrecoverableConfigError,
)
from .install_state import InstallState, SettingsPaths, detect_install_state
from .loaders.merger import is_schema_compatible, merge_settings
from .loaders.persister import SettingsPersister
from .loaders.template_io import export_template, import_template
from .schemas.settings import AppSettings
from .schemas.template import ModelTemplate


class SettingsManager:
    """
    Owns the settings files of one data directory.

    After ``load_settings()`` the resolved settings are also available as
    ``manager.settings``.
    """

    def __init__(self, data_dir: Optional[Union[str, Path]] = None):
        """
        Args:
            data_dir: Directory holding appdefaults.json / appsettings.json.
                      Defaults to the per-user data directory.
        """
        self.paths = SettingsPaths.from_dir(data_dir)
        self.persister = SettingsPersister(self.paths.settings_file)
        self.settings: Optional[AppSettings] = None

    @property
    def install_state(self) -> InstallState:
        return detect_install_state(self.paths)

    # =========================================================================
    # Load / save
    # =========================================================================

    def load_settings(self) -> AppSettings:
        """
        Load the settings, installing or upgrading from shipped defaults.

        Any parse or I/O failure resets the user settings to the shipped
        defaults. The shipped defaults file is retired afterwards in every
        case, so install and upgrade handling runs once per release.

        Raises:
            UnrecoverableConfigError: If there is neither a user
                configuration nor loadable shipped defaults to build one from
        """
        state = detect_install_state(self.paths)
        logger.debug(f"Settings install state: {state.value} ({self.paths.data_dir})")

        try:
            settings = self._load_for_state(state)
        except UnrecoverableConfigError:
            raise
        except (ConfigVaultError, OSError, ValueError) as e:
            logger.error(f"Failed to load settings ({state.value}): {e}")
            settings = self._reset_to_defaults(e)
        finally:
            self.persister.retire_file(self.paths.defaults_file)

        self.settings = settings
        return settings

    def save_settings(self, settings: Optional[AppSettings] = None) -> Path:
        """
        Persist settings (the loaded ones by default).

        Callers validate field semantics before saving.

        Raises:
            PersistenceError: If the atomic write fails; the previous file is intact
        """
        settings = settings if settings is not None else self._require_settings()
        path = self.persister.save_settings(settings)
        self.settings = settings
        return path

    def _load_for_state(self, state: InstallState) -> AppSettings:
        paths = self.paths

        if state == InstallState.FRESH_INSTALL:
            logger.info(f"Fresh install, creating {paths.settings_file.name}")
            self.persister.install_file(paths.defaults_file)
            return self.persister.load_document(paths.settings_file)

        if state == InstallState.UPGRADE_IN_PLACE:
            logger.info("Shipped defaults found, merging into existing settings")
            defaults = self.persister.load_document(paths.defaults_file)
            current = self.persister.load_document(paths.settings_file)
            if not is_schema_compatible(current, defaults):
                self.persister.backup_file(paths.settings_file)
            merged = merge_settings(current, defaults)
            self.persister.save_settings(merged)
            return merged

        if state == InstallState.ALREADY_INSTALLED:
            return self.persister.load_document(paths.settings_file)

        raise UnrecoverableConfigError(
            "No settings found: neither shipped defaults nor user settings exist",
            data_dir=paths.data_dir,
        )

    def _reset_to_defaults(self, error: Exception) -> AppSettings:
        """
        Replace the user settings with the first loadable shipped defaults.

        Nothing on disk is touched until the reset source has been loaded,
        so a broken defaults file never destroys the user file or its backup.
        """
        source, defaults = self._load_reset_source()
        if source is None:
            raise UnrecoverableConfigError(
                "Settings could not be loaded and no usable shipped defaults are available",
                data_dir=self.paths.data_dir,
            ) from error

        self._backup_before_reset()

        logger.warning(f"Resetting settings to shipped defaults from {source.name}")
        try:
            self.persister.install_file(source)
        except PersistenceError as e:
            raise UnrecoverableConfigError(
                f"Failed to reset settings: {e.message}",
                data_dir=self.paths.data_dir,
            ) from e
        return defaults

    def _load_reset_source(self) -> Tuple[Optional[Path], Optional[AppSettings]]:
        for source in (self.paths.defaults_file, self.paths.defaults_marker):
            if not source.exists():
                continue
            try:
                return source, self.persister.load_document(source)
            except (ConfigVaultError, OSError, ValueError) as e:
                logger.error(f"Cannot reset from {source.name}: {e}")
        return None, None

    def _backup_before_reset(self) -> None:
        paths = self.paths
        if not paths.settings_file.exists():
            return
        # An unreadable file never replaces an existing backup
        if paths.settings_backup.exists() and not self._is_loadable(paths.settings_file):
            logger.warning(
                f"Keeping existing {paths.settings_backup.name}, "
                f"{paths.settings_file.name} is unreadable"
            )
            return
        self.persister.backup_file(paths.settings_file)

    def _is_loadable(self, path: Path) -> bool:
        try:
            self.persister.load_document(path)
        except (ConfigVaultError, OSError, ValueError):
            return False
        return True

    def _require_settings(self) -> AppSettings:
        if self.settings is None:
            raise ConfigVaultError(
                "Settings have not been loaded",
                suggestion="Call load_settings() first",
            )
        return self.settings

    # =========================================================================
    # Session tracking
    # =========================================================================

    def mark_started(self) -> bool:
        """
        Record a session start.

        Returns:
            True if the previous session did not shut down cleanly
        """
        settings = self._require_settings()
        crashed = not settings.has_exited
        settings.has_exited = False
        self.save_settings(settings)
        if crashed:
            logger.warning("Previous session did not exit cleanly")
        return crashed

    def mark_exited(self) -> None:
        settings = self._require_settings()
        settings.has_exited = True
        self.save_settings(settings)

    # =========================================================================
    # Template exchange
    # =========================================================================

    def import_template(self, path: Union[str, Path]) -> ModelTemplate:
        """
        Import a template file into the catalog and save.

        Raises:
            TemplateImportError: If the file is invalid or its id already exists
        """
        settings = self._require_settings()
        template = import_template(path)

        if settings.find_template(template.id) is not None:
            raise TemplateImportError(
                "Template with this id already exists",
                file_path=path,
                template_id=template.id,
            )

        settings.templates = settings.templates + [template]
        settings.initialize()
        self.save_settings(settings)
        logger.info(f"Imported template '{template.name}' from {path}")
        return template

    def export_template(self, template_id: str, path: Union[str, Path]) -> Path:
        """
        Export a user template by id.

        Raises:
            TemplateExportError: If the id is unknown or the template is built-in
        """
        settings = self._require_settings()
        template = settings.find_template(template_id)
        if template is None:
            raise TemplateExportError(f"Template '{template_id}' not found")

        target = Path(path)
        if target.is_dir():
            target = target / template.export_filename()
        return export_template(template, target)
