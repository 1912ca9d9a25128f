"""
Settings Persister for ConfigVault.

Owns every write to the data directory:
- Atomic section replace (temp file + fsync + os.replace)
- Whole-file installs of the shipped defaults
- Best-effort backups and the one-shot defaults marker rename

The persister knows nothing about merge policy. The settings document is
one section of a shared JSON file; sibling sections are preserved on save.

Usage:
    persister = SettingsPersister(Path("~/.config/configvault/appsettings.json"))
    settings = persister.load_document(persister.settings_file)
    persister.save_settings(settings)
"""

import json
import os
import shutil
from pathlib import Path
from typing import Any, Dict, Optional, Union

import jsonschema
from pydantic import ValidationError

from configvault.utils.logger import logger

from ..errors import PersistenceError, SettingsNotFoundError, SettingsParseError
from ..schemas.settings import SETTINGS_SECTION, AppSettings

TEMP_SUFFIX = ".temp"
BACKUP_SUFFIX = ".backup"


def document_schema(section: str = SETTINGS_SECTION) -> Dict[str, Any]:
    """JSON schema for the shared settings file (structure only)."""
    return {
        "type": "object",
        "required": [section],
        "properties": {
            section: {
                "type": "object",
                "required": ["schema_version"],
                "properties": {
                    "schema_version": {"type": "integer", "minimum": 1},
                    "templates": {"type": "array"},
                },
            },
        },
    }


def backup_path_for(path: Union[str, Path]) -> Path:
    """Sibling backup path: ``x.json`` -> ``x.backup``, anything else gets ``.backup`` appended."""
    path = Path(path)
    if path.suffix == ".json":
        return path.with_suffix(BACKUP_SUFFIX)
    return path.with_name(path.name + BACKUP_SUFFIX)


class SettingsPersister:
    """
    Reads and writes the settings section of one settings file.

    A crash at any point before the final ``os.replace`` leaves the live
    file exactly as it was.
    """

    def __init__(self, settings_file: Union[str, Path], section: str = SETTINGS_SECTION):
        self.settings_file = Path(settings_file)
        self.section = section

    @property
    def temp_file(self) -> Path:
        return self.settings_file.with_suffix(TEMP_SUFFIX)

    # =========================================================================
    # Reads
    # =========================================================================

    def read_document(self, path: Union[str, Path]) -> Dict[str, Any]:
        """
        Read a whole settings file as a dict.

        Raises:
            SettingsNotFoundError: If the file does not exist
            SettingsParseError: If the file is not a JSON object
        """
        path = Path(path)
        if not path.exists():
            raise SettingsNotFoundError(path)

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise SettingsParseError(
                f"Invalid JSON: {e.msg}",
                file_path=path,
                line=e.lineno,
                column=e.colno,
            ) from e
        except UnicodeDecodeError as e:
            raise SettingsParseError(
                f"Settings file is not valid UTF-8: {e}",
                file_path=path,
            ) from e

        if not isinstance(data, dict):
            raise SettingsParseError(
                "Settings root must be a JSON object",
                file_path=path,
            )
        return data

    def load_document(self, path: Union[str, Path]) -> AppSettings:
        """
        Load the settings section from a file and run its post-load hook.

        Raises:
            SettingsNotFoundError: If the file does not exist
            SettingsParseError: If the section is absent or malformed
        """
        path = Path(path)
        document = self.read_document(path)

        try:
            jsonschema.validate(document, document_schema(self.section))
        except jsonschema.ValidationError as e:
            field_path = ".".join(str(p) for p in e.absolute_path) or None
            raise SettingsParseError(
                e.message,
                file_path=path,
                section=self.section,
                field_path=field_path,
            ) from e

        try:
            settings = AppSettings.model_validate(document[self.section])
        except ValidationError as e:
            errors = e.errors()
            first = errors[0] if errors else {}
            field_path = ".".join(str(p) for p in first.get("loc", ())) or None
            raise SettingsParseError(
                first.get("msg", str(e)),
                file_path=path,
                section=self.section,
                field_path=field_path,
            ) from e

        settings.initialize(path.parent)
        logger.debug(f"Loaded {self.section} (schema v{settings.schema_version}) from {path}")
        return settings

    # =========================================================================
    # Writes
    # =========================================================================

    def save_settings(self, settings: AppSettings) -> Path:
        """
        Atomically replace the settings section of the live file.

        The whole document is serialized to a temporary sibling, flushed
        to disk, then renamed over the live file.

        Raises:
            SettingsParseError: If the existing file cannot be read
            PersistenceError: If writing or renaming fails
        """
        if self.settings_file.exists():
            document = self.read_document(self.settings_file)
        else:
            document = {}

        document[self.section] = settings.to_section()
        self._write_atomic(document)
        logger.debug(f"Saved {self.section} to {self.settings_file}")
        return self.settings_file

    def install_file(self, source: Union[str, Path]) -> Path:
        """Replace the live file with a verbatim copy of ``source`` (same atomic discipline)."""
        source = Path(source)
        self.settings_file.parent.mkdir(parents=True, exist_ok=True)
        try:
            shutil.copyfile(source, self.temp_file)
            self._fsync_path(self.temp_file)
            os.replace(self.temp_file, self.settings_file)
        except OSError as e:
            self._discard_temp()
            raise PersistenceError(
                f"Failed to install {source.name}: {e}",
                file_path=self.settings_file,
            ) from e
        logger.debug(f"Installed {source} as {self.settings_file}")
        return self.settings_file

    def _write_atomic(self, document: Dict[str, Any]) -> None:
        self.settings_file.parent.mkdir(parents=True, exist_ok=True)
        try:
            with open(self.temp_file, "w", encoding="utf-8") as f:
                json.dump(document, f, indent=2, ensure_ascii=False)
                f.flush()
                os.fsync(f.fileno())
            # Rename is the last step; before it the live file is untouched
            os.replace(self.temp_file, self.settings_file)
        except OSError as e:
            self._discard_temp()
            raise PersistenceError(
                f"Failed to save settings: {e}",
                file_path=self.settings_file,
            ) from e

    @staticmethod
    def _fsync_path(path: Path) -> None:
        with open(path, "rb+") as f:
            os.fsync(f.fileno())

    def _discard_temp(self) -> None:
        try:
            self.temp_file.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning(f"Could not remove temporary file {self.temp_file}: {e}")

    # =========================================================================
    # Best-effort operations
    # =========================================================================

    @staticmethod
    def backup_file(path: Union[str, Path]) -> Optional[Path]:
        """
        Copy ``path`` to its ``.backup`` sibling.

        Backups are advisory: failures are logged and None is returned.
        """
        path = Path(path)
        backup_path = backup_path_for(path)
        try:
            shutil.copy2(path, backup_path)
        except OSError as e:
            logger.warning(f"Failed to create backup of {path}: {e}")
            return None
        logger.info(f"Created backup: {backup_path}")
        return backup_path

    @staticmethod
    def retire_file(path: Union[str, Path]) -> Optional[Path]:
        """
        Rename ``path`` to its ``.backup`` sibling, replacing any older one.

        Used for the shipped defaults so the next run does not see a fresh
        install or upgrade again. Failures are logged and None is returned.
        """
        path = Path(path)
        if not path.exists():
            return None
        marker = backup_path_for(path)
        try:
            os.replace(path, marker)
        except OSError as e:
            logger.warning(f"Failed to retire {path}: {e}")
            return None
        logger.debug(f"Retired {path.name} to {marker.name}")
        return marker
