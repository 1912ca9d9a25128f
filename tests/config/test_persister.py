"""
Tests for the settings persister (atomic writes, parsing, backups).
"""

import json
import os
from pathlib import Path
from uuid import uuid4

import pytest

from configvault.config.errors import (
    PersistenceError,
    SettingsNotFoundError,
    SettingsParseError,
)
from configvault.config.loaders import SettingsPersister, backup_path_for
from configvault.config.schemas import AppSettings


@pytest.fixture
def settings_file(data_dir) -> Path:
    return data_dir / "appsettings.json"


@pytest.fixture
def persister(settings_file) -> SettingsPersister:
    return SettingsPersister(settings_file)


class TestLoadDocument:
    """Test SettingsPersister.load_document."""

    def test_loads_section(self, persister, settings_file, write_document, make_section):
        """Test the named section is loaded and initialized."""
        write_document(settings_file, make_section(schema_version=3, batch_delay=42))

        settings = persister.load_document(settings_file)

        assert isinstance(settings, AppSettings)
        assert settings.schema_version == 3
        assert settings.batch_delay == 42
        assert settings.directory_model == str(settings_file.parent / "Models")

    def test_missing_file(self, persister, settings_file):
        """Test a missing file raises SettingsNotFoundError."""
        with pytest.raises(SettingsNotFoundError):
            persister.load_document(settings_file)

    def test_invalid_json(self, persister, settings_file):
        """Test malformed JSON reports the line."""
        settings_file.write_text('{\n  "AppSettings": {,\n}', encoding="utf-8")

        with pytest.raises(SettingsParseError) as exc_info:
            persister.load_document(settings_file)

        assert exc_info.value.line == 2

    def test_root_not_object(self, persister, settings_file):
        """Test a JSON array root is rejected."""
        settings_file.write_text("[]", encoding="utf-8")

        with pytest.raises(SettingsParseError):
            persister.load_document(settings_file)

    def test_missing_section(self, persister, settings_file):
        """Test a document without the section is rejected."""
        settings_file.write_text(json.dumps({"Logging": {}}), encoding="utf-8")

        with pytest.raises(SettingsParseError) as exc_info:
            persister.load_document(settings_file)

        assert exc_info.value.section == "AppSettings"

    def test_missing_schema_version(self, persister, settings_file, write_document):
        """Test the section must carry schema_version."""
        write_document(settings_file, {"templates": []})

        with pytest.raises(SettingsParseError):
            persister.load_document(settings_file)

    def test_invalid_field_value(self, persister, settings_file, write_document, make_section):
        """Test pydantic failures name the field."""
        write_document(settings_file, make_section(ui_mode="sideways"))

        with pytest.raises(SettingsParseError) as exc_info:
            persister.load_document(settings_file)

        assert exc_info.value.field_path == "ui_mode"

    def test_unknown_fields_are_ignored(self, persister, settings_file, write_document, make_section):
        """Test fields dropped by a release do not break loading."""
        write_document(settings_file, make_section(legacy_option=True))

        settings = persister.load_document(settings_file)

        assert not hasattr(settings, "legacy_option")


class TestSaveSettings:
    """Test SettingsPersister.save_settings."""

    def test_round_trip(self, persister, settings_file, write_document, make_section, make_template):
        """Test save(load(path)) then load(path) gives an equal document."""
        write_document(
            settings_file,
            make_section(
                templates=[
                    make_template(uuid4(), "Builtin", file_version="3"),
                    make_template(
                        uuid4(),
                        "Upscaler",
                        group="custom",
                        category="upscaler",
                        upscale_template={"scale_factor": 4, "vendor_hint": {"x": 1}},
                    ),
                ],
                ui_mode="advanced",
                prompts=[{"prompt": "a cat", "type": "snippet"}],
            ),
        )

        original = persister.load_document(settings_file)
        persister.save_settings(original)
        reloaded = persister.load_document(settings_file)

        assert reloaded == original

    def test_preserves_sibling_sections(self, persister, settings_file, write_document, make_section):
        """Test only the AppSettings section is replaced."""
        write_document(settings_file, make_section(), Logging={"level": "Debug"})

        settings = persister.load_document(settings_file)
        settings.batch_delay = 123
        persister.save_settings(settings)

        document = json.loads(settings_file.read_text(encoding="utf-8"))
        assert document["Logging"] == {"level": "Debug"}
        assert document["AppSettings"]["batch_delay"] == 123

    def test_creates_missing_file(self, persister, settings_file, make_settings):
        """Test saving without an existing file creates it."""
        persister.save_settings(make_settings(schema_version=5))

        assert settings_file.exists()
        assert persister.load_document(settings_file).schema_version == 5

    def test_default_model_directory_stored_empty(self, persister, settings_file, make_settings):
        """Test the computed model directory is not written to disk."""
        settings = make_settings()
        persister.save_settings(settings)

        document = json.loads(settings_file.read_text(encoding="utf-8"))
        assert document["AppSettings"]["directory_model"] == ""
        assert settings.directory_model == str(settings_file.parent / "Models")

    def test_custom_model_directory_stored(self, persister, settings_file, make_settings):
        """Test a user-chosen model directory is written as-is."""
        persister.save_settings(make_settings(directory_model="/models"))

        document = json.loads(settings_file.read_text(encoding="utf-8"))
        assert document["AppSettings"]["directory_model"] == "/models"

    def test_runtime_fields_not_written(self, persister, settings_file, make_settings, make_template):
        """Test derived template state stays out of the file."""
        persister.save_settings(
            make_settings(templates=[make_template(uuid4(), "X", group="custom")])
        )

        document = json.loads(settings_file.read_text(encoding="utf-8"))
        assert "is_installed" not in document["AppSettings"]["templates"][0]

    def test_no_temp_file_left(self, persister, settings_file, make_settings):
        """Test the temporary file is renamed away."""
        persister.save_settings(make_settings())

        assert not persister.temp_file.exists()


class TestAtomicity:
    """Test crash safety of the write path."""

    def test_interrupted_rename_leaves_file_unchanged(
        self, persister, settings_file, write_document, make_section, monkeypatch
    ):
        """Test a failure before the rename keeps the original bytes."""
        write_document(settings_file, make_section(batch_delay=1))
        original_bytes = settings_file.read_bytes()
        settings = persister.load_document(settings_file)
        settings.batch_delay = 2

        def failing_replace(src, dst):
            raise OSError("power loss")

        monkeypatch.setattr(os, "replace", failing_replace)

        with pytest.raises(PersistenceError):
            persister.save_settings(settings)

        assert settings_file.read_bytes() == original_bytes
        assert not persister.temp_file.exists()

    def test_interrupted_serialization_leaves_file_unchanged(
        self, persister, settings_file, write_document, make_section, monkeypatch
    ):
        """Test a failure while writing the temp file keeps the original bytes."""
        write_document(settings_file, make_section(batch_delay=1))
        original_bytes = settings_file.read_bytes()
        settings = persister.load_document(settings_file)

        def failing_fsync(fd):
            raise OSError("disk full")

        monkeypatch.setattr(os, "fsync", failing_fsync)

        with pytest.raises(PersistenceError):
            persister.save_settings(settings)

        assert settings_file.read_bytes() == original_bytes

    def test_unreadable_existing_file_is_not_overwritten(self, persister, settings_file, make_settings):
        """Test a corrupt live file is reported instead of being clobbered."""
        settings_file.write_text("not json", encoding="utf-8")

        with pytest.raises(SettingsParseError):
            persister.save_settings(make_settings())

        assert settings_file.read_text(encoding="utf-8") == "not json"


class TestInstallFile:
    """Test SettingsPersister.install_file."""

    def test_copies_verbatim(self, persister, settings_file, data_dir):
        """Test the source bytes become the live file."""
        source = data_dir / "appdefaults.json"
        source.write_text('{"AppSettings": {"schema_version": 3}}', encoding="utf-8")

        persister.install_file(source)

        assert settings_file.read_bytes() == source.read_bytes()
        assert source.exists()

    def test_missing_source(self, persister, data_dir):
        """Test a missing source raises PersistenceError."""
        with pytest.raises(PersistenceError):
            persister.install_file(data_dir / "absent.json")


class TestBackups:
    """Test best-effort backup and retire operations."""

    def test_backup_path_for(self):
        """Test backup naming."""
        assert backup_path_for(Path("appsettings.json")) == Path("appsettings.backup")
        assert backup_path_for(Path("settings.cfg")) == Path("settings.cfg.backup")

    def test_backup_file(self, settings_file):
        """Test a backup copy is created next to the file."""
        settings_file.write_text("{}", encoding="utf-8")

        backup = SettingsPersister.backup_file(settings_file)

        assert backup == settings_file.with_suffix(".backup")
        assert backup.read_text(encoding="utf-8") == "{}"
        assert settings_file.exists()

    def test_backup_failure_is_swallowed(self, settings_file):
        """Test a failing backup returns None instead of raising."""
        assert SettingsPersister.backup_file(settings_file) is None

    def test_retire_file(self, data_dir):
        """Test the file is renamed to its .backup sibling."""
        defaults = data_dir / "appdefaults.json"
        defaults.write_text("{}", encoding="utf-8")
        (data_dir / "appdefaults.backup").write_text("old", encoding="utf-8")

        marker = SettingsPersister.retire_file(defaults)

        assert marker == data_dir / "appdefaults.backup"
        assert marker.read_text(encoding="utf-8") == "{}"
        assert not defaults.exists()

    def test_retire_missing_file(self, data_dir):
        """Test retiring a missing file is a no-op."""
        assert SettingsPersister.retire_file(data_dir / "appdefaults.json") is None
