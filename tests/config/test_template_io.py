"""
Tests for template import/export (files and SettingsManager).
"""

import json
from uuid import UUID

import pytest
import yaml

from configvault.config import SettingsManager
from configvault.config.errors import TemplateExportError, TemplateImportError
from configvault.config.loaders import export_template, import_template
from configvault.config.schemas import ModelTemplate, TemplateGroup

CUSTOM_A = UUID("0b8a3c1e-5a2f-4a4e-9c0d-a1a1a1a1a1a1")
BUILTIN_B = UUID("7f2d6e40-3c1b-4e58-8f6a-b2b2b2b2b2b2")
SHARED_E = UUID("e5e5e5e5-3333-4444-8555-e5e5e5e5e5e5")


class TestImportTemplate:
    """Test reading template files."""

    def test_json_file(self, tmp_path, make_template):
        """Test a JSON template file is validated into a ModelTemplate."""
        path = tmp_path / "Shared_template.json"
        path.write_text(
            json.dumps(make_template(SHARED_E, "Shared", group="custom", file_version=3)),
            encoding="utf-8",
        )

        template = import_template(path)

        assert isinstance(template, ModelTemplate)
        assert template.id == SHARED_E
        assert template.file_version == "3"
        assert template.group == TemplateGroup.CUSTOM

    def test_yaml_file(self, tmp_path, make_template):
        """Test YAML template files are accepted."""
        path = tmp_path / "shared.yaml"
        path.write_text(
            yaml.safe_dump(make_template(SHARED_E, "Shared", group="custom", tags=["anime"])),
            encoding="utf-8",
        )

        template = import_template(path)

        assert template.tags == ["anime"]

    def test_missing_file(self, tmp_path):
        """Test a missing file raises TemplateImportError."""
        with pytest.raises(TemplateImportError):
            import_template(tmp_path / "absent.json")

    def test_syntax_error_reports_line(self, tmp_path):
        """Test syntax errors carry the line number."""
        path = tmp_path / "broken.yaml"
        path.write_text("name: ok\ntags: [unclosed\n", encoding="utf-8")

        with pytest.raises(TemplateImportError) as exc_info:
            import_template(path)

        assert exc_info.value.line is not None

    def test_root_must_be_mapping(self, tmp_path):
        """Test a list document is rejected."""
        path = tmp_path / "list.json"
        path.write_text("[1, 2]", encoding="utf-8")

        with pytest.raises(TemplateImportError):
            import_template(path)

    def test_validation_error_names_field(self, tmp_path, make_template):
        """Test schema failures mention the offending field."""
        path = tmp_path / "bad.json"
        path.write_text(
            json.dumps(make_template(SHARED_E, "Bad", category="teleporter")),
            encoding="utf-8",
        )

        with pytest.raises(TemplateImportError) as exc_info:
            import_template(path)

        assert "category" in str(exc_info.value)


class TestExportTemplate:
    """Test writing template files."""

    def test_json_export(self, tmp_path, make_template):
        """Test JSON export can be imported again."""
        template = ModelTemplate.model_validate(
            make_template(CUSTOM_A, "My Model", group="custom", description="tuned")
        )

        path = export_template(template, tmp_path / "out" / template.export_filename())

        assert path.name == "My-Model_template.json"
        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["id"] == str(CUSTOM_A)
        assert "is_installed" not in data
        assert import_template(path) == template

    def test_yaml_export(self, tmp_path, make_template):
        """Test non-JSON targets are written as YAML."""
        template = ModelTemplate.model_validate(make_template(CUSTOM_A, "My Model", group="custom"))

        path = export_template(template, tmp_path / "my_model.yaml")

        data = yaml.safe_load(path.read_text(encoding="utf-8"))
        assert data["name"] == "My Model"

    def test_fixed_template_refused(self, tmp_path, make_template):
        """Test built-in templates cannot be exported."""
        template = ModelTemplate.model_validate(make_template(BUILTIN_B, "Builtin B"))

        with pytest.raises(TemplateExportError):
            export_template(template, tmp_path / "b.json")

        assert not (tmp_path / "b.json").exists()


class TestManagerTemplateExchange:
    """Test SettingsManager.import_template / export_template."""

    @pytest.fixture
    def manager(self, data_dir, write_document, make_section, make_template):
        write_document(
            data_dir / "appsettings.json",
            make_section(
                templates=[
                    make_template(BUILTIN_B, "Builtin B"),
                    make_template(CUSTOM_A, "My Model", group="custom"),
                ]
            ),
        )
        manager = SettingsManager(data_dir)
        manager.load_settings()
        return manager

    def test_import_appends_and_saves(self, manager, tmp_path, make_template):
        """Test an imported template is persisted."""
        path = tmp_path / "Shared_template.json"
        path.write_text(
            json.dumps(make_template(SHARED_E, "Shared", group="custom")),
            encoding="utf-8",
        )

        manager.import_template(path)

        reloaded = SettingsManager(manager.paths.data_dir).load_settings()
        assert [t.id for t in reloaded.templates] == [BUILTIN_B, CUSTOM_A, SHARED_E]

    def test_import_rejects_duplicate_id(self, manager, tmp_path, make_template):
        """Test an id already in the catalog is refused."""
        path = tmp_path / "dup.json"
        path.write_text(
            json.dumps(make_template(CUSTOM_A, "Other Name", group="custom")),
            encoding="utf-8",
        )

        with pytest.raises(TemplateImportError) as exc_info:
            manager.import_template(path)

        assert exc_info.value.template_id == CUSTOM_A
        assert len(manager.settings.templates) == 2

    def test_export_to_directory(self, manager, tmp_path):
        """Test a directory target gets the default file name."""
        path = manager.export_template(str(CUSTOM_A), tmp_path)

        assert path == tmp_path / "My-Model_template.json"
        assert path.exists()

    def test_export_unknown_id(self, manager, tmp_path):
        """Test an unknown id raises TemplateExportError."""
        with pytest.raises(TemplateExportError):
            manager.export_template("00000000-0000-4000-8000-000000000000", tmp_path)

    def test_export_builtin_refused(self, manager, tmp_path):
        """Test built-in templates are not exportable through the manager."""
        with pytest.raises(TemplateExportError):
            manager.export_template(str(BUILTIN_B), tmp_path)
