"""
Shared fixtures for settings tests.

Documents are built as plain dicts (what the JSON files hold) so tests can
write them straight to disk or validate them into AppSettings.
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional
from uuid import UUID

import pytest

from configvault.config.schemas import AppSettings

SECTION = "AppSettings"


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    """Empty settings directory."""
    path = tmp_path / "data"
    path.mkdir()
    return path


@pytest.fixture
def make_template():
    """Factory for template dicts."""

    def _make(
        template_id: UUID,
        name: str,
        file_version: str = "1",
        group: str = "fixed",
        category: str = "stable_diffusion",
        **extra: Any,
    ) -> Dict[str, Any]:
        template = {
            "id": str(template_id),
            "name": name,
            "file_version": file_version,
            "group": group,
            "category": category,
        }
        template.update(extra)
        return template

    return _make


@pytest.fixture
def make_section():
    """Factory for AppSettings section dicts."""

    def _make(
        schema_version: int = 3,
        templates: Optional[List[Dict[str, Any]]] = None,
        **fields: Any,
    ) -> Dict[str, Any]:
        section = {"schema_version": schema_version, "templates": templates or []}
        section.update(fields)
        return section

    return _make


@pytest.fixture
def write_document():
    """Write a settings file holding one section plus optional siblings."""

    def _write(path: Path, section: Dict[str, Any], **siblings: Any) -> Path:
        document = {SECTION: section}
        document.update(siblings)
        path.write_text(json.dumps(document, indent=2), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def make_settings(make_section, data_dir):
    """Factory for initialized AppSettings bound to data_dir."""

    def _make(**kwargs: Any) -> AppSettings:
        return AppSettings.model_validate(make_section(**kwargs)).initialize(data_dir)

    return _make

