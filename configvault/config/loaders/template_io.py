"""
Template file exchange for ConfigVault.

Templates are shared as ``<name>_template.json`` files. Import also accepts
YAML (JSON is read through the same safe YAML parser), and export writes
YAML for any target that is not ``.json``.

- Safe YAML loading (no arbitrary code execution)
- Error messages include file path and line numbers
- Validation with the ModelTemplate Pydantic schema

Usage:
    template = import_template("Realistic-Vision_template.json")
    export_template(template, Path("exports") / template.export_filename())
"""

import json
from pathlib import Path
from typing import Any, Dict, Union

import yaml
from pydantic import ValidationError

from configvault.utils.logger import logger

from ..errors import TemplateExportError, TemplateImportError
from ..schemas.base import TemplateGroup
from ..schemas.template import ModelTemplate


def import_template(path: Union[str, Path]) -> ModelTemplate:
    """
    Read and validate a template file.

    Raises:
        TemplateImportError: If the file is missing, unparsable or invalid
    """
    file_path = Path(path)
    raw_data = _load_raw(file_path)

    try:
        template = ModelTemplate.model_validate(raw_data)
    except ValidationError as e:
        errors = e.errors()
        if errors:
            first = errors[0]
            field_path = ".".join(str(p) for p in first.get("loc", []))
            message = f"{field_path}: {first.get('msg', str(e))}" if field_path else first.get("msg", str(e))
        else:
            message = str(e)
        raise TemplateImportError(message, file_path=file_path) from e

    logger.debug(f"Read template '{template.name}' ({template.id}) from {file_path}")
    return template


def export_template(template: ModelTemplate, path: Union[str, Path]) -> Path:
    """
    Write a template to a file. Built-in templates cannot be exported.

    Raises:
        TemplateExportError: If the template is fixed or the write fails
    """
    file_path = Path(path)
    if template.group == TemplateGroup.FIXED:
        raise TemplateExportError(
            f"Built-in template '{template.name}' cannot be exported",
            template_id=template.id,
        )

    data = template.model_dump(mode="json")
    try:
        file_path.parent.mkdir(parents=True, exist_ok=True)
        with open(file_path, "w", encoding="utf-8") as f:
            if file_path.suffix.lower() == ".json":
                json.dump(data, f, indent=2, ensure_ascii=False)
            else:
                yaml.safe_dump(data, f, sort_keys=False, allow_unicode=True)
    except OSError as e:
        raise TemplateExportError(
            f"Failed to write template file: {e}",
            template_id=template.id,
            file_path=file_path,
        ) from e

    logger.info(f"Exported template '{template.name}' to {file_path}")
    return file_path


def _load_raw(file_path: Path) -> Dict[str, Any]:
    if not file_path.exists():
        raise TemplateImportError(f"File not found: {file_path}", file_path=file_path)

    try:
        with open(file_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        # Extract line/column from PyYAML error
        line = column = None
        if hasattr(e, "problem_mark") and e.problem_mark:
            line = e.problem_mark.line + 1
            column = e.problem_mark.column + 1

        raise TemplateImportError(
            f"Template syntax error: {e}",
            file_path=file_path,
            line=line,
            column=column,
        ) from e
    except OSError as e:
        raise TemplateImportError(f"Failed to read template file: {e}", file_path=file_path) from e

    if not isinstance(data, dict):
        raise TemplateImportError("Template root must be a mapping", file_path=file_path)
    return data
