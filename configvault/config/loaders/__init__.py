"""
Loaders for ConfigVault settings.

- persister: atomic reads/writes of the settings file
- merger: field-level upgrade merge
- templates: identity-based template reconciliation
- template_io: template import/export
"""

from .merger import is_schema_compatible, merge_settings
from .persister import SettingsPersister, backup_path_for, document_schema
from .template_io import export_template, import_template
from .templates import reconcile_templates

__all__ = [
    "SettingsPersister",
    "backup_path_for",
    "document_schema",
    "merge_settings",
    "is_schema_compatible",
    "reconcile_templates",
    "import_template",
    "export_template",
]
