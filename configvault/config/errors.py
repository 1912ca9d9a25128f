"""
Custom Exceptions for the ConfigVault settings subsystem.

Design Principles:
- Every exception provides actionable guidance
- Error messages include context (which file, which section, where it failed)
- Exceptions are hierarchical for flexible catching
- All exceptions are serializable for GUI/API error reporting
"""

from pathlib import Path
from typing import Any, Dict, Optional, Union
from uuid import UUID


class ConfigVaultError(Exception):
    """
    Base exception for all settings errors.

    Attributes:
        message: Human-readable error description
        context: Additional context as key-value pairs
        suggestion: Actionable suggestion to fix the error
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        suggestion: Optional[str] = None,
    ):
        self.message = message
        self.context = context or {}
        self.suggestion = suggestion
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the complete error message."""
        parts = [self.message]

        if self.context:
            context_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
            parts.append(f"Context: {context_str}")

        if self.suggestion:
            parts.append(f"Suggestion: {self.suggestion}")

        return " | ".join(parts)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API/GUI serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "context": self.context,
            "suggestion": self.suggestion,
        }


class SettingsNotFoundError(ConfigVaultError):
    """Raised when a settings document does not exist on disk."""

    def __init__(self, file_path: Union[str, Path]):
        self.file_path = Path(file_path)
        super().__init__(
            f"Settings file not found: {self.file_path}",
            context={"file": str(self.file_path)},
        )


class SettingsParseError(ConfigVaultError):
    """
    Raised when a settings document exists but cannot be read into shape.

    Covers malformed JSON, a non-object root, a missing section and a
    section that fails schema validation. Provides line/column and the
    failing field when available.
    """

    def __init__(
        self,
        message: str,
        file_path: Optional[Union[str, Path]] = None,
        section: Optional[str] = None,
        field_path: Optional[str] = None,
        line: Optional[int] = None,
        column: Optional[int] = None,
    ):
        self.file_path = Path(file_path) if file_path else None
        self.section = section
        self.field_path = field_path
        self.line = line
        self.column = column

        context = {}
        if self.file_path:
            context["file"] = str(self.file_path)
        if section:
            context["section"] = section
        if field_path:
            context["field"] = field_path
        if line is not None:
            context["line"] = line
        if column is not None:
            context["column"] = column

        suggestion = None
        if line:
            suggestion = f"Check line {line} for syntax errors"
        elif field_path:
            suggestion = f"Fix or remove the '{field_path}' value"

        super().__init__(message, context=context, suggestion=suggestion)


class UnrecoverableConfigError(ConfigVaultError):
    """
    Raised when no usable configuration can be produced.

    Happens when neither the shipped defaults nor a user configuration
    exist, or when the user configuration is broken and there is nothing
    to reset it from.
    """

    def __init__(self, message: str, data_dir: Optional[Union[str, Path]] = None):
        self.data_dir = Path(data_dir) if data_dir else None
        context = {"data_dir": str(self.data_dir)} if self.data_dir else {}
        super().__init__(
            message,
            context=context,
            suggestion="Reinstall the application to restore appdefaults.json",
        )


class PersistenceError(ConfigVaultError):
    """Raised when writing the settings file fails. The previous file is left intact."""

    def __init__(self, message: str, file_path: Optional[Union[str, Path]] = None):
        self.file_path = Path(file_path) if file_path else None
        context = {"file": str(self.file_path)} if self.file_path else {}
        super().__init__(message, context=context)


class TemplateImportError(ConfigVaultError):
    """Raised when a template file cannot be imported."""

    def __init__(
        self,
        message: str,
        file_path: Optional[Union[str, Path]] = None,
        template_id: Optional[UUID] = None,
        line: Optional[int] = None,
        column: Optional[int] = None,
    ):
        self.file_path = Path(file_path) if file_path else None
        self.template_id = template_id
        self.line = line
        self.column = column

        context = {}
        if self.file_path:
            context["file"] = str(self.file_path)
        if template_id:
            context["template_id"] = str(template_id)
        if line is not None:
            context["line"] = line
        if column is not None:
            context["column"] = column

        suggestion = None
        if line:
            suggestion = f"Check line {line} for syntax errors"

        super().__init__(message, context=context, suggestion=suggestion)


class TemplateExportError(ConfigVaultError):
    """Raised when a template cannot be exported."""

    def __init__(
        self,
        message: str,
        template_id: Optional[UUID] = None,
        file_path: Optional[Union[str, Path]] = None,
    ):
        self.template_id = template_id
        self.file_path = Path(file_path) if file_path else None

        context = {}
        if template_id:
            context["template_id"] = str(template_id)
        if self.file_path:
            context["file"] = str(self.file_path)

        super().__init__(message, context=context)
