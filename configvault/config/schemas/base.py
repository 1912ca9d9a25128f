"""
Base Schema Definitions for ConfigVault settings.

Defines the enumerations shared by the settings document, the template
catalog and the installed model sets, plus the per-field authority marker
used by the merger.

Design Principles:
- Enum values are the exact strings written to appsettings.json
- Field authority is declared in a static table, not discovered at runtime
"""

from enum import Enum


# =============================================================================
# Merge metadata
# =============================================================================


class FieldAuthority(str, Enum):
    """Which document wins for a settings field during an upgrade merge."""

    DEFAULT = "default"  # Always taken from the newly shipped defaults
    USER = "user"  # User's non-null value overrides the shipped default


# =============================================================================
# Template enums
# =============================================================================


class TemplateGroup(str, Enum):
    """Origin of a model template."""

    FIXED = "fixed"  # Built-in, shipped with the application
    ONLINE = "online"  # Downloaded from the online catalog
    CUSTOM = "custom"  # Created or imported by the user


class TemplateCategory(str, Enum):
    """Kind of model a template configures."""

    STABLE_DIFFUSION = "stable_diffusion"
    UPSCALER = "upscaler"
    CONTROL_NET = "control_net"
    FEATURE_EXTRACTOR = "feature_extractor"


class LicenceType(str, Enum):
    """Licence class of a model."""

    NON_COMMERCIAL = "non_commercial"
    COMMERCIAL = "commercial"


# =============================================================================
# Application setting enums
# =============================================================================


class UIMode(str, Enum):
    """Top-level UI layout."""

    EZ_MODE = "ez_mode"
    ADVANCED = "advanced"


class ModelCacheMode(str, Enum):
    """How many loaded models are kept in memory."""

    SINGLE = "single"
    MULTIPLE = "multiple"


class RenderMode(str, Enum):
    """Preview rendering backend."""

    DEFAULT = "default"
    SOFTWARE_ONLY = "software_only"


class ZoomDirection(str, Enum):
    """Allowed image stretch direction in preview panes."""

    BOTH = "both"
    UP_ONLY = "up_only"
    DOWN_ONLY = "down_only"


class ExecutionProvider(str, Enum):
    """Inference execution providers a device can use."""

    CPU = "cpu"
    CUDA = "cuda"
    DIRECTML = "directml"
    COREML = "coreml"
    ROCM = "rocm"
    OPENVINO = "openvino"


class PromptInputType(str, Enum):
    """Kind of saved prompt."""

    POSITIVE = "positive"
    NEGATIVE = "negative"
    SNIPPET = "snippet"
