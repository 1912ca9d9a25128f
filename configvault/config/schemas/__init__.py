"""
Pydantic schemas for the ConfigVault settings document.

- base: enums and the FieldAuthority merge marker
- template: ModelTemplate and its per-category payloads
- model_sets: installed model sets, prompts, vendor profiles
- settings: AppSettings and SETTINGS_FIELD_AUTHORITY
"""

from .base import (
    ExecutionProvider,
    FieldAuthority,
    LicenceType,
    ModelCacheMode,
    PromptInputType,
    RenderMode,
    TemplateCategory,
    TemplateGroup,
    UIMode,
    ZoomDirection,
)
from .model_sets import (
    ControlNetModelSet,
    EZModeProfile,
    EZModeSettings,
    FeatureExtractorModelSet,
    HardwareProfile,
    ModelSetEntry,
    PromptInput,
    StableDiffusionModelSet,
    UpscaleModelSet,
)
from .settings import (
    MODELS_DIRNAME,
    SETTINGS_FIELD_AUTHORITY,
    SETTINGS_SECTION,
    AppSettings,
    fields_with_authority,
)
from .template import (
    ControlNetTemplate,
    FeatureExtractorTemplate,
    ModelTemplate,
    StableDiffusionTemplate,
    UpscaleTemplate,
)

__all__ = [
    # Enums
    "ExecutionProvider",
    "FieldAuthority",
    "LicenceType",
    "ModelCacheMode",
    "PromptInputType",
    "RenderMode",
    "TemplateCategory",
    "TemplateGroup",
    "UIMode",
    "ZoomDirection",
    # Templates
    "ModelTemplate",
    "StableDiffusionTemplate",
    "UpscaleTemplate",
    "ControlNetTemplate",
    "FeatureExtractorTemplate",
    # Model sets and profiles
    "ModelSetEntry",
    "UpscaleModelSet",
    "StableDiffusionModelSet",
    "ControlNetModelSet",
    "FeatureExtractorModelSet",
    "PromptInput",
    "EZModeSettings",
    "EZModeProfile",
    "HardwareProfile",
    # Document
    "AppSettings",
    "SETTINGS_SECTION",
    "SETTINGS_FIELD_AUTHORITY",
    "MODELS_DIRNAME",
    "fields_with_authority",
]
