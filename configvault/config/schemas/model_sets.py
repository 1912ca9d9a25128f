"""
Installed model sets, saved prompts and vendor profiles.

Model sets record which templates the user has actually installed; the
template catalog links back to them by ``id`` + category.
"""

from typing import Any, ClassVar, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from .base import PromptInputType, TemplateCategory


class ModelSetEntry(BaseModel):
    """An installed model set. ``model_set`` is the pipeline's own JSON."""

    category: ClassVar[TemplateCategory]

    id: UUID
    model_set: Dict[str, Any] = Field(default_factory=dict)

    model_config = {
        "extra": "ignore",
        "protected_namespaces": (),
    }

    @property
    def name(self) -> Optional[str]:
        return self.model_set.get("name")


class UpscaleModelSet(ModelSetEntry):
    category: ClassVar[TemplateCategory] = TemplateCategory.UPSCALER


class StableDiffusionModelSet(ModelSetEntry):
    category: ClassVar[TemplateCategory] = TemplateCategory.STABLE_DIFFUSION


class ControlNetModelSet(ModelSetEntry):
    category: ClassVar[TemplateCategory] = TemplateCategory.CONTROL_NET


class FeatureExtractorModelSet(ModelSetEntry):
    category: ClassVar[TemplateCategory] = TemplateCategory.FEATURE_EXTRACTOR


class PromptInput(BaseModel):
    """A saved prompt or prompt snippet."""

    prompt: str
    type: PromptInputType = PromptInputType.POSITIVE


# =============================================================================
# Vendor profiles (always taken from the shipped defaults)
# =============================================================================


class EZModeSettings(BaseModel):
    demo_prompt: Optional[str] = None
    image_prompt: Optional[str] = None
    image_negative_prompt: Optional[str] = None
    video_prompt: Optional[str] = None
    video_negative_prompt: Optional[str] = None


class EZModeProfile(BaseModel):
    generate: Optional[EZModeSettings] = None
    modify: Optional[EZModeSettings] = None
    create: Optional[EZModeSettings] = None


class HardwareProfile(BaseModel):
    """
    Recommended generation options for a class of hardware.

    The per-mode option blocks are vendor-tuned and versioned with the
    release, so they are kept as opaque mappings.
    """

    name: str
    min_memory: int = Field(default=0, ge=0)
    devices: Optional[List[str]] = None
    generate: Optional[Dict[str, Any]] = None
    modify: Optional[Dict[str, Any]] = None
    create: Optional[Dict[str, Any]] = None
