"""
Model template schemas.

A template is a named, identity-stable preset describing how to configure a
model of one category. Built-in (fixed) templates ship with the application
and are reconciled by id + file_version on upgrade; custom templates belong
to the user and survive every merge untouched.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from .base import LicenceType, TemplateCategory, TemplateGroup


# =============================================================================
# Per-category payloads
# =============================================================================


class PayloadBase(BaseModel):
    """Category payload. Unknown keys are kept so newer payloads round-trip."""

    model_config = {
        "extra": "allow",
        "validate_assignment": True,
        "protected_namespaces": (),
    }


class StableDiffusionTemplate(PayloadBase):
    """Pipeline layout for a Stable Diffusion model set."""

    pipeline_type: str = Field(default="stable_diffusion")
    model_type: str = Field(default="base")
    sample_size: int = Field(default=512, ge=0)
    tokenizer_length: int = Field(default=768, ge=0)
    tokenizer2_limit: int = Field(default=77, ge=0)
    optimization: str = Field(default="level1")
    diffuser_types: List[str] = Field(default_factory=list)
    context_size: int = Field(default=0, ge=0)
    schedulers: Optional[List[str]] = None
    scheduler_defaults: Dict[str, Any] = Field(default_factory=dict)


class UpscaleTemplate(PayloadBase):
    """Tiling and scaling options for an upscaler."""

    scale_factor: int = Field(default=1, ge=1)
    sample_size: int = Field(default=0, ge=0)
    channels: int = Field(default=3, ge=1)
    normalize_type: str = Field(default="zero_to_one")
    tile_mode: str = Field(default="clip_blend")
    tile_size: int = Field(default=256, ge=0)
    tile_overlap: int = Field(default=8, ge=0)


class ControlNetTemplate(PayloadBase):
    """Pipelines a ControlNet model can attach to."""

    pipeline_types: List[str] = Field(default_factory=list)
    invert_input: bool = False
    layer_count: int = Field(default=0, ge=0)


class FeatureExtractorTemplate(PayloadBase):
    """Pre/post-processing for a feature extractor (depth, canny, ...)."""

    sample_size: int = Field(default=512, ge=0)
    channels: int = Field(default=1, ge=1)
    output_channels: int = Field(default=1, ge=1)
    normalize_type: str = Field(default="zero_to_one")
    is_control_net_only: bool = True


# =============================================================================
# Template
# =============================================================================


class ModelTemplate(BaseModel):
    """
    A reusable model preset.

    ``id`` is assigned once at creation and never reassigned. ``file_version``
    versions the template's own content and is independent of the document
    schema version. ``is_installed`` is derived on load and never persisted.
    """

    id: UUID
    file_version: str = Field(default="1", min_length=1)
    update_available: bool = False
    group: TemplateGroup = TemplateGroup.CUSTOM
    category: TemplateCategory

    name: str = Field(..., min_length=1, max_length=200)
    created: Optional[datetime] = None
    is_protected: bool = False
    is_fixed_install: bool = False
    image_icon: Optional[str] = None
    author: Optional[str] = None
    description: Optional[str] = None
    rank: int = 0

    stable_diffusion_template: Optional[StableDiffusionTemplate] = None
    upscale_template: Optional[UpscaleTemplate] = None
    control_net_template: Optional[ControlNetTemplate] = None
    feature_extractor_template: Optional[FeatureExtractorTemplate] = None

    memory_min: float = Field(default=0, ge=0)
    memory_max: float = Field(default=0, ge=0)
    download_size: float = Field(default=0, ge=0)

    website: Optional[str] = None
    licence: Optional[str] = None
    licence_type: LicenceType = LicenceType.NON_COMMERCIAL
    is_licence_accepted: bool = False
    repository: Optional[str] = None
    repository_files: Optional[List[str]] = None
    preview_images: Optional[List[str]] = None
    tags: Optional[List[str]] = None
    variants: Optional[List[str]] = None
    labels: Optional[List[str]] = None

    is_installed: bool = Field(default=False, exclude=True)

    model_config = {
        "extra": "ignore",  # Drop keys written by newer or older releases
        "validate_assignment": True,
        "str_strip_whitespace": True,
    }

    @field_validator("file_version", mode="before")
    @classmethod
    def coerce_file_version(cls, v: Any) -> Any:
        """Accept numeric versions written by hand-edited catalogs."""
        if isinstance(v, bool):
            return v
        if isinstance(v, float) and v.is_integer():
            return str(int(v))
        if isinstance(v, (int, float)):
            return str(v)
        return v

    def export_filename(self) -> str:
        """Default file name used when exporting this template."""
        return f"{self.name.replace(' ', '-')}_template.json"
