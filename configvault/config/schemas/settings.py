"""
The persisted settings document.

``AppSettings`` is stored as the ``AppSettings`` section of appsettings.json.
Which fields survive an upgrade is declared in ``SETTINGS_FIELD_AUTHORITY``;
the merger walks that table in order and never inspects the model class.
"""

from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

from pydantic import BaseModel, Field, PrivateAttr

from configvault.utils.platform import get_data_dir

from .base import (
    ExecutionProvider,
    FieldAuthority,
    ModelCacheMode,
    RenderMode,
    TemplateCategory,
    TemplateGroup,
    UIMode,
    ZoomDirection,
)
from .model_sets import (
    ControlNetModelSet,
    EZModeProfile,
    FeatureExtractorModelSet,
    HardwareProfile,
    ModelSetEntry,
    PromptInput,
    StableDiffusionModelSet,
    UpscaleModelSet,
)
from .template import ModelTemplate

# Name of the section inside the shared settings file
SETTINGS_SECTION = "AppSettings"

# Sub-directory of the data directory used when directory_model is unset
MODELS_DIRNAME = "Models"


class AppSettings(BaseModel):
    """Application preferences, template catalog and installed model sets."""

    schema_version: int = Field(..., ge=1)
    has_exited: bool = False

    is_update_enabled: bool = True
    is_app_warning_accepted: bool = False
    ui_mode: UIMode = UIMode.EZ_MODE
    model_cache_mode: ModelCacheMode = ModelCacheMode.SINGLE
    render_mode: RenderMode = RenderMode.SOFTWARE_ONLY
    use_legacy_device_detection: bool = False
    auto_save_image: bool = False
    auto_save_video: bool = False
    is_preview_enabled: bool = False
    is_model_evaluation_mode_enabled: bool = False

    directory_model: Optional[str] = None
    directory_image: Optional[str] = None
    directory_image_save: Optional[str] = None
    directory_image_auto_save: Optional[str] = None
    directory_video: Optional[str] = None
    directory_video_save: Optional[str] = None
    directory_video_auto_save: Optional[str] = None

    batch_delay: int = Field(default=500, ge=0)
    realtime_refresh_rate: int = Field(default=100, ge=0)
    realtime_history_enabled: bool = True
    history_max_items: int = Field(default=5000, ge=0)
    default_zoom_direction: ZoomDirection = ZoomDirection.BOTH

    supported_providers: Optional[List[ExecutionProvider]] = None
    default_device_id: Optional[int] = None
    default_provider: Optional[ExecutionProvider] = None

    prompts: List[PromptInput] = Field(default_factory=list)

    ez_mode_profile: Optional[EZModeProfile] = None
    hardware_profiles: Optional[List[HardwareProfile]] = None
    templates: List[ModelTemplate] = Field(default_factory=list)

    upscale_model_sets: List[UpscaleModelSet] = Field(default_factory=list)
    stable_diffusion_model_sets: List[StableDiffusionModelSet] = Field(default_factory=list)
    control_net_model_sets: List[ControlNetModelSet] = Field(default_factory=list)
    feature_extractor_model_sets: List[FeatureExtractorModelSet] = Field(default_factory=list)

    _data_dir: Optional[Path] = PrivateAttr(default=None)

    model_config = {
        "extra": "ignore",  # Fields dropped by a release are silently discarded
        "validate_assignment": True,
        "str_strip_whitespace": True,
        "protected_namespaces": (),
    }

    # =========================================================================
    # Post-load hook
    # =========================================================================

    @property
    def default_model_directory(self) -> Path:
        base = self._data_dir if self._data_dir is not None else get_data_dir()
        return base / MODELS_DIRNAME

    def initialize(self, data_dir: Optional[Path] = None) -> "AppSettings":
        """
        Compute derived state after a load or merge.

        - Binds the data directory (kept across copies) and fills in
          ``directory_model`` when it is empty
        - Marks non-fixed templates installed when a model set of the same
          id and category exists
        - Drops stale update notices on templates that are not installed
        """
        if data_dir is not None:
            self._data_dir = Path(data_dir)

        if not self.directory_model:
            self.directory_model = str(self.default_model_directory)

        for template in self.templates:
            if template.group == TemplateGroup.FIXED:
                continue
            template.is_installed = any(
                model_set.id == template.id
                for model_set in self.model_sets_for(template.category)
            )
            if not template.is_installed and template.update_available:
                template.update_available = False

        return self

    # =========================================================================
    # Queries
    # =========================================================================

    def model_sets_for(self, category: TemplateCategory) -> List[ModelSetEntry]:
        """Installed model sets of one category."""
        if category == TemplateCategory.UPSCALER:
            return list(self.upscale_model_sets)
        if category == TemplateCategory.CONTROL_NET:
            return list(self.control_net_model_sets)
        if category == TemplateCategory.STABLE_DIFFUSION:
            return list(self.stable_diffusion_model_sets)
        if category == TemplateCategory.FEATURE_EXTRACTOR:
            return list(self.feature_extractor_model_sets)
        return []

    def template_for(self, model_set: ModelSetEntry) -> Optional[ModelTemplate]:
        """Template an installed model set was created from, if still present."""
        for template in self.templates:
            if template.category == model_set.category and template.id == model_set.id:
                return template
        return None

    def get_template_names(self, category: TemplateCategory) -> List[str]:
        """Distinct names of the user's templates in a category, for uniqueness checks."""
        names: List[str] = []
        for template in self.templates:
            if template.group == TemplateGroup.FIXED or template.category != category:
                continue
            if template.name not in names:
                names.append(template.name)
        return names

    def find_template(self, template_id: Any) -> Optional[ModelTemplate]:
        for template in self.templates:
            if str(template.id) == str(template_id):
                return template
        return None

    # =========================================================================
    # Serialization
    # =========================================================================

    def to_section(self) -> Dict[str, Any]:
        """
        JSON-ready section written to disk.

        ``directory_model`` is stored empty while it points at the default
        location so a relocated data directory is picked up on next load.
        """
        section = self.model_dump(mode="json")
        if self.directory_model == str(self.default_model_directory):
            section["directory_model"] = ""
        return section


# Merge authority of every persisted AppSettings field, in merge order.
SETTINGS_FIELD_AUTHORITY: Tuple[Tuple[str, FieldAuthority], ...] = (
    ("schema_version", FieldAuthority.DEFAULT),
    ("has_exited", FieldAuthority.DEFAULT),
    ("is_update_enabled", FieldAuthority.USER),
    ("is_app_warning_accepted", FieldAuthority.USER),
    ("ui_mode", FieldAuthority.USER),
    ("model_cache_mode", FieldAuthority.USER),
    ("render_mode", FieldAuthority.USER),
    ("use_legacy_device_detection", FieldAuthority.USER),
    ("auto_save_image", FieldAuthority.USER),
    ("auto_save_video", FieldAuthority.USER),
    ("is_preview_enabled", FieldAuthority.USER),
    ("is_model_evaluation_mode_enabled", FieldAuthority.USER),
    ("directory_model", FieldAuthority.USER),
    ("directory_image", FieldAuthority.USER),
    ("directory_image_save", FieldAuthority.USER),
    ("directory_image_auto_save", FieldAuthority.USER),
    ("directory_video", FieldAuthority.USER),
    ("directory_video_save", FieldAuthority.USER),
    ("directory_video_auto_save", FieldAuthority.USER),
    ("batch_delay", FieldAuthority.USER),
    ("realtime_refresh_rate", FieldAuthority.USER),
    ("realtime_history_enabled", FieldAuthority.USER),
    ("history_max_items", FieldAuthority.USER),
    ("default_zoom_direction", FieldAuthority.USER),
    ("supported_providers", FieldAuthority.USER),
    ("default_device_id", FieldAuthority.USER),
    ("default_provider", FieldAuthority.USER),
    ("prompts", FieldAuthority.USER),
    ("ez_mode_profile", FieldAuthority.DEFAULT),
    ("hardware_profiles", FieldAuthority.DEFAULT),
    ("templates", FieldAuthority.DEFAULT),
    ("upscale_model_sets", FieldAuthority.USER),
    ("stable_diffusion_model_sets", FieldAuthority.USER),
    ("control_net_model_sets", FieldAuthority.USER),
    ("feature_extractor_model_sets", FieldAuthority.USER),
)


def fields_with_authority(authority: FieldAuthority) -> Iterable[str]:
    return (name for name, tag in SETTINGS_FIELD_AUTHORITY if tag == authority)
