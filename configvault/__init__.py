"""ConfigVault - upgrade-safe settings and model template persistence"""

from configvault.__version__ import __version__, __version_info__

# Public API exports
from configvault.config import AppSettings, ModelTemplate, SettingsManager
from configvault.utils.logger import setup_logger

__all__ = [
    "__version__",
    "__version_info__",
    "AppSettings",
    "ModelTemplate",
    "SettingsManager",
    "setup_logger",
]
