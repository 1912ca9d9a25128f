"""Utility modules for ConfigVault."""

from configvault.utils.logger import logger, setup_logger
from configvault.utils.platform import get_data_dir

__all__ = ["logger", "setup_logger", "get_data_dir"]
