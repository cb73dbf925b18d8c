"""Configuration management - settings file and path utilities.

This package provides:
- SettingsManager: INI configuration management (from settings.py)
- Paths: Path constants and utilities (from paths.py)
- ConfigCommentManager: settings.conf comments (from parser.py)
"""

from davkeep.config.parser import ConfigCommentManager
from davkeep.config.paths import Paths
from davkeep.config.settings import SettingsManager
from davkeep.domain.types import GlobalConfig

__all__ = [
    "ConfigCommentManager",
    "GlobalConfig",
    "Paths",
    "SettingsManager",
]
