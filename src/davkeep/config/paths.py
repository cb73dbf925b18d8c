"""Path constants and utilities for davkeep configuration.

``DAVKEEP_CONFIG_DIR`` relocates the whole configuration directory, which
is handy for keeping several WebDAV accounts apart.
"""

import os
from pathlib import Path

from davkeep.constants import (
    CONFIG_DIR_NAME,
    DEFAULT_APP_CONFIG_DIR_NAME,
    DEFAULT_CONFIG_SUBDIR,
)

CONFIG_DIR_ENV_VAR = "DAVKEEP_CONFIG_DIR"


def _default_config_dir() -> Path:
    override = os.getenv(CONFIG_DIR_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return Path.home() / CONFIG_DIR_NAME / DEFAULT_CONFIG_SUBDIR


class Paths:
    """Application paths and directory structure."""

    CONFIG_DIR = _default_config_dir()

    @staticmethod
    def app_config_dir(config_dir: Path) -> Path:
        """Default directory that backups capture and restores overwrite."""
        return config_dir / DEFAULT_APP_CONFIG_DIR_NAME

    @staticmethod
    def expand_path(path_str: str | Path) -> Path:
        """Expand ``~`` and resolve relative paths against the cwd.

        Example:
            >>> Paths.expand_path("~/config-backup.zip")
            PosixPath('/home/user/config-backup.zip')
        """
        return Path(path_str).expanduser().resolve(strict=False)
