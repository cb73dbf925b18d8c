"""Bootstrap and settings-driven configuration of log levels.

Logger setup happens at import time of the first module that calls
get_logger(), long before settings.conf is read, so bootstrap defaults are
used first and update_logger_from_config() re-levels the handlers later.
"""

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TYPE_CHECKING

from davkeep.constants import (
    CONFIG_DIR_NAME,
    DEFAULT_CONFIG_SUBDIR,
    DEFAULT_CONSOLE_LOG_LEVEL,
    DEFAULT_LOG_LEVEL,
    LOG_FILE_NAME,
)

if TYPE_CHECKING:
    from davkeep.logger.state import _LoggerState

LOG_DIR_ENV_VAR = "DAVKEEP_LOG_DIR"


def load_log_settings() -> tuple[str, str, Path]:
    """Return bootstrap console level, file level and log path.

    DAVKEEP_LOG_DIR overrides the log directory; the test suite points it
    at a temporary directory so runs never touch ~/.config/davkeep/logs.

    Returns:
        Tuple of (console_level, file_level, log_path)

    """
    env_log_dir = os.getenv(LOG_DIR_ENV_VAR)
    if env_log_dir:
        log_path = Path(env_log_dir).expanduser() / LOG_FILE_NAME
    else:
        log_path = (
            Path.home()
            / CONFIG_DIR_NAME
            / DEFAULT_CONFIG_SUBDIR
            / "logs"
            / LOG_FILE_NAME
        )

    return DEFAULT_CONSOLE_LOG_LEVEL, DEFAULT_LOG_LEVEL, log_path


def apply_levels(
    state: "_LoggerState", console_level: str, file_level: str
) -> None:
    """Set handler levels on the running QueueListener.

    Args:
        state: Logger state object
        console_level: Level name for the console handler
        file_level: Level name for the file handler

    """
    if state.queue_listener is None:
        return

    for handler in state.queue_listener.handlers:
        if isinstance(handler, RotatingFileHandler):
            handler.setLevel(getattr(logging, file_level, logging.INFO))
        elif isinstance(handler, logging.StreamHandler):
            handler.setLevel(getattr(logging, console_level, logging.WARNING))


def update_logger_from_config(state: "_LoggerState") -> None:
    """Apply log levels from settings.conf to the running handlers.

    Args:
        state: Logger state object (from logger.state module)

    """
    # Late import: the config package itself logs through davkeep.logger
    from davkeep.config import SettingsManager  # noqa: PLC0415

    config = SettingsManager().load()
    apply_levels(state, config["console_log_level"], config["log_level"])
    state.config_applied = True
