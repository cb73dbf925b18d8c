"""Logging utilities for davkeep.

Architecture:
    Application → QueueHandler → Queue → QueueListener Thread
                                              ↓
                                    Console + File Handlers

Rules:
    1. Always use: logger = get_logger(__name__)
    2. Never call logging.basicConfig()
    3. Never attach handlers to child loggers
    4. Use %-formatting in log calls, never f-strings

Environment Variables:
    DAVKEEP_LOG_DIR: Override the log directory (used by the test suite)
"""

from davkeep.logger.config import (
    update_logger_from_config as _update_config,
)
from davkeep.logger.formatters import (
    ColoredConsoleFormatter,
    HybridConsoleFormatter,
    SimpleConsoleFormatter,
)
from davkeep.logger.handlers import ConfigurationError
from davkeep.logger.logger import (
    clear_logger_state,
    flush_all_handlers,
    get_logger,
    setup_logging,
)
from davkeep.logger.state import get_state

__all__ = [
    "ColoredConsoleFormatter",
    "ConfigurationError",
    "HybridConsoleFormatter",
    "SimpleConsoleFormatter",
    "clear_logger_state",
    "flush_all_handlers",
    "get_logger",
    "setup_logging",
    "update_logger_from_config",
]


def update_logger_from_config() -> None:
    """Apply settings.conf log levels to the running handlers."""
    _update_config(get_state())
