"""Public logging API: setup_logging, get_logger and test helpers."""

import atexit
import contextlib
import logging
import time
from pathlib import Path

from davkeep.logger.config import load_log_settings
from davkeep.logger.handlers import ROOT_LOGGER_NAME, setup_root_logger
from davkeep.logger.state import get_state

_FLUSH_TIMEOUT_SECONDS = 5.0


def flush_all_handlers() -> None:
    """Wait for the log queue to drain and flush every handler.

    Records may be dequeued by the listener thread but not yet written, so
    tests reading the log file call this first.
    """
    state = get_state()
    if state.queue_listener is None or state.log_queue is None:
        return

    start_time = time.monotonic()
    while not state.log_queue.empty():
        if time.monotonic() - start_time > _FLUSH_TIMEOUT_SECONDS:
            break
        time.sleep(0.01)

    time.sleep(0.1)

    for handler in state.queue_listener.handlers:
        with contextlib.suppress(OSError, ValueError):
            handler.flush()


def _cleanup_logging() -> None:
    """Stop the QueueListener on interpreter exit."""
    state = get_state()
    if state.queue_listener is not None:
        flush_all_handlers()
        state.queue_listener.stop()
        state.queue_listener = None


atexit.register(_cleanup_logging)


def setup_logging(
    name: str = ROOT_LOGGER_NAME,
    console_level: str | None = None,
    file_level: str | None = None,
    log_file: Path | None = None,
    enable_file_logging: bool = True,  # noqa: FBT001, FBT002
) -> logging.Logger:
    """Initialize the root logger once and return the named logger.

    Child loggers ("davkeep.core.webdav.client", ...) carry no handlers of
    their own and propagate to the root.

    Args:
        name: Logger name, typically __name__
        console_level: Console log level ("DEBUG", "INFO", "WARNING")
        file_level: File log level ("DEBUG", "INFO")
        log_file: Path to the log file
            (default: ~/.config/davkeep/logs/davkeep.log)
        enable_file_logging: Whether to enable file logging

    Returns:
        Logger instance

    Raises:
        ConfigurationError: If file logging setup fails

    """
    state = get_state()
    with state.lock:
        if not state.root_initialized:
            cfg_console, cfg_file, cfg_path = load_log_settings()
            setup_root_logger(
                state,
                console_level or cfg_console,
                file_level or cfg_file,
                log_file or cfg_path,
                enable_file_logging,
            )

    return logging.getLogger(name)


def get_logger(
    name: str = ROOT_LOGGER_NAME,
    enable_file_logging: bool = True,  # noqa: FBT001, FBT002
) -> logging.Logger:
    """Get a logger in the davkeep hierarchy.

    Usage:
        >>> logger = get_logger(__name__)
        >>> logger.info("Uploading %s", filename)

    Args:
        name: Logger name, typically __name__
        enable_file_logging: Whether to enable file logging (default: True)

    Returns:
        Configured logger instance

    """
    return setup_logging(name=name, enable_file_logging=enable_file_logging)


def clear_logger_state() -> None:
    """Tear down all logging state (tests only).

    Stops the listener, closes handlers and forgets every davkeep logger so
    the next get_logger() call starts from scratch.
    """
    state = get_state()
    with state.lock:
        if state.queue_listener is not None:
            flush_all_handlers()
            state.queue_listener.stop()
            state.queue_listener = None

        state.log_queue = None
        state.root_initialized = False
        state.config_applied = False

        for logger_name in list(logging.Logger.manager.loggerDict.keys()):
            if logger_name.startswith(ROOT_LOGGER_NAME):
                log_instance = logging.getLogger(logger_name)
                for handler in log_instance.handlers[:]:
                    handler.close()
                    log_instance.removeHandler(handler)
                logging.Logger.manager.loggerDict.pop(logger_name, None)
