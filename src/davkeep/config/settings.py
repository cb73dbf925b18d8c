"""Settings manager for the INI configuration file."""

import configparser
import socket
import uuid
from pathlib import Path

from davkeep.config.parser import ConfigCommentManager
from davkeep.config.paths import Paths
from davkeep.constants import (
    CONFIG_FILE_NAME,
    CONFIG_VERSION,
    DEFAULT_CONSOLE_LOG_LEVEL,
    DEFAULT_LOG_LEVEL,
    DEFAULT_QUIESCE_GRACE_MS,
    DEFAULT_RELEASE_TIMEOUT_SECONDS,
    DEFAULT_TIMEOUT_SECONDS,
    KEY_CONFIG_VERSION,
    KEY_CONSOLE_LOG_LEVEL,
    KEY_LOG_LEVEL,
    SECTION_DEFAULT,
    SECTION_DEVICE,
    SECTION_DIRECTORY,
    SECTION_NETWORK,
    SECTION_RESTORE,
    SECTION_WEBDAV,
)
from davkeep.domain.types import GlobalConfig
from davkeep.logger import get_logger

logger = get_logger(__name__)

# Type alias for raw INI config dictionary
RawConfigDict = dict[str, str | dict[str, str]]

_SECTIONS = (
    SECTION_WEBDAV,
    SECTION_DEVICE,
    SECTION_NETWORK,
    SECTION_RESTORE,
    SECTION_DIRECTORY,
)

_INT_DEFAULTS: dict[tuple[str, str], int] = {
    (SECTION_NETWORK, "timeout_seconds"): DEFAULT_TIMEOUT_SECONDS,
    (SECTION_RESTORE, "quiesce_grace_ms"): DEFAULT_QUIESCE_GRACE_MS,
    (SECTION_RESTORE, "release_timeout_seconds"): (
        DEFAULT_RELEASE_TIMEOUT_SECONDS
    ),
}


class SettingsManager:
    """Reads and writes settings.conf."""

    def __init__(self, config_dir: Path | None = None) -> None:
        """Initialize settings manager.

        Args:
            config_dir: Configuration directory path
                (defaults to Paths.CONFIG_DIR)

        """
        self.config_dir = config_dir or Paths.CONFIG_DIR
        self.settings_file = self.config_dir / CONFIG_FILE_NAME

    def get_default_config(self) -> RawConfigDict:
        """Get default configuration values.

        A new device id is generated on every call; it only sticks once
        the defaults are written to disk.
        """
        return {
            KEY_CONFIG_VERSION: CONFIG_VERSION,
            KEY_LOG_LEVEL: DEFAULT_LOG_LEVEL,
            KEY_CONSOLE_LOG_LEVEL: DEFAULT_CONSOLE_LOG_LEVEL,
            SECTION_WEBDAV: {"url": "", "username": ""},
            SECTION_DEVICE: {
                "name": socket.gethostname() or "device",
                "id": str(uuid.uuid4()),
            },
            SECTION_NETWORK: {"timeout_seconds": str(DEFAULT_TIMEOUT_SECONDS)},
            SECTION_RESTORE: {
                "quiesce_grace_ms": str(DEFAULT_QUIESCE_GRACE_MS),
                "release_timeout_seconds": str(
                    DEFAULT_RELEASE_TIMEOUT_SECONDS
                ),
            },
            SECTION_DIRECTORY: {
                "app_config": str(Paths.app_config_dir(self.config_dir)),
                "tmp": "",
            },
        }

    def _create_parser(self) -> configparser.ConfigParser:
        return configparser.ConfigParser(
            inline_comment_prefixes=("#", ";"),
            interpolation=None,
        )

    def _parser_from_defaults(
        self, defaults: RawConfigDict
    ) -> configparser.ConfigParser:
        """Create a ConfigParser populated with the defaults."""
        config = self._create_parser()
        flat_defaults = {
            key: str(value)
            for key, value in defaults.items()
            if not isinstance(value, dict)
        }
        config.read_dict({SECTION_DEFAULT: flat_defaults})

        for key, value in defaults.items():
            if isinstance(value, dict):
                config.add_section(key)
                for subkey, subvalue in value.items():
                    config.set(key, subkey, str(subvalue))

        return config

    def load(self) -> GlobalConfig:
        """Load configuration, writing a default file on first use.

        Returns:
            Parsed configuration with user values over defaults

        """
        config = self._parser_from_defaults(self.get_default_config())

        if self.settings_file.exists():
            try:
                config.read(self.settings_file, encoding="utf-8")
            except configparser.Error as e:
                logger.warning(
                    "Ignoring unreadable settings file %s: %s",
                    self.settings_file,
                    e,
                )
            return self._convert(config)

        loaded = self._convert(config)
        self.save(loaded)
        return loaded

    def save(self, config: GlobalConfig) -> None:
        """Save configuration to settings.conf with explanatory comments.

        Args:
            config: Configuration to save

        """
        self.config_dir.mkdir(parents=True, exist_ok=True)
        comments = ConfigCommentManager()
        section_comments = comments.get_section_comments()

        sections: dict[str, dict[str, str]] = {
            SECTION_WEBDAV: {
                "url": config["webdav"]["url"],
                "username": config["webdav"]["username"],
            },
            SECTION_DEVICE: {
                "name": config["device"]["name"],
                "id": config["device"]["id"],
            },
            SECTION_NETWORK: {
                "timeout_seconds": str(config["network"]["timeout_seconds"]),
            },
            SECTION_RESTORE: {
                "quiesce_grace_ms": str(config["restore"]["quiesce_grace_ms"]),
                "release_timeout_seconds": str(
                    config["restore"]["release_timeout_seconds"]
                ),
            },
            SECTION_DIRECTORY: {
                "app_config": str(config["directory"]["app_config"]),
                "tmp": str(config["directory"]["tmp"] or ""),
            },
        }

        with self.settings_file.open("w", encoding="utf-8") as f:
            f.write(comments.get_file_header())
            f.write(section_comments[SECTION_DEFAULT])
            f.write(f"[{SECTION_DEFAULT}]\n")
            f.write(f"{KEY_CONFIG_VERSION} = {config['config_version']}\n")
            f.write(f"{KEY_LOG_LEVEL} = {config['log_level']}\n")
            f.write(
                f"{KEY_CONSOLE_LOG_LEVEL} = {config['console_log_level']}\n"
            )
            for section in _SECTIONS:
                f.write(section_comments[section])
                f.write(f"[{section}]\n")
                for key, value in sections[section].items():
                    f.write(f"{key} = {value}\n")

        logger.debug("Saved settings to %s", self.settings_file)

    def set_webdav(self, url: str, username: str) -> GlobalConfig:
        """Persist the WebDAV URL and username.

        Returns:
            The updated configuration

        """
        config = self.load()
        config["webdav"] = {"url": url.strip(), "username": username}
        self.save(config)
        return config

    def _convert(self, config: configparser.ConfigParser) -> GlobalConfig:
        """Convert the parser contents into a typed GlobalConfig."""
        def get_int(section: str, key: str) -> int:
            raw = config.get(section, key)
            try:
                return int(raw)
            except ValueError:
                fallback = _INT_DEFAULTS[section, key]
                logger.warning(
                    "Invalid integer for [%s] %s: %r, using default %s",
                    section,
                    key,
                    raw,
                    fallback,
                )
                return fallback

        tmp_dir = config.get(SECTION_DIRECTORY, "tmp").strip()

        return {
            "config_version": config.get(SECTION_DEFAULT, KEY_CONFIG_VERSION),
            "log_level": config.get(SECTION_DEFAULT, KEY_LOG_LEVEL).upper(),
            "console_log_level": config.get(
                SECTION_DEFAULT, KEY_CONSOLE_LOG_LEVEL
            ).upper(),
            "webdav": {
                "url": config.get(SECTION_WEBDAV, "url").strip(),
                "username": config.get(SECTION_WEBDAV, "username").strip(),
            },
            "device": {
                "name": config.get(SECTION_DEVICE, "name").strip(),
                "id": config.get(SECTION_DEVICE, "id").strip(),
            },
            "network": {
                "timeout_seconds": get_int(SECTION_NETWORK, "timeout_seconds"),
            },
            "restore": {
                "quiesce_grace_ms": get_int(
                    SECTION_RESTORE, "quiesce_grace_ms"
                ),
                "release_timeout_seconds": get_int(
                    SECTION_RESTORE, "release_timeout_seconds"
                ),
            },
            "directory": {
                "app_config": Paths.expand_path(
                    config.get(SECTION_DIRECTORY, "app_config")
                ),
                "tmp": Paths.expand_path(tmp_dir) if tmp_dir else None,
            },
        }
