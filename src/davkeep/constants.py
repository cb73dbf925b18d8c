"""Centralized constants module for davkeep.

This module serves as the single source of truth for all shared constants
across the davkeep codebase. Constants are organized by logical categories
and use typing.Final annotations to ensure immutability.

Usage:
    from davkeep.constants import BACKUP_META_FILENAME
"""

from typing import Final

# =============================================================================
# Configuration Constants
# =============================================================================

# Configuration version - single source of truth for config versioning
CONFIG_VERSION: Final[str] = "1.0.0"

# Configuration directory and file names
CONFIG_FILE_NAME: Final[str] = "settings.conf"

# Default config directory name under the user's home directory
CONFIG_DIR_NAME: Final[str] = ".config"

# Application-specific subdirectory under the config directory
DEFAULT_CONFIG_SUBDIR: Final[str] = "davkeep"

# Directory holding the configuration state that gets backed up
DEFAULT_APP_CONFIG_DIR_NAME: Final[str] = "app"

DEFAULT_LOG_LEVEL: Final[str] = "INFO"
DEFAULT_CONSOLE_LOG_LEVEL: Final[str] = "WARNING"
DEFAULT_TIMEOUT_SECONDS: Final[int] = 30
DEFAULT_QUIESCE_GRACE_MS: Final[int] = 500
DEFAULT_RELEASE_TIMEOUT_SECONDS: Final[int] = 10

# INI sections and keys
SECTION_DEFAULT: Final[str] = "DEFAULT"
SECTION_WEBDAV: Final[str] = "webdav"
SECTION_DEVICE: Final[str] = "device"
SECTION_NETWORK: Final[str] = "network"
SECTION_RESTORE: Final[str] = "restore"
SECTION_DIRECTORY: Final[str] = "directory"

KEY_CONFIG_VERSION: Final[str] = "config_version"
KEY_LOG_LEVEL: Final[str] = "log_level"
KEY_CONSOLE_LOG_LEVEL: Final[str] = "console_log_level"

ISO_DATETIME_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"

# =============================================================================
# Archive Constants
# =============================================================================

# Version of the archive layout written into backup_meta.json
ARCHIVE_FORMAT_VERSION: Final[str] = "1.0.0"

# Well-known metadata entry at the root of every archive
BACKUP_META_FILENAME: Final[str] = "backup_meta.json"

# Relative paths containing one of these markers never enter an archive
# and are never extracted from one
SENSITIVE_PATH_MARKERS: Final[tuple[str, ...]] = (
    ".webdav_secret",
    ".credentials",
)

# Cloud backup naming: backup_<device>_<YYYY-MM-DD_HHMMSS>.zip
BACKUP_FILE_PREFIX: Final[str] = "backup_"
BACKUP_FILE_SUFFIX: Final[str] = ".zip"
BACKUP_TIMESTAMP_FORMAT: Final[str] = "%Y-%m-%d_%H%M%S"

RESTORE_TEMP_PREFIX: Final[str] = "restore_temp_"

LOCAL_EXPORT_DEVICE_ID: Final[str] = "local_export"
LOCAL_EXPORT_DEVICE_NAME: Final[str] = "Local"

# =============================================================================
# Credential Vault Constants
# =============================================================================

VAULT_FILENAME: Final[str] = ".webdav_secret"

# Carries the sensitive marker so the key never leaves the machine
VAULT_KEY_FILENAME: Final[str] = ".webdav_secret.key"

VAULT_SENTINEL_PREFIX: Final[str] = "_SALT_"
VAULT_SENTINEL_SUFFIX: Final[str] = "_END_"

VAULT_KEYRING_SERVICE: Final[str] = "davkeep-vault-key"
VAULT_KEYRING_USERNAME: Final[str] = "fernet-key"

SECRET_FILE_MODE: Final[int] = 0o600

# =============================================================================
# WebDAV Constants
# =============================================================================

DAV_NAMESPACE: Final[str] = "DAV:"
DOWNLOAD_CHUNK_SIZE: Final[int] = 64 * 1024
UNKNOWN_LAST_MODIFIED: Final[str] = "Unknown"

# =============================================================================
# Logging Constants
# =============================================================================

# Rotate the log file once it grows past this size (bytes)
LOG_ROTATION_THRESHOLD_BYTES: Final[int] = 1024 * 1024  # 1 MB

# Number of backup files to keep for rotated logs
LOG_BACKUP_COUNT: Final[int] = 3

LOG_FILE_NAME: Final[str] = "davkeep.log"

# Console and file format strings used by the logger
LOG_CONSOLE_FORMAT: Final[str] = (
    "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
LOG_CONSOLE_DATE_FORMAT: Final[str] = "%H:%M:%S"
LOG_FILE_FORMAT: Final[str] = (
    "%(asctime)s - %(name)s - %(levelname)s - "
    "%(funcName)s:%(lineno)d - %(message)s"
)
LOG_FILE_DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"

# Color mapping for console output levels
LOG_COLORS: Final[dict[str, str]] = {
    "DEBUG": "\033[36m",  # Cyan
    "INFO": "\033[32m",  # Green
    "WARNING": "\033[33m",  # Yellow
    "ERROR": "\033[31m",  # Red
    "CRITICAL": "\033[35m",  # Magenta
    "RESET": "\033[0m",
}
