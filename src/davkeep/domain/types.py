"""Domain types for the backup/restore pipeline.

This module contains pure data types without IO or infrastructure
dependencies. JSON field names follow the camelCase wire format used in
backup_meta.json and in the preview handed to UI layers.
"""

import platform
import time
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, TypedDict

from packaging.version import InvalidVersion, Version

from davkeep.constants import ARCHIVE_FORMAT_VERSION

_PLATFORM_NAMES = {"darwin": "macos"}


def current_platform() -> str:
    """Return the lowercase OS name ("linux", "macos", "windows")."""
    system = platform.system().lower()
    return _PLATFORM_NAMES.get(system, system)


@dataclass(frozen=True)
class BackupMetadata:
    """Metadata embedded as backup_meta.json in every archive."""

    version: str
    device_id: str
    device_name: str
    timestamp: int
    platform: str

    @classmethod
    def create(
        cls,
        device_id: str,
        device_name: str,
        timestamp_ms: int | None = None,
    ) -> "BackupMetadata":
        """Build fresh metadata for a backup taken now.

        Args:
            device_id: Stable identifier of the device taking the backup
            device_name: Human-readable device name
            timestamp_ms: Override for the creation time (ms since epoch)

        Returns:
            New BackupMetadata instance

        """
        if timestamp_ms is None:
            timestamp_ms = time.time_ns() // 1_000_000
        return cls(
            version=ARCHIVE_FORMAT_VERSION,
            device_id=device_id,
            device_name=device_name,
            timestamp=timestamp_ms,
            platform=current_platform(),
        )

    def to_dict(self) -> dict[str, Any]:
        """Return the camelCase JSON representation."""
        return {
            "version": self.version,
            "deviceId": self.device_id,
            "deviceName": self.device_name,
            "timestamp": self.timestamp,
            "platform": self.platform,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "BackupMetadata":
        """Parse the camelCase JSON representation.

        Raises:
            ValueError: If a field is missing or has the wrong type

        """
        try:
            timestamp = data["timestamp"]
            if isinstance(timestamp, bool) or not isinstance(timestamp, int):
                msg = f"timestamp must be an integer, got {timestamp!r}"
                raise ValueError(msg)
            return cls(
                version=str(data["version"]),
                device_id=str(data["deviceId"]),
                device_name=str(data["deviceName"]),
                timestamp=timestamp,
                platform=str(data["platform"]),
            )
        except (KeyError, TypeError) as e:
            msg = f"Invalid backup metadata: {e}"
            raise ValueError(msg) from e

    def is_supported_format(self) -> bool:
        """Check that this release can read the archive layout.

        Archives written with the same major format version are readable.
        """
        try:
            archive = Version(self.version)
        except InvalidVersion:
            return False
        return archive.major == Version(ARCHIVE_FORMAT_VERSION).major


@dataclass(frozen=True)
class CloudBackupFile:
    """A backup archive listed on the WebDAV server."""

    name: str
    date: str
    size: str

    def to_dict(self) -> dict[str, str]:
        """Return the JSON representation."""
        return {"name": self.name, "date": self.date, "size": self.size}


@dataclass(frozen=True)
class RestorePreview:
    """A downloaded archive waiting for the user to confirm the restore."""

    temp_file_path: Path
    metadata: BackupMetadata | None = None

    def to_dict(self) -> dict[str, Any]:
        """Return the camelCase JSON representation."""
        return {
            "tempFilePath": str(self.temp_file_path),
            "metadata": self.metadata.to_dict() if self.metadata else None,
        }


class PipelineState(Enum):
    """States of a backup or restore operation."""

    IDLE = "idle"
    PREPARING = "preparing"
    TRANSFERRING = "transferring"
    PREVIEWED = "previewed"
    RESTORING = "restoring"
    COMPLETE = "complete"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        """Whether no further transition is possible."""
        return self in (PipelineState.COMPLETE, PipelineState.FAILED)


# =============================================================================
# Configuration types
# =============================================================================


class WebDAVConfig(TypedDict):
    """WebDAV connection settings (the password lives in the vault)."""

    url: str
    username: str


class DeviceConfig(TypedDict):
    """Identity written into backup metadata."""

    name: str
    id: str


class NetworkConfig(TypedDict):
    """Network configuration."""

    timeout_seconds: int


class RestoreConfig(TypedDict):
    """Database quiesce timing used before a restore overwrites files."""

    quiesce_grace_ms: int
    release_timeout_seconds: int


class DirectoryConfig(TypedDict):
    """Directory configuration.

    ``tmp`` is None when the system temporary directory should be used.
    """

    app_config: Path
    tmp: Path | None


class GlobalConfig(TypedDict):
    """Complete settings.conf contents."""

    config_version: str
    log_level: str
    console_log_level: str
    webdav: WebDAVConfig
    device: DeviceConfig
    network: NetworkConfig
    restore: RestoreConfig
    directory: DirectoryConfig
