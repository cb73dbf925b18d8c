"""Backup module for configuration backups and restores.

Provides the archive codec, the operation state machine and the
orchestrator sequencing cloud and local backup operations.

Public API:
    - BackupOrchestrator: Main service for backup operations
    - OperationState: State tracker of a single operation
    - pack_directory / unpack_archive / read_metadata: archive codec
"""

from davkeep.core.backup.archive import (
    enclosed_path,
    is_sensitive_path,
    pack_directory,
    read_metadata,
    unpack_archive,
)
from davkeep.core.backup.orchestrator import (
    BackupOrchestrator,
    build_backup_filename,
)
from davkeep.core.backup.state import OperationState

__all__ = [
    "BackupOrchestrator",
    "OperationState",
    "build_backup_filename",
    "enclosed_path",
    "is_sensitive_path",
    "pack_directory",
    "read_metadata",
    "unpack_archive",
]
