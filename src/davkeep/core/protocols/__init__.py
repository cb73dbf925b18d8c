"""Core protocols for dependency injection and interface abstraction.

The pipeline depends on these abstractions rather than on a concrete UI or
database implementation.

Available protocols:
    ProgressReporter: Abstract interface for progress reporting
    DatabaseHandle: Host database closed before a restore
    ReleaseAwareDatabaseHandle: DatabaseHandle with a release signal

Usage:
    from davkeep.core.protocols import ProgressReporter, emit_progress

"""

from .database import (
    DatabaseHandle,
    NullDatabaseHandle,
    ReleaseAwareDatabaseHandle,
)
from .progress import (
    CallbackProgressReporter,
    NullProgressReporter,
    ProgressEvent,
    ProgressMessage,
    ProgressReporter,
    emit_progress,
)

__all__ = [
    "CallbackProgressReporter",
    "DatabaseHandle",
    "NullDatabaseHandle",
    "NullProgressReporter",
    "ProgressEvent",
    "ProgressMessage",
    "ProgressReporter",
    "ReleaseAwareDatabaseHandle",
    "emit_progress",
]
