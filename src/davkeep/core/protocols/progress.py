"""Progress reporting protocol for the backup/restore pipeline.

Pipeline components report ``(message, progress)`` events through an
injected ProgressReporter instead of talking to a UI directly:

- the orchestrator emits stage checkpoints (preparing, uploading, ...)
- the WebDAV client emits per-chunk download progress
- hosts plug in a console renderer, a GUI bridge or nothing at all

Delivery is fire-and-forget. A reporter that raises never fails the
operation it is reporting on; the error is logged and the event dropped.

Usage in pipeline services::

    from davkeep.core.protocols import (
        NullProgressReporter,
        ProgressMessage,
        ProgressReporter,
        emit_progress,
    )

    class Service:
        def __init__(self, progress_reporter: ProgressReporter | None = None):
            self.progress = progress_reporter or NullProgressReporter()

        async def run(self) -> None:
            await emit_progress(self.progress, ProgressMessage.PREPARING, 10)

"""

from __future__ import annotations

import inspect
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from davkeep.logger import get_logger

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

logger = get_logger(__name__)


class ProgressMessage(StrEnum):
    """Stage identifiers carried by progress events.

    The values are stable identifiers that UI layers translate into
    localized labels.
    """

    PREPARING = "backup.progress.preparing"
    COMPRESSING = "backup.progress.compressing"
    UPLOADING = "backup.progress.uploading"
    DOWNLOADING = "backup.progress.downloading"
    ANALYZING = "backup.progress.analyzing"
    EXTRACTING = "backup.progress.extracting"
    COMPLETE = "backup.progress.complete"


@dataclass(frozen=True)
class ProgressEvent:
    """A single progress notification."""

    message: str
    progress: float

    def to_dict(self) -> dict[str, object]:
        """Return the JSON payload shape used by UI bridges."""
        return {"message": self.message, "progress": self.progress}


@runtime_checkable
class ProgressReporter(Protocol):
    """Abstract sink for pipeline progress events."""

    def is_active(self) -> bool:
        """Check if progress reporting is currently active.

        Callers may skip per-chunk progress computation when inactive.

        Returns:
            True if events are consumed, False otherwise.

        """
        ...

    async def report(self, message: str, progress: float) -> None:
        """Receive a progress event.

        Args:
            message: Stage identifier (see ProgressMessage).
            progress: Overall completion percentage, 0.0 to 100.0.

        """
        ...


class NullProgressReporter:
    """No-op progress reporter for when progress display is disabled.

    Implements the null object pattern so pipeline code never checks for
    None before reporting.
    """

    def is_active(self) -> bool:
        """Always inactive."""
        return False

    async def report(self, message: str, progress: float) -> None:
        """Discard the event."""


class CallbackProgressReporter:
    """Adapts a plain callable into a ProgressReporter.

    The callback receives a ProgressEvent and may be a regular function or
    a coroutine function, e.g. a GUI bridge that forwards the event to a
    frontend channel.
    """

    def __init__(
        self,
        callback: Callable[[ProgressEvent], Awaitable[None] | None],
    ) -> None:
        """Initialize with the callable receiving events."""
        self._callback = callback

    def is_active(self) -> bool:
        """Always active."""
        return True

    async def report(self, message: str, progress: float) -> None:
        """Forward the event to the callback."""
        result = self._callback(ProgressEvent(message, progress))
        if inspect.isawaitable(result):
            await result


async def emit_progress(
    reporter: ProgressReporter,
    message: str,
    progress: float,
) -> None:
    """Send an event to the reporter without letting it fail the caller.

    Args:
        reporter: Destination reporter
        message: Stage identifier
        progress: Percentage, clamped to 0.0 - 100.0

    """
    if not reporter.is_active():
        return

    clamped = min(max(float(progress), 0.0), 100.0)
    try:
        await reporter.report(str(message), clamped)
    except Exception as e:  # noqa: BLE001
        logger.warning(
            "Dropped progress event %s (%.1f%%): %s", message, clamped, e
        )
