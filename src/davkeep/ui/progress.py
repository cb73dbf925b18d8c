"""Console rendering of pipeline progress events."""

import sys
from typing import TextIO

from davkeep.core.protocols import ProgressMessage
from davkeep.logger import get_logger

logger = get_logger(__name__)

STAGE_LABELS: dict[str, str] = {
    ProgressMessage.PREPARING: "Preparing",
    ProgressMessage.COMPRESSING: "Compressing configuration",
    ProgressMessage.UPLOADING: "Uploading",
    ProgressMessage.DOWNLOADING: "Downloading",
    ProgressMessage.ANALYZING: "Analyzing archive",
    ProgressMessage.EXTRACTING: "Restoring files",
    ProgressMessage.COMPLETE: "Done",
}


class ConsoleProgressReporter:
    """Prints one line per stage change with the overall percentage.

    Consecutive events for the same stage (download chunks) only print
    when the integer percentage changes by at least ``step``.
    """

    def __init__(self, stream: TextIO | None = None, step: int = 10) -> None:
        """Initialize reporter.

        Args:
            stream: Output stream (defaults to stdout)
            step: Minimum percentage change within a stage to print again

        """
        self.stream = stream or sys.stdout
        self.step = step
        self._last_message: str | None = None
        self._last_progress = -1

    def is_active(self) -> bool:
        """Console output is always on."""
        return True

    async def report(self, message: str, progress: float) -> None:
        """Print the event when it is worth showing."""
        percent = int(progress)
        same_stage = message == self._last_message
        if same_stage and percent - self._last_progress < self.step:
            return

        self._last_message = message
        self._last_progress = percent
        label = STAGE_LABELS.get(message, message)
        logger.debug("Progress %s %d%%", message, percent)
        print(f"[{percent:3d}%] {label}", file=self.stream, flush=True)
