"""Console formatters for the davkeep logging system.

- ColoredConsoleFormatter: colors the level name with ANSI codes
- SimpleConsoleFormatter: message text only
- HybridConsoleFormatter: plain INFO lines, structured everything else

INFO records are what the CLI shows to the user (progress stages, listing
rows), so they are printed bare; warnings and errors keep their context.
"""

import logging

from davkeep.constants import LOG_COLORS


class ColoredConsoleFormatter(logging.Formatter):
    """Console formatter that colors the level name.

    The record's levelname is swapped only for the duration of format()
    so other handlers sharing the record see the original value.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format the record with a colored level name.

        Args:
            record: The log record to format

        Returns:
            Formatted log line

        """
        if record.levelname in LOG_COLORS:
            color = LOG_COLORS[record.levelname]
            reset = LOG_COLORS["RESET"]

            original_levelname = record.levelname
            record.levelname = f"{color}{record.levelname}{reset}"
            try:
                return super().format(record)
            finally:
                record.levelname = original_levelname

        return super().format(record)


class SimpleConsoleFormatter(logging.Formatter):
    """Formatter that outputs only the message content."""

    def format(self, record: logging.LogRecord) -> str:
        """Return the rendered message without metadata."""
        return record.getMessage()


class HybridConsoleFormatter(logging.Formatter):
    """Simple format for INFO, colored structured format for other levels.

    Example Output:
        INFO:     "Uploading backup..."
        WARNING:  "12:30:45 - davkeep.core.vault - WARNING - Legacy blob"
    """

    def __init__(
        self,
        fmt: str | None = None,
        datefmt: str | None = None,
    ) -> None:
        """Initialize with the structured format used for non-INFO records.

        Args:
            fmt: Format string for structured messages
            datefmt: Date format string for timestamps

        """
        super().__init__(fmt, datefmt)
        self._simple_formatter = SimpleConsoleFormatter()
        self._colored_formatter = ColoredConsoleFormatter(fmt, datefmt)

    def format(self, record: logging.LogRecord) -> str:
        """Pick the simple or structured format by level."""
        if record.levelno == logging.INFO:
            return self._simple_formatter.format(record)
        return self._colored_formatter.format(record)
