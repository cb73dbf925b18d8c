"""Tests for the console progress reporter."""

import io

import pytest

from davkeep.core.protocols import ProgressMessage, ProgressReporter
from davkeep.ui import ConsoleProgressReporter


class TestConsoleProgressReporter:
    """Tests for ConsoleProgressReporter."""

    def test_satisfies_protocol(self) -> None:
        """The reporter can be injected as a ProgressReporter."""
        reporter = ConsoleProgressReporter(io.StringIO())
        assert isinstance(reporter, ProgressReporter)

    @pytest.mark.asyncio
    async def test_prints_stage_labels(self) -> None:
        """Each new stage prints a labelled line."""
        stream = io.StringIO()
        reporter = ConsoleProgressReporter(stream)

        await reporter.report(ProgressMessage.PREPARING, 10)
        await reporter.report(ProgressMessage.COMPLETE, 100)

        assert stream.getvalue().splitlines() == [
            "[ 10%] Preparing",
            "[100%] Done",
        ]

    @pytest.mark.asyncio
    async def test_throttles_same_stage(self) -> None:
        """Small steps within one stage are not printed."""
        stream = io.StringIO()
        reporter = ConsoleProgressReporter(stream, step=10)

        for value in (20, 22, 25, 31, 45):
            await reporter.report(ProgressMessage.DOWNLOADING, value)

        assert stream.getvalue().splitlines() == [
            "[ 20%] Downloading",
            "[ 31%] Downloading",
            "[ 45%] Downloading",
        ]

    @pytest.mark.asyncio
    async def test_unknown_stage_printed_verbatim(self) -> None:
        """Unknown stage ids fall back to the raw id."""
        stream = io.StringIO()
        await ConsoleProgressReporter(stream).report("custom.stage", 5)

        assert stream.getvalue() == "[  5%] custom.stage\n"
