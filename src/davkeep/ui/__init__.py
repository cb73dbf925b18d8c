"""User interface helpers for the command line."""

from .progress import STAGE_LABELS, ConsoleProgressReporter

__all__ = ["STAGE_LABELS", "ConsoleProgressReporter"]
