"""Command-line interface for davkeep."""

from davkeep.cli.parser import CLIParser
from davkeep.cli.runner import CLIRunner

__all__ = ["CLIParser", "CLIRunner"]
