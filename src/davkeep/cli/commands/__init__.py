"""Command handlers for davkeep CLI.

This module contains all command handler implementations that provide
the core functionality for each CLI command.
"""

from .backup import BackupHandler
from .base import BaseCommandHandler, Connection
from .check import CheckHandler
from .config import ConfigHandler
from .delete import DeleteHandler
from .listing import ListHandler
from .local import ExportHandler, ImportHandler
from .password import PasswordHandler
from .restore import RestoreHandler

__all__ = [
    "BackupHandler",
    "BaseCommandHandler",
    "CheckHandler",
    "ConfigHandler",
    "Connection",
    "DeleteHandler",
    "ExportHandler",
    "ImportHandler",
    "ListHandler",
    "PasswordHandler",
    "RestoreHandler",
]
