"""Base command handler for davkeep CLI commands.

This module provides the abstract base class that all command handlers
inherit from, ensuring consistent interface and shared functionality
across commands.
"""

from abc import ABC, abstractmethod
from argparse import Namespace
from dataclasses import dataclass

import aiohttp

from davkeep.config import SettingsManager
from davkeep.core.backup import BackupOrchestrator
from davkeep.core.protocols import ProgressReporter
from davkeep.core.vault import CredentialVault
from davkeep.core.webdav import WebDAVClient
from davkeep.domain.types import GlobalConfig
from davkeep.exceptions import DavKeepError
from davkeep.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Connection:
    """WebDAV account resolved from arguments and settings."""

    url: str
    username: str
    password: str | None


class BaseCommandHandler(ABC):
    """Abstract base class for all command handlers.

    CLIRunner acts as the composition root, creating the settings manager,
    the vault and the progress reporter and injecting them here. Handlers
    that talk to the server open their own HTTP session per command.
    """

    def __init__(
        self,
        settings_manager: SettingsManager,
        global_config: GlobalConfig,
        vault: CredentialVault,
        progress_reporter: ProgressReporter | None = None,
    ) -> None:
        """Initialize the command handler with shared dependencies.

        Args:
            settings_manager: Reads and writes settings.conf
            global_config: Loaded settings
            vault: Local password vault
            progress_reporter: Receives pipeline progress events

        """
        self.settings_manager = settings_manager
        self.global_config = global_config
        self.vault = vault
        self.progress_reporter = progress_reporter

    @abstractmethod
    async def execute(self, args: Namespace) -> None:
        """Execute the command with the given arguments.

        Args:
            args: Parsed command-line arguments

        This method must be implemented by all concrete command handlers.

        """

    def _connection(self, args: Namespace) -> Connection:
        """Resolve the WebDAV account, arguments over settings.

        Raises:
            DavKeepError: If no URL or username is known

        """
        webdav = self.global_config["webdav"]
        url = getattr(args, "url", None) or webdav["url"]
        username = getattr(args, "username", None) or webdav["username"]
        if not url:
            msg = "no WebDAV URL; pass --url or run 'davkeep config --set-url'"
            raise DavKeepError(msg)
        if not username:
            msg = (
                "no WebDAV username; pass --username or run "
                "'davkeep config --set-username'"
            )
            raise DavKeepError(msg)
        return Connection(url, username, getattr(args, "password", None))

    def _build_orchestrator(
        self, session: aiohttp.ClientSession | None = None
    ) -> BackupOrchestrator:
        """Create an orchestrator from the settings.

        Without a session the orchestrator only supports local operations.
        """
        directory = self.global_config["directory"]
        restore = self.global_config["restore"]
        return BackupOrchestrator(
            config_dir=directory["app_config"],
            webdav=(
                WebDAVClient(session, self.progress_reporter)
                if session is not None
                else None
            ),
            vault=self.vault,
            progress_reporter=self.progress_reporter,
            temp_dir=directory["tmp"],
            quiesce_grace=restore["quiesce_grace_ms"] / 1000,
            release_timeout=float(restore["release_timeout_seconds"]),
        )

    @staticmethod
    def _confirm(prompt: str) -> bool:
        """Ask a yes/no question, defaulting to no."""
        try:
            answer = input(f"{prompt} [y/N]: ")
        except EOFError:
            return False
        return answer.strip().lower() in ("y", "yes")
