"""CLI runner for davkeep.

Orchestrates the execution of CLI commands by routing parsed
arguments to the appropriate command handlers.
"""

import sys
from argparse import Namespace
from collections.abc import Sequence

from davkeep import __version__
from davkeep.cli.commands import (
    BackupHandler,
    BaseCommandHandler,
    CheckHandler,
    ConfigHandler,
    DeleteHandler,
    ExportHandler,
    ImportHandler,
    ListHandler,
    PasswordHandler,
    RestoreHandler,
)
from davkeep.cli.parser import CLIParser
from davkeep.config import SettingsManager
from davkeep.constants import VAULT_KEY_FILENAME
from davkeep.core.keystore import VaultKeyStore
from davkeep.core.vault import CredentialVault
from davkeep.exceptions import DavKeepError
from davkeep.logger import get_logger, update_logger_from_config
from davkeep.ui import ConsoleProgressReporter

logger = get_logger(__name__)


class CLIRunner:
    """CLI command runner and orchestrator."""

    def __init__(
        self, settings_manager: SettingsManager | None = None
    ) -> None:
        """Initialize CLI runner with shared dependencies.

        Loads settings, applies the configured log levels and prepares
        one handler per command.
        """
        self.settings_manager = settings_manager or SettingsManager()
        self.global_config = self.settings_manager.load()
        update_logger_from_config()

        config_dir = self.settings_manager.config_dir
        self.vault = CredentialVault(
            config_dir, VaultKeyStore(config_dir / VAULT_KEY_FILENAME)
        )
        self.progress_reporter = ConsoleProgressReporter()
        self._init_command_handlers()

    def _init_command_handlers(self) -> None:
        handler_types: dict[str, type[BaseCommandHandler]] = {
            "check": CheckHandler,
            "password": PasswordHandler,
            "backup": BackupHandler,
            "list": ListHandler,
            "delete": DeleteHandler,
            "restore": RestoreHandler,
            "export": ExportHandler,
            "import": ImportHandler,
            "config": ConfigHandler,
        }
        self.command_handlers: dict[str, BaseCommandHandler] = {
            name: handler_type(
                self.settings_manager,
                self.global_config,
                self.vault,
                self.progress_reporter,
            )
            for name, handler_type in handler_types.items()
        }

    async def run(self, argv: Sequence[str] | None = None) -> None:
        """Run the CLI application.

        Parses arguments, handles global flags, validates commands,
        and routes to the appropriate handler.

        Raises:
            SystemExit: With status 1 when the command fails.

        """
        try:
            parser = CLIParser(self.global_config)
            args = parser.parse_args(argv)

            if args.version:
                print(__version__)
                return

            if not args.command:
                print("❌ No command specified. Use --help.")
                sys.exit(1)

            await self._execute_command(args)

        except KeyboardInterrupt:
            print("\n⏹️  Operation cancelled by user")
            sys.exit(1)
        except DavKeepError as e:
            logger.error("Command failed: %s", e)  # noqa: TRY400
            print(f"❌ {e}")
            sys.exit(1)
        except Exception as e:
            logger.exception("Unexpected error")
            print(f"❌ Unexpected error: {e}")
            sys.exit(1)

    async def _execute_command(self, args: Namespace) -> None:
        """Execute the specified command with the appropriate handler."""
        handler = self.command_handlers.get(args.command)
        if handler is None:
            print(f"❌ Unknown command: {args.command}")
            sys.exit(1)

        logger.debug("Running command: %s", args.command)
        await handler.execute(args)
