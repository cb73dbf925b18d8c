"""CLI argument parser for davkeep.

Handles parsing of command-line arguments and provides a clean
interface for defining CLI commands and their options.
"""

import argparse
from argparse import Namespace
from collections.abc import Sequence

from davkeep.domain.types import GlobalConfig


class CLIParser:
    """Command-line argument parser for davkeep."""

    def __init__(self, global_config: GlobalConfig) -> None:
        """Initialize the CLI parser with global configuration.

        Args:
            global_config: Loaded settings, used for help defaults.

        """
        self.global_config = global_config

    def parse_args(self, argv: Sequence[str] | None = None) -> Namespace:
        """Parse command-line arguments.

        Args:
            argv: Arguments to parse (defaults to sys.argv[1:]).

        Returns:
            Namespace: Parsed arguments namespace.

        """
        parser = self.build()
        return parser.parse_args(argv)

    def build(self) -> argparse.ArgumentParser:
        """Build the complete parser with all subcommands."""
        parser = self._create_main_parser()
        self._add_global_options(parser)
        self._add_subcommands(parser)
        return parser

    def _create_main_parser(self) -> argparse.ArgumentParser:
        return argparse.ArgumentParser(
            prog="davkeep",
            description="Back up and restore configuration via WebDAV",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog="""
Examples:
  # Store the WebDAV account once
  %(prog)s config --set-url https://dav.example.com/backups --set-username me
  %(prog)s password --save
  %(prog)s check

  # Cloud backups
  %(prog)s backup
  %(prog)s list
  %(prog)s restore backup_laptop_2024-05-01_120000.zip
  %(prog)s delete backup_laptop_2024-05-01_120000.zip

  # Local archives
  %(prog)s export ~/config-backup.zip
  %(prog)s import ~/config-backup.zip
            """,
        )

    def _add_global_options(self, parser: argparse.ArgumentParser) -> None:
        # Long form only to keep -v free for subcommands
        parser.add_argument(
            "--version",
            action="store_true",
            help="Show davkeep version and exit",
        )

    def _connection_parent(self) -> argparse.ArgumentParser:
        """Options shared by every command talking to the server."""
        webdav = self.global_config["webdav"]
        parent = argparse.ArgumentParser(add_help=False)
        group = parent.add_argument_group("connection")
        group.add_argument(
            "--url",
            help=(
                "WebDAV collection URL "
                f"(default: {webdav['url'] or 'unset'})"
            ),
        )
        group.add_argument(
            "--username",
            help="WebDAV username (default: from settings.conf)",
        )
        group.add_argument(
            "--password",
            help="WebDAV password (default: the saved password)",
        )
        return parent

    def _add_subcommands(self, parser: argparse.ArgumentParser) -> None:
        subparsers = parser.add_subparsers(
            dest="command", help="Available commands"
        )
        connection = self._connection_parent()

        subparsers.add_parser(
            "check",
            parents=[connection],
            help="Verify the WebDAV server accepts the credentials",
        )

        self._add_password_command(subparsers)

        subparsers.add_parser(
            "backup",
            parents=[connection],
            help="Archive the configuration and upload it",
        )

        list_parser = subparsers.add_parser(
            "list", parents=[connection], help="List cloud backups"
        )
        list_parser.add_argument(
            "--json", action="store_true", help="Print the listing as JSON"
        )

        delete_parser = subparsers.add_parser(
            "delete", parents=[connection], help="Delete a cloud backup"
        )
        delete_parser.add_argument("name", help="Backup file name")

        restore_parser = subparsers.add_parser(
            "restore",
            parents=[connection],
            help="Download a cloud backup and restore it",
        )
        restore_parser.add_argument("name", help="Backup file name")
        restore_parser.add_argument(
            "--yes", action="store_true", help="Skip the confirmation prompt"
        )

        export_parser = subparsers.add_parser(
            "export", help="Write a backup archive to a local file"
        )
        export_parser.add_argument("path", help="Destination .zip file")

        import_parser = subparsers.add_parser(
            "import", help="Restore from a local backup archive"
        )
        import_parser.add_argument("path", help="Source .zip file")
        import_parser.add_argument(
            "--yes", action="store_true", help="Skip the confirmation prompt"
        )

        self._add_config_command(subparsers)

    def _add_password_command(self, subparsers) -> None:
        password_parser = subparsers.add_parser(
            "password", help="Manage the locally saved WebDAV password"
        )
        action = password_parser.add_mutually_exclusive_group(required=True)
        action.add_argument(
            "--save",
            action="store_true",
            help="Prompt for the password and save it encrypted",
        )
        action.add_argument(
            "--clear", action="store_true", help="Remove the saved password"
        )
        action.add_argument(
            "--status",
            action="store_true",
            help="Show whether a password is saved",
        )

    def _add_config_command(self, subparsers) -> None:
        config_parser = subparsers.add_parser(
            "config", help="Show or change settings"
        )
        config_parser.add_argument(
            "--show", action="store_true", help="Print the current settings"
        )
        config_parser.add_argument(
            "--set-url", metavar="URL", help="Save the WebDAV collection URL"
        )
        config_parser.add_argument(
            "--set-username", metavar="NAME", help="Save the WebDAV username"
        )
