"""Restore command coordinator.

Downloads a cloud backup into a preview, shows what it contains and, once
confirmed, applies it over the configuration directory.
"""

from argparse import Namespace

from davkeep.core.http_session import create_http_session
from davkeep.logger import get_logger

from .base import BaseCommandHandler
from .helpers import format_preview

logger = get_logger(__name__)

RESTART_NOTICE = "Restart applications using this configuration to load it."


class RestoreHandler(BaseCommandHandler):
    """Handler for the restore command."""

    async def execute(self, args: Namespace) -> None:
        """Execute the restore command."""
        connection = self._connection(args)
        async with create_http_session(self.global_config) as session:
            orchestrator = self._build_orchestrator(session)
            preview = await orchestrator.prepare_cloud_restore(
                connection.url,
                connection.username,
                connection.password,
                args.name,
            )

            print(format_preview(preview))
            if not args.yes and not self._confirm(
                "Overwrite the current configuration with this backup?"
            ):
                preview.temp_file_path.unlink(missing_ok=True)
                logger.info("Restore of %s cancelled by user", args.name)
                print("⏹️  Restore cancelled")
                return

            await orchestrator.apply_restore_file(preview.temp_file_path)

        print(f"✅ Restored {args.name}")
        print(RESTART_NOTICE)
