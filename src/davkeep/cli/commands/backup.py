"""Backup command coordinator.

Thin coordinator that delegates to BackupOrchestrator and displays
results.
"""

from argparse import Namespace

from davkeep.core.http_session import create_http_session
from davkeep.logger import get_logger

from .base import BaseCommandHandler

logger = get_logger(__name__)


class BackupHandler(BaseCommandHandler):
    """Creates a cloud backup of the configuration directory."""

    async def execute(self, args: Namespace) -> None:
        """Execute the backup command."""
        connection = self._connection(args)
        device = self.global_config["device"]

        async with create_http_session(self.global_config) as session:
            orchestrator = self._build_orchestrator(session)
            filename = await orchestrator.create_cloud_backup(
                connection.url,
                connection.username,
                connection.password,
                device["name"],
                device["id"],
            )
        print(f"✅ Uploaded {filename}")
