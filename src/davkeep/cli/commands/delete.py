"""Delete command handler: remove a cloud backup."""

from argparse import Namespace

from davkeep.core.http_session import create_http_session
from davkeep.logger import get_logger

from .base import BaseCommandHandler

logger = get_logger(__name__)


class DeleteHandler(BaseCommandHandler):
    """Handler for the delete command."""

    async def execute(self, args: Namespace) -> None:
        """Execute the delete command."""
        connection = self._connection(args)
        async with create_http_session(self.global_config) as session:
            orchestrator = self._build_orchestrator(session)
            await orchestrator.delete_cloud_backup(
                connection.url,
                connection.username,
                connection.password,
                args.name,
            )
        print(f"🗑️  Deleted {args.name}")
