"""Check command handler: verify the WebDAV account."""

from argparse import Namespace

from davkeep.core.http_session import create_http_session
from davkeep.logger import get_logger

from .base import BaseCommandHandler

logger = get_logger(__name__)


class CheckHandler(BaseCommandHandler):
    """Handler for the check command."""

    async def execute(self, args: Namespace) -> None:
        """Execute the check command."""
        connection = self._connection(args)
        async with create_http_session(self.global_config) as session:
            orchestrator = self._build_orchestrator(session)
            await orchestrator.check_connection(
                connection.url, connection.username, connection.password
            )
        logger.info("Connection check succeeded for %s", connection.url)
        print(f"✅ Connected to {connection.url} as {connection.username}")
