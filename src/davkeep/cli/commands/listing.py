"""List command handler: show cloud backups."""

from argparse import Namespace

import orjson

from davkeep.core.http_session import create_http_session

from .base import BaseCommandHandler
from .helpers import format_backup_table


class ListHandler(BaseCommandHandler):
    """Handler for the list command."""

    async def execute(self, args: Namespace) -> None:
        """Execute the list command."""
        connection = self._connection(args)
        async with create_http_session(self.global_config) as session:
            orchestrator = self._build_orchestrator(session)
            backups = await orchestrator.list_cloud_backups(
                connection.url, connection.username, connection.password
            )

        if args.json:
            payload = [backup.to_dict() for backup in backups]
            print(orjson.dumps(payload, option=orjson.OPT_INDENT_2).decode())
        else:
            print(format_backup_table(backups))
