"""Password command handler.

Saves, clears and reports the WebDAV password kept in the local vault.
"""

import asyncio
import getpass
import sys
from argparse import Namespace

from davkeep.logger import get_logger

from .base import BaseCommandHandler

logger = get_logger(__name__)


class PasswordHandler(BaseCommandHandler):
    """Handler for password command operations."""

    async def execute(self, args: Namespace) -> None:
        """Execute the password command."""
        if args.save:
            await self._save_password()
        elif args.clear:
            await asyncio.to_thread(self.vault.clear)
            print("🗑️  Saved password removed")
        elif args.status:
            stored = await asyncio.to_thread(self.vault.is_stored)
            print("🔐 Password saved" if stored else "No password saved")

    async def _save_password(self) -> None:
        """Prompt twice for the password and store it."""
        try:
            password, confirm = self._prompt_for_password()
        except (EOFError, KeyboardInterrupt):
            logger.error("Password input aborted by user")  # noqa: TRY400
            sys.exit(1)

        if not password:
            print("❌ Password must not be empty")
            sys.exit(1)
        if password != confirm:
            print("❌ Passwords do not match")
            sys.exit(1)

        await asyncio.to_thread(self.vault.save, password)
        logger.info("WebDAV password saved to vault")
        print("✅ Password saved")

    @staticmethod
    def _prompt_for_password() -> tuple[str, str]:
        """Prompt for the password and its confirmation."""
        password = getpass.getpass(prompt="WebDAV password (input hidden): ")
        confirm = getpass.getpass(prompt="Confirm password: ")
        return password, confirm
