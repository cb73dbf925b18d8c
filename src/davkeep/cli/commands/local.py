"""Export and import command handlers for local archives.

Both work on the filesystem only, so no HTTP session is opened.
"""

from argparse import Namespace
from pathlib import Path

from davkeep.config import Paths
from davkeep.logger import get_logger

from .base import BaseCommandHandler
from .helpers import format_preview
from .restore import RESTART_NOTICE

logger = get_logger(__name__)


class ExportHandler(BaseCommandHandler):
    """Writes a backup archive to a local file."""

    async def execute(self, args: Namespace) -> None:
        """Execute the export command."""
        target = Paths.expand_path(args.path)
        orchestrator = self._build_orchestrator()
        written = await orchestrator.export_local_backup(target)
        print(f"✅ Exported to {written}")


class ImportHandler(BaseCommandHandler):
    """Restores the configuration directory from a local archive."""

    async def execute(self, args: Namespace) -> None:
        """Execute the import command."""
        source: Path = Paths.expand_path(args.path)
        orchestrator = self._build_orchestrator()

        if args.yes:
            await orchestrator.import_local_backup(source)
        else:
            preview = await orchestrator.prepare_local_restore(source)
            print(format_preview(preview))
            if not self._confirm(
                "Overwrite the current configuration with this backup?"
            ):
                preview.temp_file_path.unlink(missing_ok=True)
                logger.info("Import of %s cancelled by user", source)
                print("⏹️  Import cancelled")
                return
            await orchestrator.apply_restore_file(preview.temp_file_path)

        print(f"✅ Imported {source}")
        print(RESTART_NOTICE)
