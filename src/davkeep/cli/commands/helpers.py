"""Shared helpers for command handlers."""

from davkeep.domain.types import CloudBackupFile, RestorePreview
from davkeep.utils import format_timestamp_ms


def format_preview(preview: RestorePreview) -> str:
    """Describe the archive a restore would apply."""
    metadata = preview.metadata
    if metadata is None:
        return "⚠️  Archive has no readable metadata"
    lines = [
        f"Device:   {metadata.device_name} ({metadata.device_id})",
        f"Created:  {format_timestamp_ms(metadata.timestamp)}",
        f"Platform: {metadata.platform}",
        f"Format:   {metadata.version}",
    ]
    if not metadata.is_supported_format():
        lines.append(
            "⚠️  Archive format is newer than this release supports"
        )
    return "\n".join(lines)


def format_backup_table(backups: list[CloudBackupFile]) -> str:
    """Render a listing as aligned columns."""
    if not backups:
        return "No backups found"
    name_width = max(len("NAME"), *(len(b.name) for b in backups))
    size_width = max(len("SIZE"), *(len(b.size) for b in backups))
    lines = [f"{'NAME':<{name_width}}  {'SIZE':>{size_width}}  MODIFIED"]
    lines.extend(
        f"{b.name:<{name_width}}  {b.size:>{size_width}}  {b.date}"
        for b in backups
    )
    return "\n".join(lines)
