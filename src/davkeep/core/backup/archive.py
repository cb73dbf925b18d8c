"""Zip archive codec for configuration backups.

This module provides functions for:
- Packing a configuration directory plus metadata into a zip archive
- Unpacking an archive onto a directory without escaping it
- Reading the embedded metadata for restore previews

Entries are stored uncompressed. Directories get explicit ``name/``
entries so empty directories survive a round trip. Paths containing a
sensitive marker never enter an archive and are never extracted from one.
"""

import re
import shutil
import time
import zipfile
import zlib
from pathlib import Path, PurePosixPath
from typing import BinaryIO

import orjson

from davkeep.constants import (
    BACKUP_META_FILENAME,
    SENSITIVE_PATH_MARKERS,
)
from davkeep.domain.types import BackupMetadata
from davkeep.exceptions import FileSystemError, FormatError, PathEncodingError
from davkeep.logger import get_logger

logger = get_logger(__name__)

FILE_PERMISSIONS = 0o755
_DIR_MODE = 0o040000
_MSDOS_DIRECTORY = 0x10
_ZIP_EPOCH = (1980, 1, 1, 0, 0, 0)
_DRIVE_LETTER = re.compile(r"^[A-Za-z]:")

# Raised by zipfile for damaged, encrypted or unsupported entries
_ENTRY_ERRORS = (
    zipfile.BadZipFile,
    zlib.error,
    EOFError,
    RuntimeError,
    NotImplementedError,
)


def is_sensitive_path(name: str) -> bool:
    """Check whether an archive path holds credential material."""
    return any(marker in name for marker in SENSITIVE_PATH_MARKERS)


def enclosed_path(dest_dir: Path, name: str) -> Path | None:
    """Resolve an archive entry name to a path inside dest_dir.

    Absolute names, drive letters and ``..`` segments are rejected, as are
    names that resolve outside ``dest_dir`` through an existing symlink.

    Args:
        dest_dir: Extraction root
        name: Entry name as stored in the archive

    Returns:
        Target path, or None when the entry would escape dest_dir

    """
    normalized = name.replace("\\", "/")
    if normalized.startswith("/") or _DRIVE_LETTER.match(normalized):
        return None

    parts = [part for part in PurePosixPath(normalized).parts if part != "."]
    if not parts or ".." in parts:
        return None

    candidate = dest_dir.joinpath(*parts)
    root = dest_dir.resolve()
    try:
        candidate.resolve().relative_to(root)
    except ValueError:
        return None
    return candidate


def _zip_time(path: Path) -> tuple[int, int, int, int, int, int]:
    stamp = time.localtime(path.stat().st_mtime)[:6]
    return max(stamp, _ZIP_EPOCH)


def _arcname(source_dir: Path, path: Path) -> str:
    name = path.relative_to(source_dir).as_posix()
    try:
        name.encode("utf-8")
    except UnicodeEncodeError as e:
        msg = f"path is not valid UTF-8: {e}"
        raise PathEncodingError(msg, target=str(path)) from e
    return name


def _iter_tree(directory: Path) -> list[Path]:
    """Return every path below directory, parents before children."""
    paths: list[Path] = []
    for child in sorted(directory.iterdir()):
        paths.append(child)
        if child.is_dir() and not child.is_symlink():
            paths.extend(_iter_tree(child))
    return paths


def _write_metadata(
    archive: zipfile.ZipFile, metadata: BackupMetadata
) -> None:
    info = zipfile.ZipInfo(
        BACKUP_META_FILENAME, time.localtime(metadata.timestamp / 1000)[:6]
    )
    info.compress_type = zipfile.ZIP_STORED
    info.external_attr = FILE_PERMISSIONS << 16
    archive.writestr(
        info, orjson.dumps(metadata.to_dict(), option=orjson.OPT_INDENT_2)
    )


def pack_directory(
    source_dir: Path,
    writer: BinaryIO,
    metadata: BackupMetadata,
) -> int:
    """Write source_dir and its metadata as a zip archive.

    Args:
        source_dir: Directory whose contents are archived
        writer: Seekable binary stream receiving the archive
        metadata: Metadata stored as backup_meta.json

    Returns:
        Number of file and directory entries packed (metadata excluded)

    Raises:
        FileSystemError: If the source cannot be read
        PathEncodingError: If a path cannot be stored as UTF-8 text

    """
    if not source_dir.is_dir():
        msg = "source directory does not exist"
        raise FileSystemError(msg, target=str(source_dir))

    packed = 0
    try:
        with zipfile.ZipFile(writer, "w", zipfile.ZIP_STORED) as archive:
            _write_metadata(archive, metadata)

            for path in _iter_tree(source_dir):
                name = _arcname(source_dir, path)
                if is_sensitive_path(name):
                    logger.debug("Skipping sensitive path: %s", name)
                    continue
                if name == BACKUP_META_FILENAME:
                    logger.warning(
                        "Skipping %s in source, it would shadow the "
                        "archive metadata",
                        name,
                    )
                    continue

                if path.is_dir():
                    if path.is_symlink():
                        logger.warning("Skipping directory symlink: %s", name)
                        continue
                    info = zipfile.ZipInfo(f"{name}/", _zip_time(path))
                    info.external_attr = (
                        (_DIR_MODE | FILE_PERMISSIONS) << 16
                    ) | _MSDOS_DIRECTORY
                    archive.writestr(info, b"")
                else:
                    info = zipfile.ZipInfo(name, _zip_time(path))
                    info.compress_type = zipfile.ZIP_STORED
                    info.external_attr = FILE_PERMISSIONS << 16
                    with (
                        path.open("rb") as src,
                        archive.open(info, "w") as dst,
                    ):
                        shutil.copyfileobj(src, dst)
                packed += 1
    except OSError as e:
        raise FileSystemError(str(e), target=str(source_dir)) from e

    logger.debug("Packed %d entries from %s", packed, source_dir)
    return packed


def unpack_archive(reader: BinaryIO, dest_dir: Path) -> int:
    """Extract an archive onto dest_dir, overwriting existing files.

    Entries escaping dest_dir, sensitive entries and the metadata entry
    are skipped.

    Args:
        reader: Binary stream with the zip archive
        dest_dir: Extraction root, created when missing

    Returns:
        Number of entries written

    Raises:
        FormatError: If the archive is structurally invalid
        FileSystemError: If writing to dest_dir fails

    """
    try:
        archive = zipfile.ZipFile(reader)
    except zipfile.BadZipFile as e:
        msg = f"not a valid zip archive: {e}"
        raise FormatError(msg) from e

    written = 0
    try:
        dest_dir.mkdir(parents=True, exist_ok=True)
        with archive:
            for info in archive.infolist():
                name = info.filename
                target = enclosed_path(dest_dir, name)
                if target is None:
                    logger.warning("Skipping unsafe archive entry: %s", name)
                    continue
                if is_sensitive_path(name):
                    logger.debug("Skipping sensitive entry: %s", name)
                    continue
                if name == BACKUP_META_FILENAME:
                    continue

                if info.is_dir():
                    target.mkdir(parents=True, exist_ok=True)
                else:
                    target.parent.mkdir(parents=True, exist_ok=True)
                    with archive.open(info) as src, target.open("wb") as dst:
                        shutil.copyfileobj(src, dst)
                written += 1
    except _ENTRY_ERRORS as e:
        msg = f"corrupt archive entry: {e}"
        raise FormatError(msg) from e
    except OSError as e:
        raise FileSystemError(str(e), target=str(dest_dir)) from e

    logger.debug("Extracted %d entries to %s", written, dest_dir)
    return written


def read_metadata(reader: BinaryIO) -> BackupMetadata | None:
    """Read backup_meta.json from an archive.

    Returns:
        Parsed metadata, or None if the archive has none or it is invalid

    """
    try:
        with zipfile.ZipFile(reader) as archive:
            raw = archive.read(BACKUP_META_FILENAME)
        return BackupMetadata.from_dict(orjson.loads(raw))
    except (*_ENTRY_ERRORS, KeyError, ValueError, OSError) as e:
        logger.debug("No usable metadata in archive: %s", e)
        return None
