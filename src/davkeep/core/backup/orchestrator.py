"""Backup orchestrator for cloud and local configuration backups.

This module sequences the user-facing operations:
- Creating an archive of the configuration directory and uploading it
- Listing and deleting remote archives
- Downloading an archive into a restore preview
- Applying a preview after the host database has been quiesced
- Exporting to and importing from local archive files

Restore is split in two phases. Preparation downloads the archive into a
temporary file and reads its metadata without touching the configuration
directory. Applying closes the database, waits for it to let go of its
files and then extracts the archive over the configuration directory. The
host must restart afterwards; the database is not reopened here.
"""

import asyncio
import contextlib
import io
import shutil
import tempfile
import time
from collections.abc import Iterator
from pathlib import Path

import aiofiles

from davkeep.constants import (
    BACKUP_FILE_PREFIX,
    BACKUP_FILE_SUFFIX,
    BACKUP_TIMESTAMP_FORMAT,
    LOCAL_EXPORT_DEVICE_ID,
    LOCAL_EXPORT_DEVICE_NAME,
    RESTORE_TEMP_PREFIX,
)
from davkeep.core.backup.archive import (
    pack_directory,
    read_metadata,
    unpack_archive,
)
from davkeep.core.backup.state import OperationState
from davkeep.core.protocols import (
    DatabaseHandle,
    NullDatabaseHandle,
    NullProgressReporter,
    ProgressMessage,
    ProgressReporter,
    ReleaseAwareDatabaseHandle,
    emit_progress,
)
from davkeep.core.vault import CredentialVault
from davkeep.core.webdav import WebDAVClient
from davkeep.domain.types import (
    BackupMetadata,
    CloudBackupFile,
    PipelineState,
    RestorePreview,
)
from davkeep.exceptions import (
    AuthError,
    DavKeepError,
    FileSystemError,
    NotFoundError,
    VaultNotStoredError,
)
from davkeep.logger import get_logger
from davkeep.utils import get_current_datetime_local, sanitize_device_name

logger = get_logger(__name__)


def build_backup_filename(device_name: str) -> str:
    """Return ``backup_<device>_<YYYY-MM-DD_HHMMSS>.zip`` for now."""
    stamp = get_current_datetime_local().strftime(BACKUP_TIMESTAMP_FORMAT)
    device = sanitize_device_name(device_name)
    return f"{BACKUP_FILE_PREFIX}{device}_{stamp}{BACKUP_FILE_SUFFIX}"


class BackupOrchestrator:
    """Runs backup and restore operations against one config directory."""

    def __init__(
        self,
        config_dir: Path,
        webdav: WebDAVClient | None = None,
        vault: CredentialVault | None = None,
        database: DatabaseHandle | None = None,
        progress_reporter: ProgressReporter | None = None,
        temp_dir: Path | None = None,
        quiesce_grace: float = 0.5,
        release_timeout: float = 10.0,
    ) -> None:
        """Initialize orchestrator with its collaborators.

        Args:
            config_dir: Directory that is backed up and restored
            webdav: WebDAV transport client; only cloud operations need it
            vault: Local password vault used when no password is given
            database: Host database closed before a restore
            progress_reporter: Receives progress events
            temp_dir: Directory for temporary archives
                (defaults to the system temp dir)
            quiesce_grace: Seconds to wait after closing a database that
                cannot signal release
            release_timeout: Upper bound in seconds for the release signal

        """
        self.config_dir = config_dir
        self.webdav = webdav
        self.vault = vault
        self.database = database or NullDatabaseHandle()
        self.progress_reporter = progress_reporter or NullProgressReporter()
        self.temp_dir = temp_dir or Path(tempfile.gettempdir())
        self.quiesce_grace = quiesce_grace
        self.release_timeout = release_timeout
        self.state = OperationState("idle")

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _progress(self, message: str, progress: float) -> None:
        await emit_progress(self.progress_reporter, message, progress)

    def _begin(
        self,
        operation: str,
        initial: PipelineState = PipelineState.IDLE,
    ) -> OperationState:
        self.state = OperationState(operation, initial)
        return self.state

    @contextlib.contextmanager
    def _tracking(self, state: OperationState) -> Iterator[OperationState]:
        """Mark state as failed when the wrapped block raises."""
        try:
            yield state
        except Exception as e:
            if not state.is_finished:
                state.fail(e)
            logger.debug("%s failed: %s", state.operation, e)
            raise

    async def _resolve_password(self, password: str | None) -> str:
        """Return password, or the vault's copy when none was given.

        Raises:
            AuthError: If no password was given and none is stored

        """
        if password:
            return password
        if self.vault is None:
            msg = "WebDAV password required"
            raise AuthError(msg)
        try:
            return await asyncio.to_thread(self.vault.load)
        except VaultNotStoredError as e:
            msg = "WebDAV password required"
            raise AuthError(msg) from e

    def _client(self) -> WebDAVClient:
        """Return the WebDAV client of a cloud-capable orchestrator.

        Raises:
            DavKeepError: If the orchestrator was built for local use only

        """
        if self.webdav is None:
            msg = "no WebDAV client configured for cloud operations"
            raise DavKeepError(msg)
        return self.webdav

    def _restore_temp_path(self) -> Path:
        """Return a fresh ``restore_temp_<ms>.zip`` path in the temp dir."""
        self.temp_dir.mkdir(parents=True, exist_ok=True)
        stamp = time.time_ns() // 1_000_000
        path = self.temp_dir / f"{RESTORE_TEMP_PREFIX}{stamp}.zip"
        while path.exists():
            stamp += 1
            path = self.temp_dir / f"{RESTORE_TEMP_PREFIX}{stamp}.zip"
        return path

    def _pack_to_file(self, target: Path, metadata: BackupMetadata) -> int:
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            with target.open("wb") as writer:
                return pack_directory(self.config_dir, writer, metadata)
        except OSError as e:
            raise FileSystemError(str(e), target=str(target)) from e

    def _unpack_file(self, archive_path: Path) -> int:
        try:
            with archive_path.open("rb") as reader:
                return unpack_archive(reader, self.config_dir)
        except OSError as e:
            raise FileSystemError(str(e), target=str(archive_path)) from e

    @staticmethod
    def _read_file_metadata(archive_path: Path) -> BackupMetadata | None:
        with archive_path.open("rb") as reader:
            return read_metadata(reader)

    @staticmethod
    def _log_metadata(metadata: BackupMetadata | None) -> None:
        if metadata is None:
            logger.warning("Archive has no readable metadata")
        elif not metadata.is_supported_format():
            logger.warning(
                "Archive format %s may not be fully supported",
                metadata.version,
            )
        else:
            logger.info(
                "Archive from %s (%s), format %s",
                metadata.device_name,
                metadata.platform,
                metadata.version,
            )

    async def _quiesce_database(self) -> None:
        """Close the database and wait until its files are released."""
        await self.database.close()

        if isinstance(self.database, ReleaseAwareDatabaseHandle):
            try:
                await asyncio.wait_for(
                    self.database.wait_released(), self.release_timeout
                )
            except TimeoutError:
                logger.warning(
                    "Database did not signal release within %.1fs, "
                    "waiting %.1fs more",
                    self.release_timeout,
                    self.quiesce_grace,
                )
            else:
                return

        await asyncio.sleep(self.quiesce_grace)

    async def _apply(self, state: OperationState, archive_path: Path) -> None:
        """Quiesce, extract and clean up; state must be Restoring."""
        if not archive_path.is_file():
            msg = "restore file does not exist"
            raise NotFoundError(msg, target=str(archive_path))

        await self._quiesce_database()

        await self._progress(ProgressMessage.EXTRACTING, 50)
        written = await asyncio.to_thread(self._unpack_file, archive_path)
        logger.info("Restored %d entries into %s", written, self.config_dir)

        try:
            archive_path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning("Could not remove %s: %s", archive_path, e)

        state.advance(PipelineState.COMPLETE)
        await self._progress(ProgressMessage.COMPLETE, 100)

    # ------------------------------------------------------------------
    # Credentials and connection
    # ------------------------------------------------------------------

    async def save_password(self, password: str) -> None:
        """Store password in the vault.

        Raises:
            AuthError: If password is empty

        """
        if not password:
            msg = "Password must not be empty"
            raise AuthError(msg)
        if self.vault is None:
            msg = "no credential vault configured"
            raise DavKeepError(msg)
        await asyncio.to_thread(self.vault.save, password)

    async def check_connection(
        self, url: str, username: str, password: str | None = None
    ) -> None:
        """Verify the server accepts the credentials."""
        client = self._client()
        resolved = await self._resolve_password(password)
        await client.check_connection(url, username, resolved)

    # ------------------------------------------------------------------
    # Cloud operations
    # ------------------------------------------------------------------

    async def create_cloud_backup(
        self,
        url: str,
        username: str,
        password: str | None,
        device_name: str,
        device_id: str,
    ) -> str:
        """Archive the config directory and upload it.

        Returns:
            Name of the uploaded archive

        """
        state = self._begin("create_cloud_backup")
        with self._tracking(state):
            client = self._client()
            resolved = await self._resolve_password(password)
            state.advance(PipelineState.PREPARING)
            await self._progress(ProgressMessage.PREPARING, 10)

            metadata = BackupMetadata.create(device_id, device_name)
            filename = build_backup_filename(device_name)

            await self._progress(ProgressMessage.COMPRESSING, 30)
            self.temp_dir.mkdir(parents=True, exist_ok=True)
            temp_path = self.temp_dir / filename
            try:
                await asyncio.to_thread(
                    self._pack_to_file, temp_path, metadata
                )

                state.advance(PipelineState.TRANSFERRING)
                await self._progress(ProgressMessage.UPLOADING, 60)
                async with aiofiles.open(temp_path, "rb") as f:
                    content = await f.read()
                await client.upload(
                    url, username, resolved, filename, content
                )
            finally:
                temp_path.unlink(missing_ok=True)

            state.advance(PipelineState.COMPLETE)
            await self._progress(ProgressMessage.COMPLETE, 100)

        logger.info("Cloud backup created: %s", filename)
        return filename

    async def list_cloud_backups(
        self, url: str, username: str, password: str | None = None
    ) -> list[CloudBackupFile]:
        """List remote archives, newest name first."""
        client = self._client()
        resolved = await self._resolve_password(password)
        return await client.list_backups(url, username, resolved)

    async def delete_cloud_backup(
        self, url: str, username: str, password: str | None, filename: str
    ) -> None:
        """Delete a remote archive."""
        client = self._client()
        resolved = await self._resolve_password(password)
        await client.delete(url, username, resolved, filename)

    async def prepare_cloud_restore(
        self,
        url: str,
        username: str,
        password: str | None,
        filename: str,
    ) -> RestorePreview:
        """Download an archive into a temporary file for preview.

        Nothing in the config directory is modified.
        """
        state = self._begin("prepare_cloud_restore")
        with self._tracking(state):
            client = self._client()
            resolved = await self._resolve_password(password)
            state.advance(PipelineState.PREPARING)
            await self._progress(ProgressMessage.PREPARING, 5)

            state.advance(PipelineState.TRANSFERRING)
            content = await client.download(
                url,
                username,
                resolved,
                filename,
                message=ProgressMessage.DOWNLOADING,
                progress_range=(20, 80),
            )

            await self._progress(ProgressMessage.ANALYZING, 90)
            temp_path = self._restore_temp_path()
            try:
                async with aiofiles.open(temp_path, "wb") as f:
                    await f.write(content)
            except OSError as e:
                temp_path.unlink(missing_ok=True)
                raise FileSystemError(str(e), target=str(temp_path)) from e

            metadata = read_metadata(io.BytesIO(content))
            self._log_metadata(metadata)

            state.advance(PipelineState.PREVIEWED)
            await self._progress(ProgressMessage.COMPLETE, 100)

        return RestorePreview(temp_file_path=temp_path, metadata=metadata)

    async def apply_restore_file(self, temp_file_path: Path | str) -> None:
        """Replace the config directory contents with a prepared archive.

        Raises:
            NotFoundError: If the archive is gone; the database is left
                untouched in that case

        """
        state = self._begin("apply_restore", PipelineState.PREVIEWED)
        with self._tracking(state):
            state.advance(PipelineState.RESTORING)
            await self._progress(ProgressMessage.PREPARING, 10)
            await self._apply(state, Path(temp_file_path))

    # ------------------------------------------------------------------
    # Local operations
    # ------------------------------------------------------------------

    async def export_local_backup(
        self,
        target_path: Path,
        device_name: str = LOCAL_EXPORT_DEVICE_NAME,
        device_id: str = LOCAL_EXPORT_DEVICE_ID,
    ) -> Path:
        """Write an archive of the config directory to target_path."""
        state = self._begin("export_local_backup")
        with self._tracking(state):
            state.advance(PipelineState.PREPARING)
            await self._progress(ProgressMessage.COMPRESSING, 20)

            metadata = BackupMetadata.create(device_id, device_name)
            try:
                await asyncio.to_thread(
                    self._pack_to_file, target_path, metadata
                )
            except Exception:
                target_path.unlink(missing_ok=True)
                raise

            state.advance(PipelineState.COMPLETE)
            await self._progress(ProgressMessage.COMPLETE, 100)

        logger.info("Exported backup to %s", target_path)
        return target_path

    async def _stage_local_archive(self, source_path: Path) -> RestorePreview:
        """Copy a local archive into a fresh temporary file."""
        if not source_path.is_file():
            msg = "backup file does not exist"
            raise NotFoundError(msg, target=str(source_path))

        temp_path = self._restore_temp_path()
        try:
            await asyncio.to_thread(shutil.copyfile, source_path, temp_path)
            metadata = await asyncio.to_thread(
                self._read_file_metadata, temp_path
            )
        except OSError as e:
            temp_path.unlink(missing_ok=True)
            raise FileSystemError(str(e), target=str(source_path)) from e

        self._log_metadata(metadata)
        return RestorePreview(temp_file_path=temp_path, metadata=metadata)

    async def prepare_local_restore(self, source_path: Path) -> RestorePreview:
        """Stage a local archive for preview; the source is left intact."""
        state = self._begin("prepare_local_restore")
        with self._tracking(state):
            state.advance(PipelineState.PREPARING)
            await self._progress(ProgressMessage.PREPARING, 20)

            state.advance(PipelineState.TRANSFERRING)
            preview = await self._stage_local_archive(source_path)
            await self._progress(ProgressMessage.ANALYZING, 90)

            state.advance(PipelineState.PREVIEWED)
            await self._progress(ProgressMessage.COMPLETE, 100)
        return preview

    async def import_local_backup(self, source_path: Path) -> None:
        """Restore the config directory from a local archive."""
        state = self._begin("import_local_backup")
        with self._tracking(state):
            state.advance(PipelineState.PREPARING)
            await self._progress(ProgressMessage.PREPARING, 20)
            preview = await self._stage_local_archive(source_path)

            state.advance(PipelineState.RESTORING)
            try:
                await self._apply(state, preview.temp_file_path)
            finally:
                preview.temp_file_path.unlink(missing_ok=True)
