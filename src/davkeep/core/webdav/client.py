"""WebDAV transport client for backup archives.

Every call is stateless: it receives the server URL and credentials,
authenticates with HTTP Basic and performs a single request. Failures are
raised to the caller without retries.
"""

from urllib.parse import quote

import aiohttp

from davkeep.constants import (
    BACKUP_FILE_PREFIX,
    BACKUP_FILE_SUFFIX,
    DOWNLOAD_CHUNK_SIZE,
    UNKNOWN_LAST_MODIFIED,
)
from davkeep.core.protocols import (
    NullProgressReporter,
    ProgressMessage,
    ProgressReporter,
    emit_progress,
)
from davkeep.core.webdav.multistatus import parse_multistatus
from davkeep.domain.types import CloudBackupFile
from davkeep.exceptions import (
    NetworkError,
    RemoteAuthError,
    RemoteNotFoundError,
    RemoteStatusError,
)
from davkeep.logger import get_logger
from davkeep.utils import format_megabytes

logger = get_logger(__name__)

HTTP_MULTI_STATUS = 207
HTTP_UNAUTHORIZED = 401
HTTP_FORBIDDEN = 403
HTTP_NOT_FOUND = 404


def resource_url(url: str, filename: str) -> str:
    """Build the URL of a file inside the backup collection."""
    return f"{url.rstrip('/')}/{quote(filename)}"


def _raise_for_status(
    response: aiohttp.ClientResponse, target: str | None = None
) -> None:
    """Map a non-2xx response to a typed error."""
    status = response.status
    if 200 <= status < 300:  # noqa: PLR2004
        return
    reason = response.reason
    if status in (HTTP_UNAUTHORIZED, HTTP_FORBIDDEN):
        raise RemoteAuthError(status, reason, target)
    if status == HTTP_NOT_FOUND:
        raise RemoteNotFoundError(status, reason, target)
    raise RemoteStatusError(status, reason, target)


class WebDAVClient:
    """Uploads, downloads, lists and deletes archives on a WebDAV server."""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        progress_reporter: ProgressReporter | None = None,
    ) -> None:
        """Initialize client with an HTTP session.

        Args:
            session: aiohttp session shared by all requests
            progress_reporter: Receives download progress events

        """
        self.session = session
        self.progress_reporter = progress_reporter or NullProgressReporter()

    async def check_connection(
        self, url: str, username: str, password: str
    ) -> None:
        """Verify the server accepts the credentials.

        Raises:
            RemoteAuthError: If the credentials are rejected
            RemoteStatusError: For any other non-success status
            NetworkError: If the server cannot be reached

        """
        auth = aiohttp.BasicAuth(username, password)
        try:
            async with self.session.request(
                "PROPFIND", url, auth=auth, headers={"Depth": "0"}
            ) as response:
                _raise_for_status(response, url)
        except (aiohttp.ClientError, TimeoutError) as e:
            raise NetworkError(str(e) or type(e).__name__, target=url) from e
        logger.debug("WebDAV connection to %s verified", url)

    async def upload(
        self,
        url: str,
        username: str,
        password: str,
        filename: str,
        content: bytes,
    ) -> None:
        """Upload content as filename with a single PUT.

        Raises:
            RemoteStatusError: If the server does not answer 2xx
            NetworkError: If the transfer fails

        """
        target = resource_url(url, filename)
        auth = aiohttp.BasicAuth(username, password)
        try:
            async with self.session.put(
                target,
                auth=auth,
                data=content,
                headers={"Content-Type": "application/zip"},
            ) as response:
                _raise_for_status(response, filename)
        except (aiohttp.ClientError, TimeoutError) as e:
            raise NetworkError(
                str(e) or type(e).__name__, target=filename
            ) from e
        logger.info("Uploaded %s (%d bytes)", filename, len(content))

    async def download(
        self,
        url: str,
        username: str,
        password: str,
        filename: str,
        *,
        message: str = ProgressMessage.DOWNLOADING,
        progress_range: tuple[float, float] = (20.0, 80.0),
    ) -> bytes:
        """Download filename into memory.

        Progress starts at ``progress_range[0]``. Each chunk maps the
        fraction received onto the range when Content-Length is known;
        otherwise the midpoint of the range is reported.

        Args:
            url: Backup collection URL
            username: WebDAV username
            password: WebDAV password
            filename: Archive name
            message: Stage id sent with progress events
            progress_range: Overall progress covered by the transfer

        Returns:
            Response body

        Raises:
            RemoteNotFoundError: If the archive does not exist
            RemoteStatusError: For any other non-success status
            NetworkError: If the transfer fails

        """
        start, end = progress_range
        target = resource_url(url, filename)
        auth = aiohttp.BasicAuth(username, password)
        chunks: list[bytes] = []
        try:
            async with self.session.get(target, auth=auth) as response:
                _raise_for_status(response, filename)
                total = response.content_length
                downloaded = 0
                await emit_progress(self.progress_reporter, message, start)

                async for chunk in response.content.iter_chunked(
                    DOWNLOAD_CHUNK_SIZE
                ):
                    chunks.append(chunk)
                    downloaded += len(chunk)
                    if total:
                        progress = start + downloaded / total * (end - start)
                    else:
                        progress = start + (end - start) / 2
                    await emit_progress(
                        self.progress_reporter, message, progress
                    )
        except (aiohttp.ClientError, TimeoutError) as e:
            raise NetworkError(
                str(e) or type(e).__name__, target=filename
            ) from e

        body = b"".join(chunks)
        logger.info("Downloaded %s (%d bytes)", filename, len(body))
        return body

    async def list_backups(
        self, url: str, username: str, password: str
    ) -> list[CloudBackupFile]:
        """List backup archives in the collection, newest name first.

        Raises:
            RemoteStatusError: If the server does not answer 2xx/207
            FormatError: If the multi-status body is malformed
            NetworkError: If the server cannot be reached

        """
        auth = aiohttp.BasicAuth(username, password)
        try:
            async with self.session.request(
                "PROPFIND", url, auth=auth, headers={"Depth": "1"}
            ) as response:
                _raise_for_status(response, url)
                body = await response.read()
        except (aiohttp.ClientError, TimeoutError) as e:
            raise NetworkError(str(e) or type(e).__name__, target=url) from e

        backups = [
            CloudBackupFile(
                name=resource.name,
                date=resource.last_modified or UNKNOWN_LAST_MODIFIED,
                size=format_megabytes(resource.content_length or 0),
            )
            for resource in parse_multistatus(body)
            if not resource.is_collection
            and resource.name.startswith(BACKUP_FILE_PREFIX)
            and resource.name.endswith(BACKUP_FILE_SUFFIX)
        ]
        backups.sort(key=lambda backup: backup.name, reverse=True)
        logger.debug("Found %d backups at %s", len(backups), url)
        return backups

    async def delete(
        self, url: str, username: str, password: str, filename: str
    ) -> None:
        """Delete a remote archive.

        Raises:
            RemoteNotFoundError: If the archive does not exist
            RemoteStatusError: For any other non-success status
            NetworkError: If the server cannot be reached

        """
        target = resource_url(url, filename)
        auth = aiohttp.BasicAuth(username, password)
        try:
            async with self.session.delete(target, auth=auth) as response:
                _raise_for_status(response, filename)
        except (aiohttp.ClientError, TimeoutError) as e:
            raise NetworkError(
                str(e) or type(e).__name__, target=filename
            ) from e
        logger.info("Deleted remote backup %s", filename)
