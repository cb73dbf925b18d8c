"""Tests for WebDAVClient using aioresponses."""

import aiohttp
import pytest
import pytest_asyncio
from aioresponses import aioresponses
from yarl import URL

from davkeep.core.protocols import ProgressMessage
from davkeep.core.webdav import WebDAVClient, resource_url
from davkeep.domain.types import CloudBackupFile
from davkeep.exceptions import (
    FormatError,
    NetworkError,
    RemoteAuthError,
    RemoteNotFoundError,
    RemoteStatusError,
)

BASE = "https://dav.example.com/backups"


def _listing(*entries: tuple[str, int | None, str | None]) -> bytes:
    responses = [
        "<d:response><d:href>/backups/</d:href><d:propstat><d:prop>"
        "<d:resourcetype><d:collection/></d:resourcetype>"
        "</d:prop></d:propstat></d:response>"
    ]
    for name, size, modified in entries:
        props = ""
        if size is not None:
            props += f"<d:getcontentlength>{size}</d:getcontentlength>"
        if modified is not None:
            props += f"<d:getlastmodified>{modified}</d:getlastmodified>"
        responses.append(
            f"<d:response><d:href>/backups/{name}</d:href><d:propstat>"
            f"<d:prop><d:resourcetype/>{props}</d:prop>"
            "</d:propstat></d:response>"
        )
    body = "".join(responses)
    return f'<d:multistatus xmlns:d="DAV:">{body}</d:multistatus>'.encode()


@pytest_asyncio.fixture
async def session():
    """Provide an aiohttp session closed after the test."""
    async with aiohttp.ClientSession() as client_session:
        yield client_session


@pytest.fixture
def client(session, progress_reporter) -> WebDAVClient:
    """WebDAV client with a recording progress reporter."""
    return WebDAVClient(session, progress_reporter)


class TestResourceUrl:
    """Tests for resource_url."""

    def test_joins_and_quotes(self) -> None:
        """Trailing slashes collapse and names are percent-encoded."""
        assert resource_url(f"{BASE}/", "backup a.zip") == (
            f"{BASE}/backup%20a.zip"
        )


class TestCheckConnection:
    """Tests for check_connection."""

    @pytest.mark.asyncio
    async def test_success_on_multi_status(self, client: WebDAVClient) -> None:
        """A 207 answer means the account works."""
        with aioresponses() as m:
            m.add(BASE, method="PROPFIND", status=207, body=b"<x/>")
            await client.check_connection(BASE, "alice", "pw")

            request = m.requests[("PROPFIND", URL(BASE))][0]
        assert request.kwargs["headers"] == {"Depth": "0"}
        assert request.kwargs["auth"] == aiohttp.BasicAuth("alice", "pw")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [401, 403])
    async def test_rejected_credentials(
        self, client: WebDAVClient, status: int
    ) -> None:
        """401 and 403 map to RemoteAuthError."""
        with aioresponses() as m:
            m.add(BASE, method="PROPFIND", status=status)
            with pytest.raises(RemoteAuthError) as exc_info:
                await client.check_connection(BASE, "alice", "bad")

        assert exc_info.value.status == status

    @pytest.mark.asyncio
    async def test_connection_error(self, client: WebDAVClient) -> None:
        """Transport failures become NetworkError."""
        with aioresponses() as m:
            m.add(
                BASE,
                method="PROPFIND",
                exception=aiohttp.ClientConnectionError("refused"),
            )
            with pytest.raises(NetworkError, match="refused"):
                await client.check_connection(BASE, "alice", "pw")

    @pytest.mark.asyncio
    async def test_timeout(self, client: WebDAVClient) -> None:
        """Timeouts become NetworkError."""
        with aioresponses() as m:
            m.add(BASE, method="PROPFIND", exception=TimeoutError())
            with pytest.raises(NetworkError):
                await client.check_connection(BASE, "alice", "pw")


class TestUpload:
    """Tests for upload."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [200, 201, 204])
    async def test_success_statuses(
        self, client: WebDAVClient, status: int
    ) -> None:
        """Any 2xx answer is a successful upload."""
        with aioresponses() as m:
            m.put(f"{BASE}/backup_a.zip", status=status)
            await client.upload(BASE, "alice", "pw", "backup_a.zip", b"zip")

            request = m.requests[
                ("PUT", URL(f"{BASE}/backup_a.zip"))
            ][0]
        assert request.kwargs["data"] == b"zip"

    @pytest.mark.asyncio
    async def test_server_error(self, client: WebDAVClient) -> None:
        """Non-2xx answers raise RemoteStatusError with the status."""
        with aioresponses() as m:
            m.put(f"{BASE}/backup_a.zip", status=507)
            with pytest.raises(RemoteStatusError) as exc_info:
                await client.upload(BASE, "alice", "pw", "backup_a.zip", b"z")

        assert exc_info.value.status == 507


class TestDownload:
    """Tests for download and its progress mapping."""

    @pytest.mark.asyncio
    async def test_progress_with_known_length(
        self, client: WebDAVClient, progress_reporter
    ) -> None:
        """Progress moves from 20 to 80 proportionally to bytes read."""
        body = b"x" * (150 * 1024)
        with aioresponses() as m:
            m.get(
                f"{BASE}/backup_a.zip",
                status=200,
                body=body,
                headers={"Content-Length": str(len(body))},
            )
            result = await client.download(
                BASE, "alice", "pw", "backup_a.zip"
            )

        assert result == body
        values = progress_reporter.values
        assert values[0] == 20
        assert values[-1] == pytest.approx(80)
        assert values == sorted(values)
        assert all(20 <= value <= 80 for value in values)
        assert set(progress_reporter.messages) == {
            ProgressMessage.DOWNLOADING
        }

    @pytest.mark.asyncio
    async def test_progress_without_length_uses_midpoint(
        self, client: WebDAVClient, progress_reporter
    ) -> None:
        """Unknown sizes report the middle of the range per chunk."""
        with aioresponses() as m:
            m.get(f"{BASE}/backup_a.zip", status=200, body=b"abc")
            await client.download(
                BASE,
                "alice",
                "pw",
                "backup_a.zip",
                message="custom",
                progress_range=(10, 30),
            )

        assert progress_reporter.events[0] == ("custom", 10)
        assert progress_reporter.events[1:] == [("custom", 20)]

    @pytest.mark.asyncio
    async def test_missing_file(
        self, client: WebDAVClient, progress_reporter
    ) -> None:
        """404 raises RemoteNotFoundError before any progress."""
        with aioresponses() as m:
            m.get(f"{BASE}/backup_a.zip", status=404)
            with pytest.raises(RemoteNotFoundError):
                await client.download(BASE, "alice", "pw", "backup_a.zip")

        assert progress_reporter.events == []


class TestListBackups:
    """Tests for list_backups."""

    @pytest.mark.asyncio
    async def test_filters_and_sorts_descending(
        self, client: WebDAVClient
    ) -> None:
        """Only backup_*.zip files are listed, newest name first."""
        body = _listing(
            ("backup_pc_2024-01-01_000000.zip", 1048576, "Mon, 01 Jan 2024"),
            ("notes.txt", 10, None),
            ("backup_pc_2024-03-01_000000.zip", 524288, None),
            ("backup_pc_2024-02-01_000000.tar", 1, None),
            ("other_2024.zip", 1, None),
            ("backup_pc_2024-02-01_000000.zip", None, "Thu, 01 Feb 2024"),
        )
        with aioresponses() as m:
            m.add(BASE, method="PROPFIND", status=207, body=body)
            backups = await client.list_backups(BASE, "alice", "pw")

            request = m.requests[("PROPFIND", URL(BASE))][0]

        assert request.kwargs["headers"] == {"Depth": "1"}
        assert backups == [
            CloudBackupFile(
                "backup_pc_2024-03-01_000000.zip", "Unknown", "0.50 MB"
            ),
            CloudBackupFile(
                "backup_pc_2024-02-01_000000.zip",
                "Thu, 01 Feb 2024",
                "0.00 MB",
            ),
            CloudBackupFile(
                "backup_pc_2024-01-01_000000.zip",
                "Mon, 01 Jan 2024",
                "1.00 MB",
            ),
        ]

    @pytest.mark.asyncio
    async def test_malformed_body(self, client: WebDAVClient) -> None:
        """Broken XML raises FormatError."""
        with aioresponses() as m:
            m.add(BASE, method="PROPFIND", status=207, body=b"<broken")
            with pytest.raises(FormatError):
                await client.list_backups(BASE, "alice", "pw")

    @pytest.mark.asyncio
    async def test_error_status(self, client: WebDAVClient) -> None:
        """Non-success statuses raise RemoteStatusError."""
        with aioresponses() as m:
            m.add(BASE, method="PROPFIND", status=500)
            with pytest.raises(RemoteStatusError):
                await client.list_backups(BASE, "alice", "pw")


class TestDelete:
    """Tests for delete."""

    @pytest.mark.asyncio
    async def test_success(self, client: WebDAVClient) -> None:
        """204 is a successful delete."""
        with aioresponses() as m:
            m.delete(f"{BASE}/backup_a.zip", status=204)
            await client.delete(BASE, "alice", "pw", "backup_a.zip")

    @pytest.mark.asyncio
    async def test_missing(self, client: WebDAVClient) -> None:
        """404 raises RemoteNotFoundError."""
        with aioresponses() as m:
            m.delete(f"{BASE}/backup_a.zip", status=404)
            with pytest.raises(RemoteNotFoundError):
                await client.delete(BASE, "alice", "pw", "backup_a.zip")
