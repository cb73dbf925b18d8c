"""Database quiesce contract used before a restore overwrites files.

The restore pipeline never owns the host's database. It receives a handle,
asks it to close and, when the handle can tell, waits until every file
handle is really released. Handles without that signal get a fixed grace
period instead.
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class DatabaseHandle(Protocol):
    """Host database that must be closed before files are replaced."""

    async def close(self) -> None:
        """Close the database and stop issuing new queries."""
        ...


@runtime_checkable
class ReleaseAwareDatabaseHandle(DatabaseHandle, Protocol):
    """Database handle that can signal when its files are released."""

    async def wait_released(self) -> None:
        """Return once no file handle on the database remains open."""
        ...


class NullDatabaseHandle:
    """Handle for hosts without a database."""

    async def close(self) -> None:
        """Nothing to close."""

    async def wait_released(self) -> None:
        """Nothing to wait for."""
