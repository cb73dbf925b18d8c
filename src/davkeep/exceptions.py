"""Exception classes for davkeep operations."""


class DavKeepError(Exception):
    """Base exception for davkeep operations."""

    error_prefix: str = "Operation failed"

    def __init__(self, message: str, target: str | None = None) -> None:
        """Initialize error with message and optional target.

        Args:
            message: Error message describing the failure.
            target: Optional name of the file or resource that failed.

        """
        super().__init__(message)
        self.message = message
        self.target = target

    def __str__(self) -> str:
        """Return formatted error message."""
        if self.target:
            return f"{self.error_prefix} for '{self.target}': {self.message}"
        return f"{self.error_prefix}: {self.message}"


class FileSystemError(DavKeepError):
    """Raised when a filesystem operation fails (carries the OS detail)."""

    error_prefix = "File system error"


class NetworkError(DavKeepError):
    """Raised when the WebDAV server cannot be reached."""

    error_prefix = "Network error"


class RemoteStatusError(DavKeepError):
    """Raised when the WebDAV server answers with a non-success status."""

    error_prefix = "Server returned an error"

    def __init__(
        self,
        status: int,
        reason: str | None = None,
        target: str | None = None,
    ) -> None:
        """Initialize with the HTTP status code and reason phrase.

        Args:
            status: HTTP status code returned by the server.
            reason: Optional reason phrase.
            target: Optional resource name.

        """
        message = f"{status} {reason}" if reason else str(status)
        super().__init__(message, target)
        self.status = status
        self.reason = reason


class FormatError(DavKeepError):
    """Raised for corrupt archives or undecodable data."""

    error_prefix = "Invalid format"


class PathEncodingError(FormatError):
    """Raised when a path cannot be represented as text in an archive."""

    error_prefix = "Invalid path encoding"


class AuthError(DavKeepError):
    """Raised when credentials are missing or rejected."""

    error_prefix = "Authentication failed"


class RemoteAuthError(RemoteStatusError, AuthError):
    """Raised when the server rejects the supplied credentials."""

    error_prefix = "Authentication rejected by server"


class NotFoundError(DavKeepError):
    """Raised when a required file or remote resource does not exist."""

    error_prefix = "Not found"


class RemoteNotFoundError(RemoteStatusError, NotFoundError):
    """Raised when the remote resource does not exist."""

    error_prefix = "Remote resource not found"


class VaultNotStoredError(NotFoundError):
    """Raised when no password has been saved in the vault."""

    error_prefix = "No password stored locally"


class VaultCorruptedError(FormatError):
    """Raised when the stored credential blob cannot be decoded."""

    error_prefix = "Credential data corrupted"


class StateTransitionError(DavKeepError):
    """Raised when a pipeline step is attempted in the wrong state."""

    error_prefix = "Invalid pipeline state"
