"""Export, download and extraction errors."""

from typing import Any

from lokalise_sync.common import LokaliseSyncError, ConfigurationError


class RemoteError(LokaliseSyncError):
    """Talking to Lokalise or its asset storage failed."""
    pass


class RemoteRequestError(RemoteError):
    """Transport-level failure (DNS, TLS, timeout, connection reset)."""
    pass


class RemoteProtocolError(RemoteError):
    """Response body was not shaped as expected."""
    pass


class RemoteReportedError(RemoteError):
    """The export endpoint answered with an error status."""

    def __init__(self, code: str, message: str, **context: Any) -> None:
        super().__init__(f"Response error code {code} ({message})", code=code, **context)
        self.code = code
        self.reported_message = message


class ContentTypeError(RemoteError):
    """Downloaded bundle was not served as an archive."""
    pass


class ExtractionError(LokaliseSyncError):
    """Failed to clean the destination or write an archive entry."""
    pass


class CorruptedArchiveError(ExtractionError):
    """Archive is corrupted or not a zip file."""
    pass


class UnsafeArchivePathError(ExtractionError):
    """Archive entry would be written outside the destination."""
    pass


__all__ = [
    "LokaliseSyncError",
    "ConfigurationError",
    "RemoteError",
    "RemoteRequestError",
    "RemoteProtocolError",
    "RemoteReportedError",
    "ContentTypeError",
    "ExtractionError",
    "CorruptedArchiveError",
    "UnsafeArchivePathError",
]
