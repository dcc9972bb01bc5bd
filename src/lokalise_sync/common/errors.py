"""Base error definitions for lokalise_sync."""

from typing import Any, Dict


class LokaliseSyncError(Exception):
    """Base exception for all lokalise_sync errors."""

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.message = message
        self.context: Dict[str, Any] = context


class ConfigurationError(LokaliseSyncError):
    """Configuration or export options are invalid or missing."""
    pass
