"""Common utilities for lokalise_sync."""

from .config import ConfigLoader
from .logging import setup_logging
from .logging_config import LoggingConfig
from .errors import LokaliseSyncError, ConfigurationError

__all__ = [
    'ConfigLoader',
    'LoggingConfig',
    'setup_logging',
    'LokaliseSyncError',
    'ConfigurationError',
]
