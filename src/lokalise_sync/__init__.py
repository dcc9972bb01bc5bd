"""Export Lokalise localizations and extract the bundle into a directory."""

from .errors import (
    LokaliseSyncError, ConfigurationError, RemoteError, RemoteRequestError,
    RemoteProtocolError, RemoteReportedError, ContentTypeError,
    ExtractionError, CorruptedArchiveError, UnsafeArchivePathError,
)
from .options import ExportOptions
from .requester import (
    ExportRequester, ExportOutcome, ExportSuccess, ExportFailure, ExportMalformed,
    build_payload, parse_response,
)
from .fetcher import ArchiveFetcher, FetchedArchive
from .extractor import ArchiveExtractor, ExtractionRequest
from .pipeline import LocalizationPipeline, PipelineContext, PipelineStage, run_export

__version__ = "0.1.0"

__all__ = [
    "ExportOptions",
    "ExportRequester",
    "ExportOutcome",
    "ExportSuccess",
    "ExportFailure",
    "ExportMalformed",
    "build_payload",
    "parse_response",
    "ArchiveFetcher",
    "FetchedArchive",
    "ArchiveExtractor",
    "ExtractionRequest",
    "LocalizationPipeline",
    "PipelineContext",
    "PipelineStage",
    "run_export",
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
