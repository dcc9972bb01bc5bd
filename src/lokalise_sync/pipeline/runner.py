"""Export → download → extract orchestration."""

import logging
import shutil
from pathlib import Path
from typing import Optional

import httpx

from ..errors import ConfigurationError, RemoteProtocolError, RemoteReportedError
from ..extractor import ArchiveExtractor, ExtractionRequest
from ..fetcher import ArchiveFetcher
from ..options import ExportOptions
from ..requester import ExportFailure, ExportOutcome, ExportRequester, ExportSuccess
from .base import PipelineContext, PipelineStage

DEFAULT_WORK_DIR = Path("lokalisetmp")
DEFAULT_TIMEOUT = 60.0


def archive_location(outcome: ExportOutcome) -> str:
    """Return the bundle location of a successful export.

    Raises:
        RemoteReportedError: If Lokalise reported an error
        RemoteProtocolError: If the response had an unexpected shape
    """
    if isinstance(outcome, ExportSuccess):
        return outcome.archive_path
    if isinstance(outcome, ExportFailure):
        raise RemoteReportedError(outcome.code, outcome.message)
    raise RemoteProtocolError(f"Bad response: {outcome.raw_body}", raw_body=outcome.raw_body)


class WorkingDirectory:
    """Scratch directory for downloaded archives, removed on exit.

    The directory and everything in it are removed after the block,
    including files left behind by earlier runs. With ``keep_on_failure``
    nothing is removed when the block raises.
    """

    def __init__(self, path: Path, keep_on_failure: bool = False, logger: Optional[logging.Logger] = None):
        self.path = Path(path)
        self.keep_on_failure = keep_on_failure
        self.logger = logger or logging.getLogger(__name__)

    def __enter__(self) -> "WorkingDirectory":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        if exc_type is not None and self.keep_on_failure:
            self.logger.warning(f"Keeping temporary files in {self.path}")
            return False

        try:
            if self.path.exists():
                shutil.rmtree(self.path)
        except OSError as e:
            self.logger.warning(f"Failed to remove temporary files in {self.path}: {e}")

        return False


class LocalizationPipeline:
    """Runs export, download and extraction as one synchronous operation."""

    def __init__(
        self,
        requester: ExportRequester,
        fetcher: ArchiveFetcher,
        extractor: ArchiveExtractor,
        work_dir: Path = DEFAULT_WORK_DIR,
        keep_temp_on_failure: bool = False,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize the pipeline.

        Args:
            requester: Export stage
            fetcher: Download stage
            extractor: Extraction stage
            work_dir: Scratch directory for the downloaded archive
            keep_temp_on_failure: Leave downloaded files behind when a stage fails
            logger: Logger for run-level messages
        """
        self.requester = requester
        self.fetcher = fetcher
        self.extractor = extractor
        self.work_dir = Path(work_dir)
        self.keep_temp_on_failure = keep_temp_on_failure
        self.logger = logger or logging.getLogger(__name__)

    def run(
        self,
        options: ExportOptions,
        destination: Path,
        clean_first: bool = False,
        context: Optional[PipelineContext] = None,
    ) -> Path:
        """Export, download and extract localizations into ``destination``.

        Returns:
            The destination directory

        Raises:
            LokaliseSyncError: The first stage failure; later stages do not run
        """
        context = context or PipelineContext()
        destination = Path(destination)
        context.add_metadata("destination", str(destination))
        context.add_metadata("project_id", options.project_id)

        if not destination.is_dir():
            raise ConfigurationError(
                f"Destination is not a directory: {destination}",
                destination=str(destination),
            )

        stage = PipelineStage.EXPORT
        try:
            with WorkingDirectory(self.work_dir, self.keep_temp_on_failure, self.logger) as scratch:
                location = archive_location(self.requester.export(options))
                context.add_metadata("archive_location", location)

                stage = PipelineStage.FETCH
                archive = self.fetcher.fetch(location, scratch.path)

                stage = PipelineStage.EXTRACT
                result = self.extractor.extract(
                    ExtractionRequest(
                        archive_path=archive.local_path,
                        destination=destination,
                        clean_first=clean_first,
                    )
                )
        except Exception as e:
            self.logger.error(
                f"Localization export failed during {stage.value}: {e}",
                extra=context.log_fields(stage, error_type=type(e).__name__),
            )
            raise

        self.logger.info(
            f"Localizations extracted to {result}",
            extra=context.log_fields(stage, destination=str(result)),
        )
        return result


def run_export(
    options: ExportOptions,
    destination: Path,
    clean_first: bool = False,
    *,
    timeout: float = DEFAULT_TIMEOUT,
    work_dir: Path = DEFAULT_WORK_DIR,
    keep_temp_on_failure: bool = False,
    logger: Optional[logging.Logger] = None,
    transport: Optional[httpx.BaseTransport] = None,
) -> Path:
    """Run the full pipeline with a fresh HTTP client.

    ``transport`` replaces the network transport, e.g. with an
    ``httpx.MockTransport``.
    """
    with httpx.Client(timeout=timeout, follow_redirects=True, transport=transport) as client:
        pipeline = LocalizationPipeline(
            requester=ExportRequester(client, logger=logger),
            fetcher=ArchiveFetcher(client, logger=logger),
            extractor=ArchiveExtractor(logger=logger),
            work_dir=work_dir,
            keep_temp_on_failure=keep_temp_on_failure,
            logger=logger,
        )
        return pipeline.run(options, destination, clean_first)
