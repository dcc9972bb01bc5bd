"""Download of export bundles from Lokalise asset storage."""

import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import httpx

from .errors import ContentTypeError, RemoteRequestError

ASSETS_BASE_URL = "https://s3-eu-west-1.amazonaws.com/lokalise-assets"

ARCHIVE_CONTENT_TYPES = frozenset({"application/zip", "application/octet-stream"})

CHUNK_SIZE = 65536  # 64KB


@dataclass(frozen=True)
class FetchedArchive:
    """A downloaded bundle waiting to be extracted."""
    local_path: Path
    declared_content_type: str


def media_type(content_type: Optional[str]) -> str:
    """Strip parameters from a Content-Type header value.

    >>> media_type("application/zip; charset=binary")
    'application/zip'
    """
    if not content_type:
        return ""
    return content_type.split(";", 1)[0].strip().lower()


def archive_url(location: str, base_url: str = ASSETS_BASE_URL) -> str:
    """Join an opaque bundle location onto the asset storage base URL."""
    return f"{base_url.rstrip('/')}/{location}"


class ArchiveFetcher:
    """Downloads export bundles into a working directory."""

    def __init__(
        self,
        client: httpx.Client,
        base_url: str = ASSETS_BASE_URL,
        logger: Optional[logging.Logger] = None,
    ):
        self.client = client
        self.base_url = base_url
        self.logger = logger or logging.getLogger(__name__)

    def fetch(self, location: str, directory: Path) -> FetchedArchive:
        """Download the bundle at ``location`` into a fresh file in ``directory``.

        Args:
            location: ``bundle.file`` value from the export response
            directory: Working directory, created if missing

        Returns:
            The downloaded archive

        Raises:
            ContentTypeError: If the response is not served as an archive
            RemoteRequestError: On transport failure
        """
        url = archive_url(location, self.base_url)
        self.logger.info("Downloading localizations archive")

        try:
            with self.client.stream("GET", url) as response:
                declared = response.headers.get("content-type", "")
                if media_type(declared) not in ARCHIVE_CONTENT_TYPES:
                    raise ContentTypeError(
                        "Response did not include archive",
                        content_type=declared,
                        status_code=response.status_code,
                        url=url,
                    )
                local_path = self._store(response, Path(directory))
        except httpx.HTTPError as e:
            raise RemoteRequestError(f"Archive download failed: {e}", url=url) from e

        self.logger.debug(f"Stored archive at {local_path} ({local_path.stat().st_size} bytes)")
        return FetchedArchive(local_path=local_path, declared_content_type=declared)

    def _store(self, response: httpx.Response, directory: Path) -> Path:
        """Stream the response body into a new file under ``directory``."""
        directory.mkdir(parents=True, exist_ok=True)
        fd, name = tempfile.mkstemp(suffix=".zip", dir=directory)
        local_path = Path(name)

        try:
            with os.fdopen(fd, "wb") as target:
                for chunk in response.iter_bytes(CHUNK_SIZE):
                    target.write(chunk)
        except BaseException:
            local_path.unlink(missing_ok=True)
            raise

        return local_path
