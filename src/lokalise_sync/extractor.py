"""Extraction of downloaded bundles into the destination directory."""

import logging
import shutil
import zipfile
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from .errors import CorruptedArchiveError, ExtractionError, UnsafeArchivePathError

CHUNK_SIZE = 65536  # 64KB


@dataclass(frozen=True)
class ExtractionRequest:
    """Where to extract an archive and whether to wipe the target first."""
    archive_path: Path
    destination: Path
    clean_first: bool = False


def is_safe_member_path(base_dir: Path, member_name: str) -> bool:
    """Check that an archive member resolves inside ``base_dir``.

    Args:
        base_dir: Extraction directory
        member_name: Stored name of the archive member

    Returns:
        True if safe, False otherwise
    """
    base = base_dir.resolve()
    target = (base / member_name).resolve()
    return target == base or base in target.parents


class ArchiveExtractor:
    """Extracts zip bundles, overwriting files that already exist."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)

    def extract(self, request: ExtractionRequest) -> Path:
        """Extract ``request.archive_path`` into ``request.destination``.

        Entries are written in archive order. The destination is only
        cleaned once the archive has been opened and every entry name
        has been checked.

        Returns:
            The destination directory

        Raises:
            CorruptedArchiveError: If the archive cannot be read as a zip
            UnsafeArchivePathError: If an entry resolves outside the destination
            ExtractionError: On filesystem failure while cleaning or writing
        """
        destination = Path(request.destination)

        try:
            zip_ref = zipfile.ZipFile(request.archive_path, 'r')
        except zipfile.BadZipFile as e:
            raise CorruptedArchiveError(
                f"Archive is not a valid zip file: {request.archive_path}",
                archive=str(request.archive_path),
            ) from e
        except OSError as e:
            raise ExtractionError(
                f"Cannot open archive {request.archive_path}: {e}",
                archive=str(request.archive_path),
            ) from e

        with zip_ref:
            members = zip_ref.infolist()
            self._check_members(destination, members)

            if request.clean_first:
                self._clean(destination)

            self.logger.info(f"Unarchiving {len(members)} entries to {destination}")
            for member in members:
                self._extract_member(zip_ref, member, destination)

        return destination

    def _check_members(self, destination: Path, members: List[zipfile.ZipInfo]) -> None:
        for member in members:
            if not is_safe_member_path(destination, member.filename):
                raise UnsafeArchivePathError(
                    f"Archive entry escapes destination: {member.filename}",
                    entry=member.filename,
                    destination=str(destination),
                )

    def _clean(self, destination: Path) -> None:
        """Remove the destination tree and recreate it empty.

        A symlinked destination keeps its link; the directory it points to
        is emptied instead.
        """
        self.logger.info(f"Cleaning destination folder {destination}")
        try:
            if destination.is_symlink():
                for child in destination.iterdir():
                    if child.is_dir() and not child.is_symlink():
                        shutil.rmtree(child)
                    else:
                        child.unlink()
            elif destination.exists():
                shutil.rmtree(destination)
            destination.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ExtractionError(
                f"Failed to clean destination {destination}: {e}",
                destination=str(destination),
            ) from e

    def _extract_member(
        self,
        zip_ref: zipfile.ZipFile,
        member: zipfile.ZipInfo,
        destination: Path,
    ) -> None:
        target_path = destination / member.filename

        try:
            if member.is_dir():
                target_path.mkdir(parents=True, exist_ok=True)
                return

            target_path.parent.mkdir(parents=True, exist_ok=True)
            if target_path.is_file():
                target_path.unlink()

            with zip_ref.open(member) as source, open(target_path, 'wb') as target:
                while chunk := source.read(CHUNK_SIZE):
                    target.write(chunk)
        except zipfile.BadZipFile as e:
            raise CorruptedArchiveError(
                f"Corrupted archive entry {member.filename}: {e}",
                entry=member.filename,
            ) from e
        except OSError as e:
            raise ExtractionError(
                f"Failed to extract {member.filename}: {e}",
                entry=member.filename,
                destination=str(destination),
            ) from e

        self.logger.debug(f"Extracted {member.filename}")
