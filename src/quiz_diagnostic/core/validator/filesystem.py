"""Filesystem capability used by the validator.

The rule engine never touches the disk directly. Everything it needs
(existence checks, top-level XML discovery, reading, archive extraction and
a scoped working area) goes through a `PackageFilesystem`, so tests can
swap in an in-memory implementation.
"""
from contextlib import contextmanager
from pathlib import Path
from typing import ContextManager, Iterator, Protocol
import logging
import shutil
import tempfile
import zipfile

logger = logging.getLogger(__name__)

# Archive limits
MAX_ARCHIVE_FILES = 10000
MAX_ARCHIVE_SIZE = 500 * 1024 * 1024  # 500 MB uncompressed


class ArchiveError(Exception):
    """Raised when a package archive cannot be unpacked."""


class PackageFilesystem(Protocol):
    """Operations the validator needs from the filesystem."""

    def exists(self, path: Path) -> bool: ...

    def is_dir(self, path: Path) -> bool: ...

    def is_file(self, path: Path) -> bool: ...

    def list_xml_files(self, directory: Path) -> list[Path]: ...

    def read_text(self, path: Path) -> str: ...

    def extract_archive(self, archive: Path, destination: Path) -> None: ...

    def working_area(self, prefix: str) -> ContextManager[Path]: ...


class LocalFilesystem:
    """PackageFilesystem backed by the local disk."""

    def __init__(self, work_dir: Path | None = None):
        """
        Args:
            work_dir: Parent directory for working areas (default: system temp)
        """
        self.work_dir = work_dir

    def exists(self, path: Path) -> bool:
        return path.exists()

    def is_dir(self, path: Path) -> bool:
        return path.is_dir()

    def is_file(self, path: Path) -> bool:
        return path.is_file()

    def list_xml_files(self, directory: Path) -> list[Path]:
        """Top-level *.xml files, sorted by name."""
        return sorted(p for p in directory.glob("*.xml") if p.is_file())

    def read_text(self, path: Path) -> str:
        return path.read_text(encoding="utf-8")

    def extract_archive(self, archive: Path, destination: Path) -> None:
        """
        Extract a zip archive into destination.

        Raises:
            ArchiveError: If the archive is unreadable, too large, or has
                members that would land outside destination.
        """
        try:
            with zipfile.ZipFile(archive, "r") as zf:
                members = zf.infolist()

                if len(members) > MAX_ARCHIVE_FILES:
                    raise ArchiveError(f"Archive contains too many files: {len(members)}")

                total_size = sum(info.file_size for info in members)
                if total_size > MAX_ARCHIVE_SIZE:
                    raise ArchiveError(
                        f"Archive too large: {total_size / (1024 * 1024):.1f} MB"
                    )

                root = destination.resolve()
                for info in members:
                    target = (destination / info.filename).resolve()
                    if target != root and root not in target.parents:
                        raise ArchiveError(f"Unsafe path in archive: {info.filename}")

                zf.extractall(destination)

        except (zipfile.BadZipFile, OSError, RuntimeError, NotImplementedError) as e:
            raise ArchiveError(str(e)) from e

        logger.debug(f"Extracted {len(members)} entries from {archive} to {destination}")

    @contextmanager
    def working_area(self, prefix: str = "qti-validate-") -> Iterator[Path]:
        """
        Temporary directory owned by one validation call.

        Removed on exit, whether the body returns or raises.
        """
        path = Path(tempfile.mkdtemp(prefix=prefix, dir=self.work_dir))
        try:
            yield path
        finally:
            shutil.rmtree(path, ignore_errors=True)
            logger.debug(f"Removed working area {path}")
