"""Report Storage Module

Ephemeral storage for rendered reports. A report is written, handed off and
deleted inside one ``with`` block, whatever happens in between.
"""
import logging
import os
import shutil
import tempfile
from contextlib import contextmanager
from typing import Iterator, Optional

from .config import get_reports_dir
from .exceptions import StorageError
from .utils import unique_storage_name

logger = logging.getLogger(__name__)


class ReportStorage:
    """Directory of short-lived report files.

    Several requests may stage files at the same time; every staged file
    gets a unique name, and nothing else is shared.

    Attributes:
        directory: Where staged reports are written
    """

    def __init__(self, directory: Optional[str] = None):
        self.directory = directory or get_reports_dir()

    def write(self, data: bytes, filename: str) -> str:
        """
        Write ``data`` atomically under a collision-free name.

        The bytes go to a temporary file first and are renamed into place,
        so a failed write never leaves a truncated report behind.

        Returns:
            Path of the written file

        Raises:
            StorageError: If the directory or file cannot be written
        """
        try:
            os.makedirs(self.directory, exist_ok=True)
            path = os.path.join(self.directory, unique_storage_name(filename))
            fd, tmp_path = tempfile.mkstemp(dir=self.directory, suffix=".part")
        except OSError as e:
            raise StorageError(f"Cannot create report in {self.directory}: {e}") from e

        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            os.replace(tmp_path, path)
        except OSError as e:
            self._remove(tmp_path)
            raise StorageError(f"Cannot write report {path}: {e}") from e

        logger.debug("Staged report %s (%d bytes)", path, len(data))
        return path

    def delete(self, path: str):
        """Remove a staged report; a missing file is not an error."""
        self._remove(path)

    @contextmanager
    def staged(self, data: bytes, filename: str) -> Iterator[str]:
        """
        Write a report and guarantee its deletion.

        Usage:
            with storage.staged(pdf_bytes, "report.pdf") as path:
                send(path)
        """
        path = self.write(data, filename)
        try:
            yield path
        finally:
            self.delete(path)

    @staticmethod
    def copy_to(path: str, directory: str) -> str:
        """
        Copy a staged report into ``directory`` under its unique staged name.

        Returns:
            Path of the copy

        Raises:
            StorageError: If the copy cannot be written
        """
        try:
            os.makedirs(directory, exist_ok=True)
            return shutil.copy(path, os.path.join(directory, os.path.basename(path)))
        except OSError as e:
            raise StorageError(f"Cannot copy report to {directory}: {e}") from e

    @staticmethod
    def _remove(path: str):
        try:
            os.remove(path)
            logger.debug("Deleted %s", path)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning("Could not delete temp file %s: %s", path, e)
