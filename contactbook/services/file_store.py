"""
Local file storage for uploaded CSV files.

Incoming files land in a temporary area first. The ingestion service either
promotes them to durable storage (accepted upload) or deletes them (rejected
upload), so nothing lingers in the temporary area after a request.
"""
import logging
import os
import shutil
import uuid
from pathlib import Path
from typing import BinaryIO

from contactbook.core.exceptions import FileTooLargeError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024


class LocalFileStore:
    """Filesystem-backed store with separate tmp/ and files/ areas under one root."""

    def __init__(self, root: str | Path):
        self.root = Path(root)
        self.tmp_dir = self.root / "tmp"
        self.files_dir = self.root / "files"
        self.tmp_dir.mkdir(parents=True, exist_ok=True)
        self.files_dir.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def _unique_name(original_name: str) -> str:
        suffix = Path(original_name).suffix.lower() or ".csv"
        return f"file-{uuid.uuid4().hex}{suffix}"

    def save_temp(self, source: BinaryIO, original_name: str, max_bytes: int | None = None) -> Path:
        """
        Copy an incoming stream into the temporary area.

        Raises:
            FileTooLargeError: the stream exceeds max_bytes; nothing is kept
        """
        path = self.tmp_dir / self._unique_name(original_name)
        written = 0
        try:
            with open(path, "wb") as target:
                while True:
                    chunk = source.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    written += len(chunk)
                    if max_bytes is not None and written > max_bytes:
                        raise FileTooLargeError(max_bytes)
                    target.write(chunk)
        except BaseException:
            self.delete(path)
            raise

        logger.debug(f"Stored temporary upload {path} ({written} bytes)")
        return path

    def open(self, path: str | Path) -> BinaryIO:
        return open(path, "rb")

    def promote(self, temp_path: str | Path) -> Path:
        """Move a temporary file into durable storage and return its new path."""
        destination = self.files_dir / Path(temp_path).name
        shutil.move(str(temp_path), destination)
        return destination

    def exists(self, path: str | Path) -> bool:
        return Path(path).is_file()

    def delete(self, path: str | Path) -> None:
        """Delete a stored file; a missing file is not an error."""
        try:
            os.remove(path)
        except FileNotFoundError:
            pass
