"""Concrete implementation of the FileSystem interface using standard Python libraries
for local file system operations.

Uses `pathlib`, `os` and `shutil`. Writes go to a temporary file next to the
target and are moved into place with `os.replace`, which is atomic on both
POSIX and Windows.
"""

import logging
import os
import shutil
import uuid
from pathlib import Path
from typing import List

# Domain Layer Imports
from tiercache.domain.interfaces.filesystem import FileSystem

logger = logging.getLogger(__name__)

TEMP_SUFFIX = ".tmp"


class LocalFileSystem(FileSystem):
    """Implementation of FileSystem for the local disk."""

    def make_directory(self, path: Path) -> None:
        path = Path(path)
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error(f"Failed to create directory {path}: {e}")
            raise

    def set_permissions(self, path: Path, mode: int) -> None:
        path = Path(path)
        try:
            os.chmod(path, mode)
            logger.debug(f"Applied mode {oct(mode)} to {path}")
        except OSError as e:
            logger.warning(f"Failed to apply mode {oct(mode)} to {path}: {e}")
            raise

    def file_exists(self, path: Path) -> bool:
        return Path(path).is_file()

    def read_bytes(self, path: Path) -> bytes:
        path = Path(path)
        logger.debug(f"Reading file: {path}")
        try:
            return path.read_bytes()
        except FileNotFoundError:
            raise
        except OSError as e:
            logger.error(f"Error reading file {path}: {e}")
            raise

    def write_bytes(self, path: Path, data: bytes) -> None:
        path = Path(path)
        # Unique per call so concurrent writers never share a temp file
        temp_path = path.with_name(f"{path.name}.{uuid.uuid4().hex}{TEMP_SUFFIX}")
        logger.debug(f"Writing {len(data)} bytes to file: {path}")
        try:
            with open(temp_path, "wb") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            os.replace(temp_path, path)
        except OSError as e:
            logger.error(f"Error writing file {path}: {e}")
            try:
                temp_path.unlink(missing_ok=True)
            except OSError:
                pass  # Ignore cleanup errors
            raise

    def remove_file(self, path: Path) -> None:
        path = Path(path)
        path.unlink()
        logger.debug(f"Removed file: {path}")

    def list_directory(self, path: Path) -> List[str]:
        path = Path(path)
        with os.scandir(path) as entries:
            return [entry.name for entry in entries if entry.is_file()]

    def remove_tree(self, path: Path) -> None:
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Directory not found: {path}")
        shutil.rmtree(path)
        logger.debug(f"Removed directory tree: {path}")
