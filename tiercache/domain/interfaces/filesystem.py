"""Interface for interacting with the file system.

Defines the contract the disk tier relies on, allowing the cache engine to
be independent of the specific file system implementation and letting tests
observe or fake disk access.
"""

import abc
from pathlib import Path
from typing import List


class FileSystem(abc.ABC):
    """Abstract Base Class for file system operations."""

    @abc.abstractmethod
    def make_directory(self, path: Path) -> None:
        """Creates a directory and any missing parents. Idempotent.

        Raises:
            OSError: If the directory cannot be created.
        """
        pass

    @abc.abstractmethod
    def set_permissions(self, path: Path, mode: int) -> None:
        """Applies POSIX permission bits to ``path``.

        Raises:
            OSError: If the mode cannot be applied.
        """
        pass

    @abc.abstractmethod
    def file_exists(self, path: Path) -> bool:
        """Checks if a regular file exists at ``path``."""
        pass

    @abc.abstractmethod
    def read_bytes(self, path: Path) -> bytes:
        """Reads the entire content of a file.

        Raises:
            FileNotFoundError: If the file does not exist.
            OSError: For other file system errors.
        """
        pass

    @abc.abstractmethod
    def write_bytes(self, path: Path, data: bytes) -> None:
        """Writes ``data`` to a file, overwriting it if it exists.

        The replacement must be atomic: a concurrent reader sees either the
        previous content or the new content, never a partial write.

        Raises:
            OSError: If the file cannot be written.
        """
        pass

    @abc.abstractmethod
    def remove_file(self, path: Path) -> None:
        """Deletes a file.

        Raises:
            FileNotFoundError: If the file does not exist.
            OSError: For other file system errors.
        """
        pass

    @abc.abstractmethod
    def list_directory(self, path: Path) -> List[str]:
        """Lists the names of the regular files directly inside ``path``.

        Raises:
            OSError: If the directory cannot be listed.
        """
        pass

    @abc.abstractmethod
    def remove_tree(self, path: Path) -> None:
        """Deletes a directory and everything below it.

        Raises:
            FileNotFoundError: If the directory does not exist.
            OSError: For other file system errors.
        """
        pass
