"""Maps cache keys to memory-tier keys and disk-tier paths.

Keys are sanitized by replacing every run of characters outside
``[A-Za-z0-9_]`` with a single ``-``. Distinct keys can therefore share a
location (``"a/b"`` and ``"a?b"`` both become ``"a-b"``); the last write
wins.
"""

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from tiercache.domain.models.common import SanitizedKey

DEFAULT_EXTENSION = ".cache"

_UNSAFE_RUN = re.compile(r"[^A-Za-z0-9_]+")


def sanitize(key: str) -> SanitizedKey:
    """Makes ``key`` safe to use as a file name component."""
    return SanitizedKey(_UNSAFE_RUN.sub("-", key))


@dataclass(frozen=True)
class Location:
    """Where one key lives in each tier."""
    memory_key: SanitizedKey
    path: Path


class KeyLocator:
    """Resolves keys to locations inside one cache directory."""

    def __init__(self, directory: Path, extension: str = DEFAULT_EXTENSION):
        self.directory = Path(directory)
        self.extension = extension

    def locate(self, key: str) -> Location:
        return self.locate_sanitized(sanitize(key))

    def locate_sanitized(self, safe_key: SanitizedKey) -> Location:
        """Builds the location for a key that is already sanitized."""
        return Location(memory_key=safe_key, path=self.directory / f"{safe_key}{self.extension}")

    def key_from_filename(self, name: str) -> Optional[SanitizedKey]:
        """Recovers the sanitized key from a record's file name.

        Returns:
            The key, or None if the file is not a cache record.
        """
        if not name.endswith(self.extension):
            return None
        stem = name[: len(name) - len(self.extension)]
        if sanitize(stem) != stem:
            return None
        return SanitizedKey(stem)
