"""Interface for the in-memory tier.

Implementations must be safe to call from several threads at once and may
drop any entry at any time (size-based eviction, memory pressure). The cache
engine never relies on an entry still being present.
"""

import abc
from typing import Any, Optional

from tiercache.domain.models.common import SanitizedKey


class MemoryStore(abc.ABC):
    """Abstract Base Class for the memory tier."""

    @abc.abstractmethod
    def get(self, key: SanitizedKey) -> Optional[Any]:
        """Returns the stored object, or None if absent or evicted."""
        pass

    @abc.abstractmethod
    def set(self, key: SanitizedKey, value: Any) -> None:
        """Stores ``value`` under ``key``, replacing any previous object."""
        pass

    @abc.abstractmethod
    def evict(self, key: SanitizedKey) -> None:
        """Removes ``key`` if present. No error when absent."""
        pass

    @abc.abstractmethod
    def clear(self) -> None:
        """Removes every entry."""
        pass

    @abc.abstractmethod
    def __len__(self) -> int:
        pass

    def __contains__(self, key: object) -> bool:
        return self.get(key) is not None  # type: ignore[arg-type]
