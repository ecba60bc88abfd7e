"""Memory tier backed by :class:`cachetools.LRUCache`.

The eviction policy is entirely the library's; the store only adds the
locking that ``cachetools`` leaves to its callers.
"""

import logging
import math
import threading
from typing import Any, Optional

from cachetools import LRUCache

from tiercache.domain.interfaces.memory_store import MemoryStore
from tiercache.domain.models.common import SanitizedKey

logger = logging.getLogger(__name__)

DEFAULT_MAX_ITEMS = 1024


class LRUMemoryStore(MemoryStore):
    """Thread-safe, size-bounded in-memory store."""

    def __init__(self, max_items: Optional[int] = DEFAULT_MAX_ITEMS, label: str = "tiercache"):
        """Initializes the store.

        Args:
            max_items: Number of entries kept before the least recently used
                one is discarded. None keeps everything.
            label: Name used in log messages.
        """
        self.label = label
        self.max_items = max_items
        self._cache: LRUCache = LRUCache(maxsize=max_items if max_items is not None else math.inf)
        self._lock = threading.RLock()
        logger.debug(f"Memory store '{label}' initialized (max_items={max_items})")

    def get(self, key: SanitizedKey) -> Optional[Any]:
        with self._lock:
            return self._cache.get(key)

    def set(self, key: SanitizedKey, value: Any) -> None:
        with self._lock:
            self._cache[key] = value

    def evict(self, key: SanitizedKey) -> None:
        with self._lock:
            self._cache.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._cache.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)
