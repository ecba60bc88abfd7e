"""Domain Events for failures the cache absorbs instead of raising.

Each event is handed to the optional ``diagnostics`` hook of the cache (or
of the purge utility) after being logged.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Optional

logger = logging.getLogger(__name__)


@dataclass
class DomainEvent:
    """Base class for domain events."""
    pass


@dataclass
class DiskReadFailed(DomainEvent):
    """A record existed on disk but could not be read."""
    cache_name: str
    key: str
    path: str
    error_message: str
    timestamp: float = field(default_factory=time.time)


@dataclass
class EntryDecodeFailed(DomainEvent):
    """A record was read but is not a valid envelope for the cache's codec."""
    cache_name: str
    key: str
    path: str
    timestamp: float = field(default_factory=time.time)


@dataclass
class DiskWriteFailed(DomainEvent):
    """A record could not be persisted. The memory tier still holds the value."""
    cache_name: str
    key: str
    path: str
    error_message: str
    timestamp: float = field(default_factory=time.time)


@dataclass
class DiskRemoveFailed(DomainEvent):
    """A record could not be deleted (for reasons other than being absent)."""
    cache_name: str
    key: str
    path: str
    error_message: str
    timestamp: float = field(default_factory=time.time)


@dataclass
class ProtectionFailed(DomainEvent):
    """The permission mode could not be applied to a cache directory."""
    cache_name: str
    directory: str
    mode: int
    error_message: str
    timestamp: float = field(default_factory=time.time)


@dataclass
class PurgeFailed(DomainEvent):
    """The shared cache root could not be deleted."""
    root: str
    error_message: str
    timestamp: float = field(default_factory=time.time)


DiagnosticsHook = Callable[[DomainEvent], None]


def publish(hook: Optional[DiagnosticsHook], event: DomainEvent) -> None:
    """Delivers ``event`` to ``hook`` if one is set.

    A failing hook is logged; it never disturbs the cache operation that
    produced the event.
    """
    if hook is None:
        return
    try:
        hook(event)
    except Exception as e:
        logger.error(f"Diagnostics hook failed for {type(event).__name__}: {e}", exc_info=True)
