"""tiercache: a typed two-tier (memory + disk) key-value cache with expiration.

Typical use::

    from tiercache import TieredCache, Expiration, JsonCodec

    cache = TieredCache("profiles", JsonCodec())
    cache.set("user:42", {"name": "Ada"}, Expiration.hours(1))
    cache.get("user:42")
"""

from tiercache.domain.events.cache_events import (
    DiskReadFailed,
    DiskRemoveFailed,
    DiskWriteFailed,
    DomainEvent,
    EntryDecodeFailed,
    ProtectionFailed,
    PurgeFailed,
)
from tiercache.domain.interfaces.cache import CacheService
from tiercache.domain.interfaces.codec import Codec
from tiercache.domain.interfaces.convertible import DataConvertible, Serializable
from tiercache.domain.models.envelope import Envelope
from tiercache.domain.models.errors import CacheDirectoryError, CacheError, DataConversionError
from tiercache.domain.models.expiration import DISTANT_FUTURE, Expiration
from tiercache.infrastructure.cache.codecs import (
    ConvertibleCodec,
    JsonCodec,
    ListCodec,
    SerializableCodec,
    TextCodec,
    codec_for,
)
from tiercache.infrastructure.cache.locator import sanitize
from tiercache.infrastructure.cache.purge import cache_root, purge_cache
from tiercache.infrastructure.cache.tiered_cache import TieredCache

__version__ = "0.1.0"

__all__ = [
    "CacheDirectoryError",
    "CacheError",
    "CacheService",
    "Codec",
    "ConvertibleCodec",
    "DISTANT_FUTURE",
    "DataConversionError",
    "DataConvertible",
    "DiskReadFailed",
    "DiskRemoveFailed",
    "DiskWriteFailed",
    "DomainEvent",
    "EntryDecodeFailed",
    "Envelope",
    "Expiration",
    "JsonCodec",
    "ListCodec",
    "ProtectionFailed",
    "PurgeFailed",
    "Serializable",
    "SerializableCodec",
    "TextCodec",
    "TieredCache",
    "cache_root",
    "codec_for",
    "purge_cache",
    "sanitize",
]
