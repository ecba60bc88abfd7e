"""Defines common Value Objects used across the cache.

These objects represent simple values like keys, names and timestamps,
ensuring consistency and type safety.
"""

from typing import NewType

# === Core Value Objects ===

# Using NewType for semantic clarity, although they are plain values at runtime.
CacheKey = NewType("CacheKey", str)            # Raw key supplied by the caller
SanitizedKey = NewType("SanitizedKey", str)    # Key made safe as a file name component
CacheName = NewType("CacheName", str)          # Instance name, also the directory segment
Timestamp = NewType("Timestamp", float)        # POSIX seconds since 1970-01-01 UTC
