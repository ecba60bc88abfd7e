"""Error types raised across the cache boundary.

Only two failures ever reach a caller: a value that cannot be converted to
bytes during ``set`` and a directory that cannot be provisioned during
construction. Everything else (misses, expired entries, corrupt records,
disk errors after construction) is absorbed and reported through logging
and the diagnostics hook.
"""


class CacheError(Exception):
    """Base class for all cache errors."""


class DataConversionError(CacheError):
    """Raised when a value cannot be converted to its byte representation."""


class CacheDirectoryError(CacheError):
    """Raised when the cache directory cannot be created at construction."""

    def __init__(self, directory, message: str):
        super().__init__(f"Cannot provision cache directory {directory}: {message}")
        self.directory = directory
