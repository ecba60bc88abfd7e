"""Interface for the tiered cache.

Defines the contract for storing, retrieving, and expiring cached values
across a memory tier and a disk tier.
"""

import abc
from typing import Generic, List, Optional, TypeVar

# Import relevant domain models
from ..models.common import CacheKey, SanitizedKey
from ..models.expiration import Expiration

T = TypeVar("T")


class CacheService(abc.ABC, Generic[T]):
    """Abstract Base Class for caching operations."""

    @abc.abstractmethod
    def get(self, key: CacheKey, allow_expired: bool = False) -> Optional[T]:
        """Retrieves a value, checking the memory tier before the disk tier.

        Args:
            key: The cache key to retrieve.
            allow_expired: Return the value even if it has expired.

        Returns:
            The cached value, or None if absent, expired or unreadable.
        """
        pass

    @abc.abstractmethod
    def get_all(self, allow_expired: bool = False) -> List[T]:
        """Retrieves every cached value, in no particular order.

        Args:
            allow_expired: Include values that have expired.
        """
        pass

    @abc.abstractmethod
    def all_keys(self) -> List[SanitizedKey]:
        """Lists the (sanitized) keys currently stored."""
        pass

    @abc.abstractmethod
    def set(self, key: CacheKey, value: T, expiration: Optional[Expiration] = None) -> None:
        """Stores a value in both tiers.

        Args:
            key: The cache key to store the value under.
            value: The value to store.
            expiration: When the value goes stale. Never, if omitted.

        Raises:
            DataConversionError: If the value cannot be converted to bytes.
        """
        pass

    @abc.abstractmethod
    def remove(self, key: CacheKey) -> None:
        """Removes a value from both tiers. No error if it is absent."""
        pass

    @abc.abstractmethod
    def remove_expired(self) -> int:
        """Removes every expired value.

        Returns:
            The number of values removed.
        """
        pass

    @abc.abstractmethod
    def remove_all(self) -> None:
        """Removes every value from both tiers."""
        pass

    def __getitem__(self, key: CacheKey) -> Optional[T]:
        return self.get(key)

    def __setitem__(self, key: CacheKey, value: Optional[T]) -> None:
        if value is None:
            self.remove(key)
        else:
            self.set(key, value)

    def __delitem__(self, key: CacheKey) -> None:
        self.remove(key)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.get(CacheKey(key)) is not None
