"""Interface for converting cached values to and from bytes.

The cache engine is written once against this contract and works for any
value type a codec exists for.
"""

import abc
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class Codec(abc.ABC, Generic[T]):
    """Abstract Base Class for value serialization."""

    @abc.abstractmethod
    def encode(self, value: T) -> bytes:
        """Converts a value to bytes.

        Args:
            value: The value to convert.

        Returns:
            The byte representation of the value.

        Raises:
            DataConversionError: If the value cannot be converted.
        """
        pass

    @abc.abstractmethod
    def decode(self, data: bytes) -> Optional[T]:
        """Reconstructs a value from bytes.

        Args:
            data: Bytes previously produced by ``encode``.

        Returns:
            The value, or None if the bytes are malformed. Never raises.
        """
        pass
