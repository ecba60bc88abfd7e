"""Contracts a value class can implement to be cached directly.

``DataConvertible`` classes own their byte representation. ``Serializable``
classes describe themselves as a JSON object and let the cache handle the
bytes.
"""

import abc
import json
from typing import Any, Dict, Optional, Type, TypeVar

C = TypeVar("C", bound="DataConvertible")
S = TypeVar("S", bound="Serializable")

Serialized = Dict[str, Any]


class DataConvertible(abc.ABC):
    """A value that converts itself to and from bytes."""

    @classmethod
    @abc.abstractmethod
    def from_bytes(cls: Type[C], data: bytes) -> Optional[C]:
        """Builds an instance from bytes, or returns None if they are malformed."""
        pass

    @abc.abstractmethod
    def to_bytes(self) -> bytes:
        """Returns the byte representation. May raise on unconvertible state."""
        pass

    @staticmethod
    def json_dictionary(data: bytes) -> Optional[Serialized]:
        """Parses ``data`` as a JSON object.

        Returns:
            The decoded dictionary, or None if the bytes are not a JSON object.
        """
        try:
            decoded = json.loads(data)
        except (TypeError, ValueError):
            return None
        return decoded if isinstance(decoded, dict) else None


class Serializable(abc.ABC):
    """A value that describes itself as a JSON-compatible dictionary."""

    @classmethod
    @abc.abstractmethod
    def from_serialized(cls: Type[S], serialized: Serialized) -> Optional[S]:
        pass

    @abc.abstractmethod
    def serialize(self) -> Serialized:
        pass
