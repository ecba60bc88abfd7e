"""Concrete codecs for the value types the cache supports out of the box."""

import json
import logging
from typing import Any, Generic, List, Optional, Type, TypeVar, Union

from tiercache.domain.interfaces.codec import Codec
from tiercache.domain.interfaces.convertible import DataConvertible, Serializable
from tiercache.domain.models.errors import DataConversionError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ConvertibleCodec(Codec[T]):
    """Delegates to a ``DataConvertible`` class."""

    def __init__(self, value_type: Type[DataConvertible]):
        self.value_type = value_type

    def encode(self, value: T) -> bytes:
        try:
            return value.to_bytes()  # type: ignore[attr-defined]
        except Exception as e:
            raise DataConversionError(f"{self.value_type.__name__}.to_bytes failed: {e}") from e

    def decode(self, data: bytes) -> Optional[T]:
        try:
            return self.value_type.from_bytes(data)  # type: ignore[return-value]
        except Exception as e:
            logger.debug(f"{self.value_type.__name__}.from_bytes raised: {e}")
            return None


class SerializableCodec(Codec[T]):
    """Stores a ``Serializable`` as a JSON object."""

    def __init__(self, value_type: Type[Serializable]):
        self.value_type = value_type

    def encode(self, value: T) -> bytes:
        try:
            return json.dumps(value.serialize()).encode("utf-8")  # type: ignore[attr-defined]
        except Exception as e:
            raise DataConversionError(f"{self.value_type.__name__}.serialize failed: {e}") from e

    def decode(self, data: bytes) -> Optional[T]:
        serialized = DataConvertible.json_dictionary(data)
        if serialized is None:
            return None
        try:
            return self.value_type.from_serialized(serialized)  # type: ignore[return-value]
        except Exception as e:
            logger.debug(f"{self.value_type.__name__}.from_serialized raised: {e}")
            return None


class ListCodec(Codec[List[T]], Generic[T]):
    """Stores a list as a JSON array holding the text form of each element.

    Elements that fail to decode are dropped from the result rather than
    invalidating the whole list. Encoding is stricter: an element whose
    encoded form is not UTF-8 text raises DataConversionError instead of
    being left out, so a stored list never silently loses items.
    """

    def __init__(self, item_codec: Codec[T]):
        self.item_codec = item_codec

    def encode(self, value: List[T]) -> bytes:
        items = []
        for item in value:
            try:
                items.append(self.item_codec.encode(item).decode("utf-8"))
            except UnicodeDecodeError as e:
                raise DataConversionError(f"List element is not UTF-8 text: {e}") from e
        return json.dumps(items).encode("utf-8")

    def decode(self, data: bytes) -> Optional[List[T]]:
        try:
            items = json.loads(data)
        except (TypeError, ValueError):
            return None
        if not isinstance(items, list):
            return None

        result = []
        for item in items:
            if not isinstance(item, str):
                continue
            decoded = self.item_codec.decode(item.encode("utf-8"))
            if decoded is None:
                logger.debug("Dropping list element that failed to decode")
                continue
            result.append(decoded)
        return result


class JsonCodec(Codec[Any]):
    """Stores plain JSON values (dicts, lists, strings, numbers, booleans)."""

    def encode(self, value: Any) -> bytes:
        try:
            return json.dumps(value).encode("utf-8")
        except (TypeError, ValueError) as e:
            raise DataConversionError(f"Value is not JSON serializable: {e}") from e

    def decode(self, data: bytes) -> Optional[Any]:
        try:
            return json.loads(data)
        except (TypeError, ValueError):
            return None


class TextCodec(Codec[str]):
    """Stores strings as UTF-8."""

    def encode(self, value: str) -> bytes:
        if not isinstance(value, str):
            raise DataConversionError(f"Expected str, got {type(value).__name__}")
        return value.encode("utf-8")

    def decode(self, data: bytes) -> Optional[str]:
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError:
            return None


def codec_for(value_type: Union[Codec, type]) -> Codec:
    """Returns a codec for a codec instance, a value class, or ``str``.

    Raises:
        TypeError: If no codec can be derived for ``value_type``.
    """
    if isinstance(value_type, Codec):
        return value_type
    if isinstance(value_type, type):
        if issubclass(value_type, DataConvertible):
            return ConvertibleCodec(value_type)
        if issubclass(value_type, Serializable):
            return SerializableCodec(value_type)
        if value_type is str:
            return TextCodec()
    raise TypeError(f"No codec available for {value_type!r}; pass a Codec instance")
