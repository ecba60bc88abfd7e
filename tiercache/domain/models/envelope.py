"""The expiring envelope: a cached value plus its absolute expiration time.

On disk an envelope is a small JSON document::

    {
        "value": "<text form of the encoded value>",
        "expiration": 1767225600.0
    }

Encoded values that are not valid UTF-8 are stored base64 encoded and
flagged with ``"encoding": "base64"``.
"""

import base64
import binascii
import json
import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, Generic, Optional, TypeVar

from tiercache.domain.interfaces.codec import Codec
from tiercache.domain.models.common import Timestamp
from tiercache.domain.models.errors import DataConversionError

logger = logging.getLogger(__name__)

T = TypeVar("T")

VALUE_FIELD = "value"
EXPIRATION_FIELD = "expiration"
ENCODING_FIELD = "encoding"
BASE64_ENCODING = "base64"


@dataclass(frozen=True)
class Envelope(Generic[T]):
    """A value together with the POSIX time it expires at."""

    value: T
    expires_at: Timestamp

    def is_expired(self, now: Optional[float] = None) -> bool:
        """Checks expiry against the clock at call time."""
        if now is None:
            now = time.time()
        return self.expires_at < now

    def to_bytes(self, codec: Codec[T]) -> bytes:
        """Serializes the envelope as a JSON record.

        Raises:
            DataConversionError: If the codec cannot encode the value.
        """
        try:
            value_data = codec.encode(self.value)
        except DataConversionError:
            raise
        except Exception as e:
            raise DataConversionError(f"Failed to encode value of type {type(self.value).__name__}: {e}") from e

        record: Dict[str, Any] = {EXPIRATION_FIELD: float(self.expires_at)}
        try:
            record[VALUE_FIELD] = value_data.decode("utf-8")
        except UnicodeDecodeError:
            record[VALUE_FIELD] = base64.b64encode(value_data).decode("ascii")
            record[ENCODING_FIELD] = BASE64_ENCODING
        except AttributeError as e:
            raise DataConversionError(f"Codec returned {type(value_data).__name__}, expected bytes") from e

        return json.dumps(record, indent=4).encode("utf-8")

    @classmethod
    def from_bytes(cls, data: bytes, codec: Codec[T]) -> Optional["Envelope[T]"]:
        """Deserializes a JSON record produced by ``to_bytes``.

        Returns:
            The envelope, or None if the record or the inner value is malformed.
        """
        try:
            record = json.loads(data)
        except (TypeError, ValueError) as e:
            logger.debug(f"Envelope is not valid JSON: {e}")
            return None
        if not isinstance(record, dict):
            return None

        text = record.get(VALUE_FIELD)
        expiration = record.get(EXPIRATION_FIELD)
        if not isinstance(text, str):
            return None
        if isinstance(expiration, bool) or not isinstance(expiration, (int, float)):
            return None

        if record.get(ENCODING_FIELD) == BASE64_ENCODING:
            try:
                value_data = base64.b64decode(text, validate=True)
            except (binascii.Error, ValueError):
                return None
        else:
            value_data = text.encode("utf-8")

        try:
            value = codec.decode(value_data)
        except Exception as e:
            logger.debug(f"Codec {type(codec).__name__} raised while decoding: {e}")
            return None
        if value is None:
            return None

        return cls(value=value, expires_at=Timestamp(float(expiration)))
