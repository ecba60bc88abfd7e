import base64
import json

import pytest

from conftest import IceCreamFlavor
from tiercache.domain.models.envelope import Envelope
from tiercache.domain.models.errors import DataConversionError
from tiercache.infrastructure.cache.codecs import ConvertibleCodec, JsonCodec, TextCodec


class BytesCodec(JsonCodec):
    """Passes raw bytes through, to exercise the base64 path."""

    def encode(self, value):
        return value

    def decode(self, data):
        return data


class FailingCodec(JsonCodec):
    def encode(self, value):
        raise RuntimeError("boom")


def test_is_expired_compares_against_given_time():
    envelope = Envelope(value="v", expires_at=100.0)
    assert not envelope.is_expired(now=99.0)
    assert not envelope.is_expired(now=100.0)
    assert envelope.is_expired(now=100.5)


def test_is_expired_reads_the_clock_each_time(mocker):
    fake_time = mocker.patch("tiercache.domain.models.envelope.time.time")
    envelope = Envelope(value="v", expires_at=100.0)

    fake_time.return_value = 50.0
    assert not envelope.is_expired()
    fake_time.return_value = 150.0
    assert envelope.is_expired()


def test_record_layout():
    codec = ConvertibleCodec(IceCreamFlavor)
    data = Envelope(value=IceCreamFlavor("Vanilla"), expires_at=1234.5).to_bytes(codec)

    record = json.loads(data)
    assert record["expiration"] == 1234.5
    assert json.loads(record["value"]) == {"name": "Vanilla"}
    assert "encoding" not in record


def test_round_trip_with_convertible_value():
    codec = ConvertibleCodec(IceCreamFlavor)
    original = Envelope(value=IceCreamFlavor("Chocolate"), expires_at=99.0)

    restored = Envelope.from_bytes(original.to_bytes(codec), codec)

    assert restored == original


def test_non_utf8_values_are_stored_as_base64():
    codec = BytesCodec()
    payload = b"\xff\x00\xfe"
    data = Envelope(value=payload, expires_at=1.0).to_bytes(codec)

    record = json.loads(data)
    assert record["encoding"] == "base64"
    assert base64.b64decode(record["value"]) == payload
    assert Envelope.from_bytes(data, codec).value == payload


def test_encode_failure_raises_data_conversion_error():
    with pytest.raises(DataConversionError):
        Envelope(value="x", expires_at=1.0).to_bytes(FailingCodec())


@pytest.mark.parametrize("data", [
    b"",
    b"not json",
    b"[1, 2, 3]",
    b'{"expiration": 1.0}',
    b'{"value": "x"}',
    b'{"value": 3, "expiration": 1.0}',
    b'{"value": "x", "expiration": "soon"}',
    b'{"value": "x", "expiration": true}',
    b'{"value": "%%%", "expiration": 1.0, "encoding": "base64"}',
])
def test_malformed_records_decode_to_none(data: bytes):
    assert Envelope.from_bytes(data, TextCodec()) is None


def test_inner_value_failure_decodes_to_none():
    data = json.dumps({"value": "{\"flavour\": 1}", "expiration": 1.0}).encode()
    assert Envelope.from_bytes(data, ConvertibleCodec(IceCreamFlavor)) is None


def test_integer_expiration_is_accepted():
    data = json.dumps({"value": "hello", "expiration": 10}).encode()
    envelope = Envelope.from_bytes(data, TextCodec())
    assert envelope.value == "hello"
    assert envelope.expires_at == 10.0
