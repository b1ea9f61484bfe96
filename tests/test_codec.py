"""Frame codec tests"""

import io
import struct
from datetime import datetime

import pytest

from usbmux_py.core.codec import (
    FrameHeader,
    decode_header,
    decode_message,
    encode_frame,
    encode_message,
    pack_message,
    read_frame,
)
from usbmux_py.core.errors import (
    ErrorKind,
    SerializationError,
    UnexpectedFormatError,
)
from usbmux_py.core.protocol import HEADER_SIZE, message_type


@pytest.mark.parametrize("size", [0, 1, 4, 1000])
def test_frame_length_counts_header(size):
    frame = encode_frame(b"x" * size)
    assert len(frame) == size + HEADER_SIZE
    length, version, mtype, tag = struct.unpack("<IIII", frame[:16])
    assert length == size + 16
    assert (version, mtype, tag) == (1, 8, 1)


def test_prepare_data():
    assert encode_frame(bytes([1, 2, 3, 4])) == (
        b"\x14\x00\x00\x00\x01\x00\x00\x00\x08\x00\x00\x00\x01\x00\x00\x00"
        b"\x01\x02\x03\x04"
    )


def test_send_receive_message():
    message = message_type("Listen")
    stream = io.BytesIO(pack_message(message))
    assert decode_message(read_frame(stream.read)) == message


def test_round_trip_nested_values():
    message = {
        "MessageType": "Connect",
        "DeviceID": 3,
        "Ratio": 0.5,
        "Enabled": True,
        "Blob": b"\x00\x01\xff",
        "When": datetime(2024, 5, 1, 12, 30, 0),
        "Items": [1, "two", {"three": 3}],
        "Nested": {"Empty": {}, "List": []},
    }
    assert decode_message(encode_message(message)) == message


def test_key_order_is_preserved():
    payload = encode_message({"Zebra": 1, "Apple": 2, "MessageType": "X"})
    text = payload.decode("utf-8")
    assert text.index("Zebra") < text.index("Apple") < text.index("MessageType")


def test_decode_header_fields():
    header = decode_header(FrameHeader(length=40, tag=7).pack())
    assert header == FrameHeader(length=40, version=1, message_type=8, tag=7)
    assert header.payload_length == 24


def test_header_underflow_is_format_error():
    frame = struct.pack("<IIII", 8, 1, 8, 1)
    with pytest.raises(UnexpectedFormatError):
        read_frame(io.BytesIO(frame).read)


def test_short_header_is_format_error():
    with pytest.raises(UnexpectedFormatError):
        decode_header(b"\x10\x00\x00")


def test_invalid_payload_is_serialization_error():
    with pytest.raises(SerializationError) as excinfo:
        decode_message(b"<?xml version='1.0'?><plist><dict><key>")
    assert excinfo.value.kind is ErrorKind.SERIALIZATION
    assert excinfo.value.cause is not None


def test_unserializable_value_is_serialization_error():
    with pytest.raises(SerializationError) as excinfo:
        encode_message({"MessageType": "Connect", "DeviceID": None})
    assert isinstance(excinfo.value.cause, TypeError)


def test_empty_payload_frame():
    assert read_frame(io.BytesIO(encode_frame(b"")).read) == b""


MALFORMED_DATE = (
    b'<?xml version="1.0" encoding="UTF-8"?>'
    b'<plist version="1.0"><dict><key>When</key><date>garbage</date></dict></plist>'
)


def test_malformed_date_is_serialization_error():
    with pytest.raises(SerializationError) as excinfo:
        decode_message(MALFORMED_DATE)
    assert excinfo.value.cause is not None
