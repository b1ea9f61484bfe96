"""
Frame codec for usbmux messages.

Each message is a 16-byte little-endian header followed by an XML
property list payload:

    [u32 total length][u32 version=1][u32 message type=8][u32 tag=1][plist]

The header is written with constant version, type and tag. On receive only
the length is interpreted; a frame of another kind fails when its payload is
parsed as a property list.
"""

import logging
import plistlib
import struct
from dataclasses import dataclass
from typing import Any, Callable
from xml.parsers.expat import ExpatError

from .errors import SerializationError, UnexpectedFormatError
from .protocol import (
    DEFAULT_TAG,
    HEADER_FORMAT,
    HEADER_SIZE,
    MAX_FRAME_SIZE,
    PLIST_MESSAGE_TYPE,
    PROTOCOL_VERSION,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FrameHeader:
    """
    Decoded frame header

    Attributes:
        length: Total frame length including the header
        version: Protocol version
        message_type: Payload kind
        tag: Request tag
    """

    length: int
    version: int = PROTOCOL_VERSION
    message_type: int = PLIST_MESSAGE_TYPE
    tag: int = DEFAULT_TAG

    @property
    def payload_length(self) -> int:
        """Number of payload bytes following the header"""
        size = self.length - HEADER_SIZE
        if size < 0:
            raise UnexpectedFormatError(
                f"Frame length {self.length} is shorter than the header"
            )
        return size

    def pack(self) -> bytes:
        return struct.pack(
            HEADER_FORMAT, self.length, self.version, self.message_type, self.tag
        )


def encode_frame(payload: bytes) -> bytes:
    """
    Prepend the usbmux header to a payload

    Args:
        payload: Serialized property list

    Returns:
        Header + payload bytes

    Raises:
        SerializationError: If the payload is too large to be framed
    """
    length = len(payload) + HEADER_SIZE
    if length > MAX_FRAME_SIZE:
        raise SerializationError(f"Payload too large to frame: {len(payload)} bytes")
    return FrameHeader(length=length).pack() + payload


def decode_header(header: bytes) -> FrameHeader:
    """
    Decode a 16-byte frame header

    Raises:
        UnexpectedFormatError: If header is not exactly 16 bytes
    """
    if len(header) != HEADER_SIZE:
        raise UnexpectedFormatError(
            f"Frame header must be {HEADER_SIZE} bytes, got {len(header)}"
        )
    length, version, message_type, tag = struct.unpack(HEADER_FORMAT, header)
    return FrameHeader(length, version, message_type, tag)


def read_frame(read_exact: Callable[[int], bytes]) -> bytes:
    """
    Read one frame and return its payload

    Args:
        read_exact: Callable returning exactly the requested number of bytes
            (or raising)

    Returns:
        Payload bytes
    """
    header = decode_header(read_exact(HEADER_SIZE))
    size = header.payload_length
    logger.debug(f"Frame header: length={header.length}, tag={header.tag}")
    if size == 0:
        return b""
    return read_exact(size)


def encode_message(message: Any) -> bytes:
    """
    Serialize a structured value as an XML property list

    Dictionary insertion order is kept.

    Raises:
        SerializationError: If the value cannot be represented as a plist
    """
    try:
        return plistlib.dumps(message, fmt=plistlib.FMT_XML, sort_keys=False)
    except (TypeError, OverflowError, ValueError) as e:
        raise SerializationError(f"Cannot serialize message: {e}") from e


def decode_message(payload: bytes) -> Any:
    """
    Parse a property list payload

    Raises:
        SerializationError: If the payload is not a valid property list
    """
    try:
        return plistlib.loads(payload)
    except (
        plistlib.InvalidFileException,
        ExpatError,
        ValueError,
        AttributeError,  # malformed <date> fails inside plistlib
        TypeError,
    ) as e:
        raise SerializationError(f"Cannot parse message: {e}") from e


def pack_message(message: Any) -> bytes:
    """Serialize and frame a message in one step"""
    return encode_frame(encode_message(message))
