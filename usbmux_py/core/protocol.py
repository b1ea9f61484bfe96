"""
usbmux_py/core/protocol.py

Protocol constants and enumerations for the usbmux client.

This module defines the protocol-level constants used for communication
with usbmuxd: frame header layout, message types and result codes.
"""

from enum import Enum, IntEnum
from typing import Any, Dict, Final


# ============================================================================
# Frame Header
# ============================================================================

# Frame header is 16 bytes, all fields little-endian u32:
# [total length][version][message type][tag]
#
# total length counts the header itself plus the payload.

HEADER_FORMAT: Final[str] = "<IIII"
HEADER_SIZE: Final[int] = 16

PROTOCOL_VERSION: Final[int] = 1     # Plist protocol version
PLIST_MESSAGE_TYPE: Final[int] = 8   # Payload is an XML property list
DEFAULT_TAG: Final[int] = 1          # Tag is constant, one request in flight

MAX_FRAME_SIZE: Final[int] = 0xFFFFFFFF


# ============================================================================
# Endpoint
# ============================================================================

DEFAULT_SOCKET_PATH: Final[str] = "/var/run/usbmuxd"
SOCKET_ADDRESS_ENV: Final[str] = "USBMUXD_SOCKET_ADDRESS"


# ============================================================================
# Message Types
# ============================================================================

class MessageType(str, Enum):
    """Values of the MessageType key."""
    # Requests (client -> daemon)
    LIST_DEVICES = "ListDevices"
    CONNECT = "Connect"
    LISTEN = "Listen"

    # Replies and notifications (daemon -> client)
    RESULT = "Result"
    ATTACHED = "Attached"
    DETACHED = "Detached"


# ============================================================================
# Result Codes
# ============================================================================

class ResultCode(IntEnum):
    """Values of the Number key in Result replies."""
    OK = 0
    BAD_COMMAND = 1
    BAD_DEVICE = 2          # Device is not connected
    CONNECTION_REFUSED = 3  # Port is not available on the device
    BAD_VERSION = 6


# ============================================================================
# Utilities
# ============================================================================

def message_type(name: str) -> Dict[str, Any]:
    """Create a message dict holding only the MessageType entry."""
    if isinstance(name, MessageType):
        name = name.value
    return {"MessageType": name}


def byte_swap16(value: int) -> int:
    """
    Swap the two bytes of a 16-bit value.

    usbmuxd expects PortNumber in network byte order while the integer
    itself travels in a little-endian plist, so 2345 (0x0929) goes on the
    wire as 0x2909.
    """
    if not 0 <= value <= 0xFFFF:
        raise ValueError(f"Port out of range: {value}")
    return ((value & 0xFF) << 8) | ((value >> 8) & 0xFF)
