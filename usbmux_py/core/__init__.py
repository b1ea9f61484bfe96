"""
usbmux_py Core Module

This module provides core functionality for the usbmux client:
- Protocol definitions and constants
- Frame codec (16-byte header + XML plist payload)
- Device records
- Socket communication layer
- Exceptions
"""

# ============================================================================
# Protocol Module
# ============================================================================
from .protocol import (
    HEADER_SIZE,
    PROTOCOL_VERSION,
    PLIST_MESSAGE_TYPE,
    DEFAULT_TAG,
    DEFAULT_SOCKET_PATH,
    SOCKET_ADDRESS_ENV,
    MessageType,
    ResultCode,
    message_type,
    byte_swap16,
)

# ============================================================================
# Codec Module
# ============================================================================
from .codec import (
    FrameHeader,
    encode_frame,
    decode_header,
    read_frame,
    encode_message,
    decode_message,
    pack_message,
)

# ============================================================================
# Device Module
# ============================================================================
from .device import (
    Device,
    DeviceEvent,
    device_from_plist,
    device_event_from_plist,
)

# ============================================================================
# Socket Module
# ============================================================================
from .socket import (
    UsbmuxSocket,
    DeviceStream,
    SocketConfig,
    SocketState,
)

# ============================================================================
# Errors
# ============================================================================
from .errors import (
    ErrorKind,
    UsbmuxError,
    UsbmuxIOError,
    SerializationError,
    UnexpectedFormatError,
    DeviceNotConnectedError,
    PortNotAvailableError,
)

__all__ = [
    # Protocol
    "HEADER_SIZE",
    "PROTOCOL_VERSION",
    "PLIST_MESSAGE_TYPE",
    "DEFAULT_TAG",
    "DEFAULT_SOCKET_PATH",
    "SOCKET_ADDRESS_ENV",
    "MessageType",
    "ResultCode",
    "message_type",
    "byte_swap16",
    # Codec
    "FrameHeader",
    "encode_frame",
    "decode_header",
    "read_frame",
    "encode_message",
    "decode_message",
    "pack_message",
    # Device
    "Device",
    "DeviceEvent",
    "device_from_plist",
    "device_event_from_plist",
    # Socket
    "UsbmuxSocket",
    "DeviceStream",
    "SocketConfig",
    "SocketState",
    # Errors
    "ErrorKind",
    "UsbmuxError",
    "UsbmuxIOError",
    "SerializationError",
    "UnexpectedFormatError",
    "DeviceNotConnectedError",
    "PortNotAvailableError",
]
