"""
usbmux-py - Python usbmuxd Client

A Python client for usbmuxd, the USB multiplexing daemon that brokers
connections to attached iOS devices over /var/run/usbmuxd.

This package provides functionality to:
- List attached devices
- Open a raw byte stream to a TCP port on a device
- Follow device attach/detach notifications

Example:
    >>> from usbmux_py import UsbmuxClient
    >>>
    >>> client = UsbmuxClient()
    >>> device = client.list_devices()[0]
    >>> stream = client.connect(device.device_id, 62078)
"""

from .core import (
    # Devices
    Device,
    DeviceEvent,
    # Sockets
    UsbmuxSocket,
    DeviceStream,
    SocketConfig,
    SocketState,
    # Protocol
    MessageType,
    ResultCode,
    message_type,
    # Errors
    ErrorKind,
    UsbmuxError,
    UsbmuxIOError,
    SerializationError,
    UnexpectedFormatError,
    DeviceNotConnectedError,
    PortNotAvailableError,
)
from .client import (
    UsbmuxClient,
    DeviceEventListener,
    ClientConfig,
    list_devices,
    connect_to_device,
)

__version__ = "0.1.0"
__all__ = [
    # Client
    "UsbmuxClient",
    "DeviceEventListener",
    "ClientConfig",
    "list_devices",
    "connect_to_device",
    # Devices
    "Device",
    "DeviceEvent",
    # Sockets
    "UsbmuxSocket",
    "DeviceStream",
    "SocketConfig",
    "SocketState",
    # Protocol
    "MessageType",
    "ResultCode",
    "message_type",
    # Errors
    "ErrorKind",
    "UsbmuxError",
    "UsbmuxIOError",
    "SerializationError",
    "UnexpectedFormatError",
    "DeviceNotConnectedError",
    "PortNotAvailableError",
]
