"""
Socket Communication Package

This package provides the socket layer for the usbmux client:
1. UsbmuxSocket - framed plist exchange with usbmuxd
2. DeviceStream - raw byte pipe obtained after a successful Connect
"""

# Export types
from .types import (
    SocketState,
    SocketConfig,
)

# Export socket classes
from .base import UsbmuxSocket
from .stream import DeviceStream

__all__ = [
    # Types
    "SocketState",
    "SocketConfig",
    # Sockets
    "UsbmuxSocket",
    "DeviceStream",
]
