"""
usbmux_py/client

Client package for usbmux-py.

This package contains the high-level client:
- client: UsbmuxClient with list_devices / connect / listen
- config: Configuration dataclass

Usage:
    from usbmux_py.client import UsbmuxClient, ClientConfig

    client = UsbmuxClient(ClientConfig(socket_path="/var/run/usbmuxd"))
    devices = client.list_devices()
"""

from .client import UsbmuxClient, DeviceEventListener, list_devices, connect_to_device
from .config import ClientConfig

__all__ = [
    # Main client
    "UsbmuxClient",
    "DeviceEventListener",
    "list_devices",
    "connect_to_device",

    # Configuration
    "ClientConfig",
]
