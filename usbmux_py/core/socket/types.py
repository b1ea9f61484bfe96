"""
Socket Types and Configuration

This module defines socket states and configuration for the usbmuxd
connection.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..protocol import DEFAULT_SOCKET_PATH


class SocketState(Enum):
    """Socket connection state"""

    DISCONNECTED = "disconnected"
    CONNECTED = "connected"
    ERROR = "error"  # Mid-frame failure, the socket must be discarded
    DETACHED = "detached"  # Handed off as a raw device stream


@dataclass
class SocketConfig:
    """
    Socket configuration

    Attributes:
        socket_path: Path of the usbmuxd Unix-domain socket
        send_timeout: Send timeout in seconds (None = block indefinitely)
        receive_timeout: Receive timeout in seconds (None = block indefinitely)
        buffer_size: Receive chunk size
    """

    socket_path: str = DEFAULT_SOCKET_PATH
    send_timeout: Optional[float] = None
    receive_timeout: Optional[float] = None
    buffer_size: int = 64 * 1024  # 64KB default buffer
