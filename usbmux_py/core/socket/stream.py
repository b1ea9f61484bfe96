"""
Device Stream Module

After a successful Connect the usbmuxd socket stops carrying framed plist
messages and becomes a plain byte pipe to a port on the device.
DeviceStream wraps that socket with raw send/receive only.
"""

import logging
import socket
from typing import Optional

from ..errors import UsbmuxIOError

logger = logging.getLogger(__name__)


class DeviceStream:
    """
    Raw byte stream to a device port

    Example:
        >>> with client.connect(device.device_id, 62078) as stream:
        ...     stream.send_all(b"\\x00\\x00\\x00\\x06powpow")
        ...     reply = stream.recv(4096)
    """

    def __init__(
        self,
        sock: socket.socket,
        device_id: Optional[int] = None,
        port: Optional[int] = None,
        buffer_size: int = 64 * 1024,
    ):
        self._socket: Optional[socket.socket] = sock
        self.device_id = device_id
        self.port = port
        self.buffer_size = buffer_size

    @property
    def socket(self) -> socket.socket:
        """Underlying socket"""
        if self._socket is None:
            raise UsbmuxIOError("Device stream is closed")
        return self._socket

    @property
    def closed(self) -> bool:
        return self._socket is None

    def settimeout(self, timeout: Optional[float]) -> None:
        self.socket.settimeout(timeout)

    def send_all(self, data: bytes) -> None:
        """
        Send all data to the device

        Raises:
            UsbmuxIOError: If send operation fails
        """
        try:
            self.socket.sendall(data)
        except OSError as e:
            raise UsbmuxIOError(f"Send error: {e}") from e

    def recv(self, size: int) -> bytes:
        """
        Receive up to size bytes; returns b"" when the device closes the port

        Raises:
            UsbmuxIOError: If receive operation fails or times out
        """
        try:
            return self.socket.recv(size)
        except socket.timeout as e:
            raise UsbmuxIOError("Receive timeout") from e
        except OSError as e:
            raise UsbmuxIOError(f"Receive error: {e}") from e

    def recv_all(self, size: int) -> bytes:
        """
        Receive exact number of bytes

        Raises:
            UsbmuxIOError: If the stream ends early or receive fails
        """
        data = bytearray()
        while len(data) < size:
            chunk = self.recv(min(size - len(data), self.buffer_size))
            if not chunk:
                raise UsbmuxIOError(
                    f"Connection closed by device after {len(data)}/{size} bytes"
                )
            data.extend(chunk)
        return bytes(data)

    def close(self) -> None:
        """Close the stream"""
        if self._socket is None:
            return

        try:
            self._socket.shutdown(socket.SHUT_RDWR)
        except OSError:
            pass  # Already disconnected

        self._socket.close()
        self._socket = None
        logger.debug(f"Device stream closed (device {self.device_id}, port {self.port})")

    def __enter__(self) -> "DeviceStream":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "closed" if self.closed else "open"
        return f"<DeviceStream device={self.device_id} port={self.port} {state}>"
