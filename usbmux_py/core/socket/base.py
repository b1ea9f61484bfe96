"""
Base Socket Class

This module provides the UsbmuxSocket class that owns one connection to the
usbmuxd Unix-domain socket and exchanges framed plist messages over it.
"""

import logging
import math
import socket
from typing import Any, Optional

from ..codec import pack_message, decode_message, read_frame
from ..errors import UnexpectedFormatError, UsbmuxIOError
from .stream import DeviceStream
from .types import SocketConfig, SocketState

logger = logging.getLogger(__name__)


def _check_timeout(timeout: Optional[float]) -> Optional[float]:
    if timeout is None:
        return None
    if not math.isfinite(timeout) or timeout <= 0:
        raise UsbmuxIOError(
            f"Invalid timeout {timeout!r}: use None to block indefinitely"
        ) from ValueError("timeout must be positive and finite")
    return float(timeout)


class UsbmuxSocket:
    """
    Connection to usbmuxd

    Handles framed request/response exchange:
    - Connection establishment to the daemon socket
    - Independent send and receive timeouts
    - Message framing via the codec module
    - Hand-off of the socket as a raw DeviceStream

    Only one request may be in flight: the protocol tag is constant, so
    replies cannot be matched to interleaved requests.

    A failed or timed out receive leaves the socket somewhere inside a frame.
    The socket moves to SocketState.ERROR and refuses further I/O; open a new
    connection instead.

    Example:
        >>> sock = UsbmuxSocket(SocketConfig(receive_timeout=1.0))
        >>> sock.connect()
        >>> reply = sock.request({"MessageType": "ListDevices"})
        >>> sock.close()
    """

    def __init__(self, config: Optional[SocketConfig] = None):
        """
        Initialize socket

        Args:
            config: Socket configuration
        """
        self.config = config or SocketConfig()
        self._socket: Optional[socket.socket] = None
        self._state = SocketState.DISCONNECTED
        self._send_timeout = _check_timeout(self.config.send_timeout)
        self._receive_timeout = _check_timeout(self.config.receive_timeout)

    @classmethod
    def from_socket(
        cls, sock: socket.socket, config: Optional[SocketConfig] = None
    ) -> "UsbmuxSocket":
        """Wrap an already connected socket"""
        instance = cls(config)
        instance._socket = sock
        instance._state = SocketState.CONNECTED
        return instance

    @property
    def state(self) -> SocketState:
        """Get current socket state"""
        return self._state

    @property
    def is_connected(self) -> bool:
        """Check if socket is usable for requests"""
        return self._state == SocketState.CONNECTED

    @property
    def send_timeout(self) -> Optional[float]:
        return self._send_timeout

    @property
    def receive_timeout(self) -> Optional[float]:
        return self._receive_timeout

    def connect(self) -> "UsbmuxSocket":
        """
        Connect to the usbmuxd socket

        Returns:
            self

        Raises:
            UsbmuxIOError: If the daemon is not reachable
        """
        if self._state == SocketState.CONNECTED:
            logger.warning("usbmuxd socket already connected")
            return self

        # A socket left in ERROR may hold part of a frame; never reuse it
        self.close()

        path = self.config.socket_path
        sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        try:
            sock.connect(path)
        except OSError as e:
            sock.close()
            self._state = SocketState.ERROR
            raise UsbmuxIOError(f"Cannot connect to usbmuxd at {path}: {e}") from e

        self._socket = sock
        self._state = SocketState.CONNECTED
        logger.info(f"Connected to usbmuxd at {path}")
        return self

    def set_send_timeout(self, timeout: Optional[float]) -> None:
        """
        Set the send timeout

        Args:
            timeout: Seconds, or None to block indefinitely. Zero is invalid.

        Raises:
            UsbmuxIOError: If timeout is zero or negative
        """
        self._send_timeout = _check_timeout(timeout)

    def set_receive_timeout(self, timeout: Optional[float]) -> None:
        """
        Set the receive timeout

        Args:
            timeout: Seconds, or None to block indefinitely. Zero is invalid.

        Raises:
            UsbmuxIOError: If timeout is zero or negative
        """
        self._receive_timeout = _check_timeout(timeout)

    def _require_connected(self) -> socket.socket:
        if self._socket is None or self._state != SocketState.CONNECTED:
            raise UsbmuxIOError(f"usbmuxd socket not connected ({self._state.value})")
        return self._socket

    def send(self, message: Any) -> None:
        """
        Send a plist message

        Raises:
            SerializationError: If message cannot be serialized
            UsbmuxIOError: If send operation fails
        """
        sock = self._require_connected()
        data = pack_message(message)

        try:
            sock.settimeout(self._send_timeout)
            sock.sendall(data)
        except socket.timeout as e:
            self._state = SocketState.ERROR
            raise UsbmuxIOError("Send timeout") from e
        except OSError as e:
            self._state = SocketState.ERROR
            raise UsbmuxIOError(f"Send error: {e}") from e

        logger.debug(f"Sent {len(data)} bytes")

    def _recv_exact(self, size: int) -> bytes:
        sock = self._require_connected()
        data = bytearray()

        try:
            sock.settimeout(self._receive_timeout)
            while len(data) < size:
                chunk = sock.recv(min(size - len(data), self.config.buffer_size))
                if not chunk:
                    raise UsbmuxIOError(
                        f"Connection closed by usbmuxd after {len(data)}/{size} bytes"
                    )
                data.extend(chunk)
        except socket.timeout as e:
            self._fail(f"Receive timeout after {len(data)}/{size} bytes")
            raise UsbmuxIOError("Receive timeout") from e
        except UsbmuxIOError as e:
            self._fail(e.message)
            raise
        except OSError as e:
            self._fail(f"Receive error: {e}")
            raise UsbmuxIOError(f"Receive error: {e}") from e

        return bytes(data)

    def _fail(self, reason: str) -> None:
        logger.warning(f"usbmuxd socket unusable: {reason}")
        self._state = SocketState.ERROR

    def receive(self) -> Any:
        """
        Receive one plist message

        Raises:
            UsbmuxIOError: On timeout, EOF or socket error
            UnexpectedFormatError: If the frame header is malformed
            SerializationError: If the payload is not a valid plist
        """
        try:
            payload = read_frame(self._recv_exact)
        except UnexpectedFormatError as e:
            self._fail(e.message)
            raise

        logger.debug(f"Received {len(payload)} byte payload")
        return decode_message(payload)

    def request(self, message: Any) -> Any:
        """Send a message and receive the reply"""
        self.send(message)
        return self.receive()

    def detach(
        self, device_id: Optional[int] = None, port: Optional[int] = None
    ) -> DeviceStream:
        """
        Hand the socket off as a raw device stream

        The UsbmuxSocket becomes unusable; the stream owns the socket.
        """
        sock = self._require_connected()
        sock.settimeout(None)
        self._socket = None
        self._state = SocketState.DETACHED
        logger.info(f"usbmuxd socket detached as stream to device {device_id} port {port}")
        return DeviceStream(sock, device_id, port, buffer_size=self.config.buffer_size)

    def close(self) -> None:
        """Close socket connection"""
        if self._socket is None:
            return

        try:
            self._socket.close()
        except OSError:
            pass  # Ignore close errors

        self._socket = None
        if self._state != SocketState.DETACHED:
            self._state = SocketState.DISCONNECTED
        logger.debug("usbmuxd socket closed")

    def __enter__(self) -> "UsbmuxSocket":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
