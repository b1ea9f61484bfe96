"""
Shared fixtures: a scripted usbmuxd stand-in listening on a temporary
Unix socket.
"""

import os
import shutil
import socket
import tempfile
import threading
from typing import Any, Callable, List, Optional

import pytest

from usbmux_py.core.codec import decode_header, decode_message, pack_message
from usbmux_py.core.protocol import HEADER_SIZE


def recv_exact(conn: socket.socket, size: int) -> Optional[bytes]:
    data = bytearray()
    while len(data) < size:
        chunk = conn.recv(size - len(data))
        if not chunk:
            return None
        data.extend(chunk)
    return bytes(data)


def read_message(conn: socket.socket) -> Any:
    """Read one framed plist message, None on EOF"""
    header = recv_exact(conn, HEADER_SIZE)
    if header is None:
        return None
    payload = recv_exact(conn, decode_header(header).payload_length)
    return decode_message(payload)


def write_message(conn: socket.socket, message: Any) -> None:
    conn.sendall(pack_message(message))


class FakeDaemon:
    """
    Minimal usbmuxd: answers each request with the next scripted reply.

    Once the scripted replies run out, raw_handler (if set) takes over the
    connection, then the connection is drained until the client closes it.
    """

    def __init__(self):
        # Short directory: AF_UNIX paths are limited to ~108 bytes
        self._dir = tempfile.mkdtemp(prefix="umx")
        self.path = os.path.join(self._dir, "usbmuxd")
        self.replies: List[Any] = []
        self.requests: List[Any] = []
        self.raw_handler: Optional[Callable[[socket.socket], None]] = None
        self._stopped = threading.Event()
        self._server = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        self._server.bind(self.path)
        self._server.listen(4)
        self._server.settimeout(0.1)
        self._thread = threading.Thread(target=self._serve, daemon=True)

    def start(self) -> "FakeDaemon":
        self._thread.start()
        return self

    def stop(self) -> None:
        self._stopped.set()
        self._thread.join(timeout=5.0)
        self._server.close()
        shutil.rmtree(self._dir, ignore_errors=True)

    def _serve(self) -> None:
        while not self._stopped.is_set():
            try:
                conn, _ = self._server.accept()
            except socket.timeout:
                continue
            except OSError:
                return
            with conn:
                conn.settimeout(5.0)
                try:
                    self._handle(conn)
                except OSError:
                    pass

    def _handle(self, conn: socket.socket) -> None:
        while self.replies:
            message = read_message(conn)
            if message is None:
                return
            self.requests.append(message)
            write_message(conn, self.replies.pop(0))

        if self.raw_handler is not None:
            self.raw_handler(conn)

        conn.settimeout(0.2)
        while not self._stopped.is_set():
            try:
                if not conn.recv(4096):
                    return
            except socket.timeout:
                continue


@pytest.fixture
def daemon():
    fake = FakeDaemon().start()
    yield fake
    fake.stop()


@pytest.fixture
def socket_pair():
    left, right = socket.socketpair(socket.AF_UNIX, socket.SOCK_STREAM)
    yield left, right
    left.close()
    right.close()
