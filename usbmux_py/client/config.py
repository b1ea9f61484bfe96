"""
Configuration for usbmux client.

This module contains the configuration dataclass for the usbmux client.
"""

import os
from dataclasses import dataclass
from typing import Optional, Mapping

from usbmux_py.core.protocol import DEFAULT_SOCKET_PATH, SOCKET_ADDRESS_ENV
from usbmux_py.core.socket import SocketConfig


@dataclass
class ClientConfig:
    """
    Configuration for usbmux client.
    """
    # Connection settings
    socket_path: str = DEFAULT_SOCKET_PATH

    # Timeouts in seconds (None = block indefinitely, zero is rejected)
    send_timeout: Optional[float] = 1.0
    receive_timeout: Optional[float] = 1.0

    # Client identification sent with every request (omitted when None)
    prog_name: Optional[str] = None
    client_version: Optional[str] = None

    @classmethod
    def from_env(
        cls, environ: Optional[Mapping[str, str]] = None, **overrides
    ) -> "ClientConfig":
        """
        Create configuration honoring USBMUXD_SOCKET_ADDRESS

        Accepts "UNIX:/path/to/socket" or a plain filesystem path.

        Raises:
            ValueError: If the variable names a TCP address
        """
        environ = os.environ if environ is None else environ
        address = environ.get(SOCKET_ADDRESS_ENV, "").strip()
        if address:
            if address.upper().startswith("UNIX:"):
                overrides.setdefault("socket_path", address[5:])
            elif address.startswith("/") or address.startswith("."):
                overrides.setdefault("socket_path", address)
            else:
                raise ValueError(
                    f"Unsupported {SOCKET_ADDRESS_ENV} value {address!r}: "
                    "only Unix socket paths are supported"
                )
        return cls(**overrides)

    def socket_config(self) -> SocketConfig:
        """Socket configuration for the daemon connection"""
        return SocketConfig(
            socket_path=self.socket_path,
            send_timeout=self.send_timeout,
            receive_timeout=self.receive_timeout,
        )


__all__ = [
    "ClientConfig",
]
