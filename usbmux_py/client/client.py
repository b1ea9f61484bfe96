"""
usbmux client.

UsbmuxClient talks to usbmuxd over one UsbmuxSocket:
- list_devices(): enumerate attached devices
- connect(): open a raw stream to a port on a device
- listen(): follow attach/detach notifications

connect() and listen() repurpose the daemon connection, so they consume the
client. Open a new client for further requests.
"""

import logging
from typing import Any, Dict, Iterator, List, Optional

from usbmux_py.core.device import (
    Device,
    DeviceEvent,
    device_event_from_plist,
    device_from_plist,
)
from usbmux_py.core.errors import (
    DeviceNotConnectedError,
    PortNotAvailableError,
    UnexpectedFormatError,
    UsbmuxIOError,
)
from usbmux_py.core.protocol import MessageType, ResultCode, byte_swap16, message_type
from usbmux_py.core.socket import DeviceStream, UsbmuxSocket

from .config import ClientConfig

logger = logging.getLogger(__name__)


class UsbmuxClient:
    """
    Client for usbmuxd.

    Example:
        >>> client = UsbmuxClient()
        >>> devices = client.list_devices()
        >>> stream = client.connect(devices[0].device_id, 62078)
        >>> stream.send_all(data)
    """

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        transport: Optional[UsbmuxSocket] = None,
    ):
        """
        Connect to usbmuxd.

        Args:
            config: Client configuration (defaults: /var/run/usbmuxd, 1s timeouts)
            transport: Already connected socket to use instead of opening one

        Raises:
            UsbmuxIOError: If the daemon is not reachable or a timeout is invalid
        """
        self.config = config or ClientConfig()
        self.dropped_device_entries = 0

        if transport is None:
            transport = UsbmuxSocket(self.config.socket_config()).connect()
        else:
            transport.set_send_timeout(self.config.send_timeout)
            transport.set_receive_timeout(self.config.receive_timeout)
        self._transport: Optional[UsbmuxSocket] = transport

    @property
    def transport(self) -> UsbmuxSocket:
        """Underlying daemon socket"""
        if self._transport is None:
            raise UsbmuxIOError("Client has been consumed by connect() or listen()")
        return self._transport

    @property
    def consumed(self) -> bool:
        return self._transport is None

    def _message(self, mtype: MessageType, **fields: Any) -> Dict[str, Any]:
        message = message_type(mtype)
        message.update(fields)
        if self.config.prog_name is not None:
            message["ProgName"] = self.config.prog_name
        if self.config.client_version is not None:
            message["ClientVersionString"] = self.config.client_version
        return message

    def _take_transport(self) -> UsbmuxSocket:
        transport = self.transport
        self._transport = None
        return transport

    def list_devices(self) -> List[Device]:
        """
        Return the devices currently attached.

        Entries whose Properties are missing or malformed are skipped; the
        number skipped is kept in ``dropped_device_entries``.

        Raises:
            UnexpectedFormatError: If the reply has no DeviceList array
            UsbmuxIOError: On socket failure
            SerializationError: If the reply is not a valid plist
        """
        reply = self.transport.request(self._message(MessageType.LIST_DEVICES))
        if not isinstance(reply, dict):
            raise UnexpectedFormatError("ListDevices reply is not a dictionary")

        entries = reply.get("DeviceList")
        if not isinstance(entries, list):
            raise UnexpectedFormatError("ListDevices reply has no DeviceList array")

        devices = []
        for entry in entries:
            device = None
            if isinstance(entry, dict):
                device = device_from_plist(entry.get("Properties"))
            if device is None:
                logger.debug(f"Skipping malformed device entry: {entry!r}")
                continue
            devices.append(device)

        self.dropped_device_entries = len(entries) - len(devices)
        logger.debug(
            f"Found {len(devices)} devices ({self.dropped_device_entries} skipped)"
        )
        return devices

    def connect(self, device_id: int, port: int) -> DeviceStream:
        """
        Open a raw stream to a port on a device.

        The client is consumed whatever the outcome. On failure the daemon
        socket is closed.

        Args:
            device_id: Device.device_id of the target device
            port: TCP port on the device (host byte order)

        Returns:
            DeviceStream owning the former daemon socket

        Raises:
            DeviceNotConnectedError: Result code 2
            PortNotAvailableError: Result code 3
            UnexpectedFormatError: Any other reply
            ValueError: If port is outside 0..65535
        """
        wire_port = byte_swap16(port)
        transport = self._take_transport()

        try:
            reply = transport.request(
                self._message(
                    MessageType.CONNECT, DeviceID=device_id, PortNumber=wire_port
                )
            )
            _check_result(reply)
        except Exception:
            transport.close()
            raise

        logger.info(f"Connected to device {device_id} port {port}")
        return transport.detach(device_id, port)

    def listen(self) -> "DeviceEventListener":
        """
        Subscribe to attach/detach notifications.

        The subscription is confirmed before returning. The returned listener
        blocks until the next event and owns the daemon socket; close it (or
        use it as a context manager) when done.

        Raises:
            UnexpectedFormatError: If the daemon does not confirm the subscription
        """
        transport = self._take_transport()

        try:
            _check_result(transport.request(self._message(MessageType.LISTEN)))
            # Notifications arrive whenever devices change
            transport.set_receive_timeout(None)
        except Exception:
            transport.close()
            raise

        logger.info("Listening for device events")
        return DeviceEventListener(transport)

    def close(self) -> None:
        """Close the daemon connection"""
        if self._transport is not None:
            self._transport.close()
            self._transport = None

    def __enter__(self) -> "UsbmuxClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def _check_result(reply: Any) -> None:
    """Map a Result reply to success or the matching exception"""
    if not isinstance(reply, dict):
        raise UnexpectedFormatError("Reply is not a dictionary")

    number = reply.get("Number")
    if isinstance(number, bool) or not isinstance(number, int):
        raise UnexpectedFormatError("Reply has no integer Number")

    if number == ResultCode.OK:
        return
    if number == ResultCode.BAD_DEVICE:
        raise DeviceNotConnectedError()
    if number == ResultCode.CONNECTION_REFUSED:
        raise PortNotAvailableError()
    raise UnexpectedFormatError(f"Unexpected result code {number}")


class DeviceEventListener:
    """
    Iterator over attach/detach notifications

    Owns the daemon socket after a confirmed Listen. The socket is closed by
    close(), on leaving a with block, or when receiving fails.

    Example:
        >>> with client.listen() as events:
        ...     for event in events:
        ...         print(event.kind, event.device_id)
    """

    def __init__(self, transport: UsbmuxSocket):
        self._transport: Optional[UsbmuxSocket] = transport

    @property
    def closed(self) -> bool:
        return self._transport is None

    def __iter__(self) -> Iterator[DeviceEvent]:
        return self

    def __next__(self) -> DeviceEvent:
        if self._transport is None:
            raise StopIteration

        try:
            while True:
                event = device_event_from_plist(self._transport.receive())
                if event is not None:
                    break
        except Exception:
            self.close()
            raise

        logger.debug(f"Device event: {event}")
        return event

    def close(self) -> None:
        """Close the daemon socket"""
        if self._transport is not None:
            self._transport.close()
            self._transport = None

    def __enter__(self) -> "DeviceEventListener":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __del__(self):
        self.close()


def list_devices(config: Optional[ClientConfig] = None) -> List[Device]:
    """List attached devices using a short-lived client"""
    with UsbmuxClient(config) as client:
        return client.list_devices()


def connect_to_device(
    device_id: int, port: int, config: Optional[ClientConfig] = None
) -> DeviceStream:
    """Open a raw stream to a device port using a fresh client"""
    return UsbmuxClient(config).connect(device_id, port)
