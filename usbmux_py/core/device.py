"""
Device records parsed from usbmuxd replies.

ListDevices replies and Attached notifications describe a device with a
Properties dictionary:

    {
        "DeviceID": 3,
        "ProductID": 4778,
        "LocationID": 336592896,
        "SerialNumber": "fffffffff",
        "ConnectionType": "USB",
        ...
    }

Parsing is all-or-nothing: a dictionary missing any of the four fields, or
holding a value of the wrong kind, does not produce a Device.
"""

from dataclasses import dataclass
from typing import Any, Optional

from .protocol import MessageType

U32_MASK = 0xFFFFFFFF


@dataclass(frozen=True)
class Device:
    """
    Represents a device attached to usbmuxd

    Attributes:
        device_id: Daemon-assigned device handle, used for Connect
        product_id: USB product id
        location_id: USB location id
        serial_number: Device serial number (UDID)
    """

    device_id: int
    product_id: int
    location_id: int
    serial_number: str


@dataclass(frozen=True)
class DeviceEvent:
    """
    Attach/detach notification received after Listen

    Attributes:
        kind: MessageType.ATTACHED or MessageType.DETACHED
        device_id: Device handle the event refers to
        device: Parsed properties (Attached only, when they parse)
    """

    kind: MessageType
    device_id: int
    device: Optional[Device] = None

    @property
    def attached(self) -> bool:
        return self.kind == MessageType.ATTACHED


def _get_u32(props: dict, key: str) -> Optional[int]:
    value = props.get(key)
    # bool is an int subclass but a plist <true/> is not an id
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value & U32_MASK


def device_from_plist(value: Any) -> Optional[Device]:
    """
    Build a Device from a Properties dictionary

    Args:
        value: Decoded plist value, expected to be a dict

    Returns:
        Device, or None if any required field is missing or mistyped
    """
    if not isinstance(value, dict):
        return None

    device_id = _get_u32(value, "DeviceID")
    product_id = _get_u32(value, "ProductID")
    location_id = _get_u32(value, "LocationID")
    serial_number = value.get("SerialNumber")

    if device_id is None or product_id is None or location_id is None:
        return None
    if not isinstance(serial_number, str):
        return None

    return Device(
        device_id=device_id,
        product_id=product_id,
        location_id=location_id,
        serial_number=serial_number,
    )


def device_event_from_plist(value: Any) -> Optional[DeviceEvent]:
    """
    Build a DeviceEvent from an Attached or Detached message

    Returns:
        DeviceEvent, or None for other message types or a missing DeviceID
    """
    if not isinstance(value, dict):
        return None

    try:
        kind = MessageType(value.get("MessageType"))
    except ValueError:
        return None
    if kind not in (MessageType.ATTACHED, MessageType.DETACHED):
        return None

    device_id = _get_u32(value, "DeviceID")
    if device_id is None:
        return None

    device = None
    if kind == MessageType.ATTACHED:
        device = device_from_plist(value.get("Properties"))

    return DeviceEvent(kind=kind, device_id=device_id, device=device)
