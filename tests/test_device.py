"""Device parsing tests"""

import pytest

from usbmux_py.core.device import (
    Device,
    DeviceEvent,
    device_event_from_plist,
    device_from_plist,
)
from usbmux_py.core.protocol import MessageType


def properties(**overrides):
    props = {
        "ConnectionSpeed": 480000000,
        "ConnectionType": "USB",
        "DeviceID": 3,
        "LocationID": 336592896,
        "ProductID": 4778,
        "SerialNumber": "fffffffff",
    }
    props.update(overrides)
    return props


def test_device_from_plist():
    assert device_from_plist(properties()) == Device(
        device_id=3,
        product_id=4778,
        location_id=336592896,
        serial_number="fffffffff",
    )


@pytest.mark.parametrize(
    "key", ["DeviceID", "ProductID", "LocationID", "SerialNumber"]
)
def test_missing_field_yields_nothing(key):
    props = properties()
    del props[key]
    assert device_from_plist(props) is None


@pytest.mark.parametrize(
    "key,value",
    [
        ("DeviceID", "3"),
        ("ProductID", 4778.0),
        ("LocationID", True),
        ("SerialNumber", 12345),
        ("SerialNumber", b"fffffffff"),
    ],
)
def test_mistyped_field_yields_nothing(key, value):
    assert device_from_plist(properties(**{key: value})) is None


@pytest.mark.parametrize("value", [None, [], "DeviceID", 3])
def test_non_dictionary_yields_nothing(value):
    assert device_from_plist(value) is None


def test_ids_are_narrowed_to_u32():
    device = device_from_plist(properties(DeviceID=(1 << 32) + 5, LocationID=-1))
    assert device.device_id == 5
    assert device.location_id == 0xFFFFFFFF


def test_device_is_immutable():
    device = device_from_plist(properties())
    with pytest.raises(AttributeError):
        device.device_id = 4


def test_attached_event():
    event = device_event_from_plist(
        {"MessageType": "Attached", "DeviceID": 3, "Properties": properties()}
    )
    assert event.kind is MessageType.ATTACHED
    assert event.attached
    assert event.device_id == 3
    assert event.device.serial_number == "fffffffff"


def test_detached_event():
    event = device_event_from_plist({"MessageType": "Detached", "DeviceID": 3})
    assert event == DeviceEvent(kind=MessageType.DETACHED, device_id=3)
    assert not event.attached


@pytest.mark.parametrize(
    "message",
    [
        {"MessageType": "Result", "Number": 0},
        {"MessageType": "Paired", "DeviceID": 3},
        {"MessageType": "Detached"},
        {"DeviceID": 3},
        ["Attached"],
    ],
)
def test_other_messages_are_not_events(message):
    assert device_event_from_plist(message) is None
