"""
Exceptions for usbmux communication

Every failure raised by this package is a UsbmuxError carrying an ErrorKind.
I/O and serialization errors keep the original exception as their cause
(``raise ... from exc``), which is exposed through ``UsbmuxError.cause``.
"""

from enum import Enum
from typing import Optional


class ErrorKind(Enum):
    """Kind of usbmux failure"""

    IO = "io"
    SERIALIZATION = "serialization"
    UNEXPECTED_FORMAT = "unexpected format"
    DEVICE_NOT_CONNECTED = "device is not connected"
    PORT_NOT_AVAILABLE = "port is not available"


class UsbmuxError(Exception):
    """
    Base exception for usbmux operations

    Attributes:
        kind: Error kind
        message: Human readable description
    """

    kind: ErrorKind = ErrorKind.IO

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.kind.value
        super().__init__(self.message)

    @property
    def cause(self) -> Optional[BaseException]:
        """Underlying exception, if any"""
        return self.__cause__


class UsbmuxIOError(UsbmuxError):
    """Exception raised when socket connect/read/write fails or times out"""

    kind = ErrorKind.IO


class SerializationError(UsbmuxError):
    """Exception raised when a property list cannot be encoded or decoded"""

    kind = ErrorKind.SERIALIZATION


class UnexpectedFormatError(UsbmuxError):
    """Exception raised when a response does not have the expected shape"""

    kind = ErrorKind.UNEXPECTED_FORMAT


class DeviceNotConnectedError(UsbmuxError):
    """Exception raised when the requested device is not attached"""

    kind = ErrorKind.DEVICE_NOT_CONNECTED


class PortNotAvailableError(UsbmuxError):
    """Exception raised when the device refuses a connection to the port"""

    kind = ErrorKind.PORT_NOT_AVAILABLE
