"""Exceptions raised by the Chessnut Air driver."""

from __future__ import annotations


class ChessnutError(Exception):
    """Base exception for all Chessnut Air errors."""


class BLEConnectionError(ChessnutError):
    """BLE link could not be established or used."""


class AdapterUnavailableError(BLEConnectionError):
    """Bluetooth adapter is not powered on."""

    def __init__(self, state: object):
        self.state = state
        super().__init__(f"Bluetooth adapter unavailable (state: {state})")


class DeviceNotFoundError(BLEConnectionError):
    """No peripheral advertising the expected name was found."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"No device named {name!r} found during scan")


class CharacteristicNotFoundError(BLEConnectionError):
    """Connected peripheral lacks one of the required characteristics."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"{name} characteristic not found")


class BLETimeoutError(ChessnutError):
    """BLE operation timed out."""


class ResponseTimeoutError(BLETimeoutError):
    """No reply with the expected header arrived in time."""

    def __init__(self, header: bytes, timeout: float):
        self.header = header
        self.timeout = timeout
        super().__init__(
            f"Timeout while waiting for response with header {header.hex()} ({timeout}s)"
        )


class NotConnectedError(ChessnutError):
    """Operation requires a ready connection."""


class ProtocolError(ChessnutError):
    """Device sent data that violates the protocol."""


class InvalidResponseError(ProtocolError):
    """Reply payload has an unexpected shape."""


class DecodingError(ProtocolError):
    """Board snapshot could not be decoded.

    Raised for integrity violations (unknown piece nibble, truncated
    snapshot). These never occur with a healthy board and are not retried.
    """


class InvalidSquareError(ChessnutError, ValueError):
    """Square name is not a valid a1-h8 coordinate."""

    def __init__(self, square: object):
        self.square = square
        super().__init__(f"Invalid square {square!r}")
