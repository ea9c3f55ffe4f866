"""BLE protocol commands for Chessnut Air boards."""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum

from .leds import encode_led_payload


class Characteristic(str, Enum):
    """GATT characteristics used by the board."""

    WRITE = "1b7e8272-2877-41c3-b46e-cf057c562023"        # Commands to the board
    READ_MISC = "1b7e8273-2877-41c3-b46e-cf057c562023"    # Replies and button events
    READ_BOARD = "1b7e8262-2877-41c3-b46e-cf057c562023"   # Board snapshots
    READ_OTB = "1b7e8283-2877-41c3-b46e-cf057c562023"     # Stored game data


# Channels that are subscribed for notifications after connect
NOTIFY_CHARACTERISTICS = (
    Characteristic.READ_OTB,
    Characteristic.READ_MISC,
    Characteristic.READ_BOARD,
)


class Command(bytes, Enum):
    """Command byte sequences: [opcode][length][argument]."""

    ACTION_DATA_TRANSFER = b"\x34\x01\x00"
    ACTION_NEWEST_DATA_TRANSFER = b"\x34\x01\x01"
    GET_BATTERY_STATUS = b"\x29\x01\x00"
    GET_DEVICE_NAME = b"\x2b\x01\x00"
    GET_DEVICE_TIME = b"\x26\x01\x00"
    INIT = b"\x21\x01\x00"
    IS_APP_READY = b"\x33\x01\x00"
    MAYBE_WIPE_OTB = b"\x39\x01\x00"
    QUERY_OTB = b"\x31\x01\x00"
    SET_LED = b"\x0a\x08"                # Followed by the 8-byte LED payload
    SET_OTB_UPLOAD_MODE = b"\x21\x01\x01"


class ResponseHeader(bytes, Enum):
    """2-byte tags at the start of every notification."""

    BOARD = b"\x01\x24"
    BUTTON = b"\x0f\x01"
    BATTERY_STATUS = b"\x2a\x02"
    DEVICE_NAME = b"\x2c\x0d"


# Protocol constants
DEVICE_NAME = "Chessnut Air"
SNAPSHOT_SIZE = 32  # Board bytes following the header


def build_set_led_command(squares: Iterable[str]) -> bytes:
    """Build command that lights exactly the given squares.

    Args:
        squares: Square names such as ["e2", "e4"]; all others turn off

    Returns:
        Command bytes: 0x0a 0x08 + 8-byte bitmask

    Raises:
        InvalidSquareError: If any square name is invalid
    """
    return bytes(Command.SET_LED) + encode_led_payload(squares)
