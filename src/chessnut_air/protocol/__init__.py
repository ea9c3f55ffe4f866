"""BLE protocol implementation."""

from .board import PIECE_LUT, BoardDecoder, decode_snapshot
from .commands import (
    DEVICE_NAME,
    NOTIFY_CHARACTERISTICS,
    SNAPSHOT_SIZE,
    Characteristic,
    Command,
    ResponseHeader,
    build_set_led_command,
)
from .frames import Frame
from .leds import encode_led_payload
from .responses import (
    parse_battery_status,
    parse_button_event,
    parse_device_name,
)

__all__ = [
    "Characteristic",
    "Command",
    "ResponseHeader",
    "DEVICE_NAME",
    "NOTIFY_CHARACTERISTICS",
    "SNAPSHOT_SIZE",
    "PIECE_LUT",
    "BoardDecoder",
    "Frame",
    "build_set_led_command",
    "decode_snapshot",
    "encode_led_payload",
    "parse_battery_status",
    "parse_button_event",
    "parse_device_name",
]
