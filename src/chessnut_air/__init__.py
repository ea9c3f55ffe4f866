"""Chessnut Air BLE driver package.

  Pure Python package for communicating with Chessnut Air electronic chessboards.
  """

from .controller import DEFAULT_RESPONSE_TIMEOUT, BoardController, PendingResponse
from .device import ChessnutAir
from .events import EventChannel
from .exceptions import (
    AdapterUnavailableError,
    BLEConnectionError,
    BLETimeoutError,
    CharacteristicNotFoundError,
    ChessnutError,
    DecodingError,
    DeviceNotFoundError,
    InvalidResponseError,
    InvalidSquareError,
    NotConnectedError,
    ProtocolError,
    ResponseTimeoutError,
)
from .models import (
    AdapterState,
    BatteryStatus,
    BoardState,
    Button,
    ConnectionState,
)
from .protocol import (
    DEVICE_NAME,
    Characteristic,
    Command,
    ResponseHeader,
    encode_led_payload,
)
from .transport import BleakTransport, Transport

__version__ = "0.1.0"

__all__ = [
    # Main API
    "ChessnutAir",
    "BoardController",
    "PendingResponse",
    "EventChannel",
    "DEFAULT_RESPONSE_TIMEOUT",
    # Transport
    "Transport",
    "BleakTransport",
    # Exceptions
    "ChessnutError",
    "BLEConnectionError",
    "BLETimeoutError",
    "AdapterUnavailableError",
    "DeviceNotFoundError",
    "CharacteristicNotFoundError",
    "ResponseTimeoutError",
    "NotConnectedError",
    "ProtocolError",
    "InvalidResponseError",
    "DecodingError",
    "InvalidSquareError",
    # Models
    "AdapterState",
    "BatteryStatus",
    "BoardState",
    "Button",
    "ConnectionState",
    # Protocol
    "Characteristic",
    "Command",
    "ResponseHeader",
    "encode_led_payload",
    # Constants
    "DEVICE_NAME",
]
