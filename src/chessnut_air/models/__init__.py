"""Data models for Chessnut Air boards."""

from .battery import BatteryStatus
from .board import POSITION_SUFFIX, BoardState, square_coordinates
from .enums import AdapterState, Button, ConnectionState

__all__ = [
    "AdapterState",
    "BatteryStatus",
    "BoardState",
    "Button",
    "ConnectionState",
    "POSITION_SUFFIX",
    "square_coordinates",
]
