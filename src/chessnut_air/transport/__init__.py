"""BLE transport layer."""

from .base import DisconnectCallback, NotificationCallback, Transport
from .connection import BleakTransport

__all__ = [
    "BleakTransport",
    "DisconnectCallback",
    "NotificationCallback",
    "Transport",
]
