from __future__ import annotations

from enum import Enum, IntEnum


class ConnectionState(Enum):
    """Lifecycle of a driver session."""
    IDLE = "idle"
    SCANNING = "scanning"
    CONNECTING = "connecting"
    READY = "ready"
    STOPPED = "stopped"


class AdapterState(Enum):
    """Power state reported by the Bluetooth adapter."""
    POWERED_ON = "poweredOn"
    POWERED_OFF = "poweredOff"
    UNAUTHORIZED = "unauthorized"
    UNSUPPORTED = "unsupported"
    RESETTING = "resetting"
    UNKNOWN = "unknown"


class Button(IntEnum):
    """Known button codes sent on the misc channel.

    Codes not listed here are still delivered as plain integers.
    """
    POWER = 1
    PLUS = 2
