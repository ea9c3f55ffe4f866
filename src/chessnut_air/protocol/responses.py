"""Reply payload parsing."""

from __future__ import annotations

from ..exceptions import InvalidResponseError
from ..models.battery import BatteryStatus


def parse_battery_status(payload: bytes) -> BatteryStatus:
    """Parse battery status reply.

    Format: [percent:1][charging:1]

    Raises:
        InvalidResponseError: If payload is shorter than 2 bytes
    """
    if len(payload) < 2:
        raise InvalidResponseError(
            f"Battery status response too short: {len(payload)} bytes (need 2)"
        )

    return BatteryStatus(percent=payload[0], charging=payload[1] == 1)


def parse_device_name(payload: bytes) -> str:
    """Parse device name reply (ASCII, padded)."""
    return payload.decode("ascii", errors="replace").strip("\x00").strip()


def parse_button_event(payload: bytes) -> int | None:
    """Return the button code of a button event, or None if empty."""
    if not payload:
        return None
    return payload[0]
