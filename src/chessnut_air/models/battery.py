"""Battery status model."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class BatteryStatus:
    """Battery charge reported by the board."""

    percent: int
    charging: bool
