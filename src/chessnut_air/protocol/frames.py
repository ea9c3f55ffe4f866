"""Notification frame splitting."""

from __future__ import annotations

from dataclasses import dataclass

HEADER_SIZE = 2


@dataclass(frozen=True, slots=True)
class Frame:
    """One notification split into header tag and payload."""

    header: bytes
    payload: bytes

    @classmethod
    def parse(cls, data: bytes) -> Frame:
        """Split raw notification data at the header boundary."""
        data = bytes(data)
        return cls(header=data[:HEADER_SIZE], payload=data[HEADER_SIZE:])
