"""LED bitmask encoding."""

from __future__ import annotations

from collections.abc import Iterable

from ..models.board import square_coordinates


def encode_led_payload(squares: Iterable[str]) -> bytes:
    """Encode squares into the 8-byte LED bitmask.

    One byte per rank, rank 8 first; within a byte the a-file is the most
    significant bit (0x80) and the h-file the least (0x01). The result
    replaces the whole LED state, so squares not listed are turned off.

    Args:
        squares: Square names such as ["e2", "e4"]

    Returns:
        8 bytes of LED state

    Raises:
        InvalidSquareError: If a square is not a1-h8
    """
    payload = bytearray(8)
    for square in squares:
        row, col = square_coordinates(square)
        payload[row] |= 1 << col

    return bytes(payload)
