"""Board snapshot decoding."""

from __future__ import annotations

import logging
from typing import Final

from ..exceptions import DecodingError
from ..models.board import BoardState
from .commands import SNAPSHOT_SIZE, ResponseHeader
from .frames import Frame

_LOGGER = logging.getLogger(__name__)

# Nibble value -> piece symbol. White is upper case, black is lower case.
PIECE_LUT: Final[dict[int, str | None]] = {
    0: None,
    1: "q",
    2: "k",
    3: "b",
    4: "p",
    5: "n",
    6: "R",
    7: "P",
    8: "r",
    9: "B",
    10: "N",
    11: "Q",
    12: "K",
}


def _piece(nibble: int) -> str | None:
    try:
        return PIECE_LUT[nibble]
    except KeyError:
        raise DecodingError(f"Unknown piece value {nibble}") from None


def decode_snapshot(snapshot: bytes) -> BoardState:
    """Decode a 32-byte snapshot into 64 squares.

    Each byte holds two squares: the low nibble is the first square and the
    high nibble the second.

    Raises:
        DecodingError: If the snapshot is not 32 bytes or holds an unknown piece
    """
    if len(snapshot) != SNAPSHOT_SIZE:
        raise DecodingError(
            f"Board snapshot must be {SNAPSHOT_SIZE} bytes, got {len(snapshot)}"
        )

    pieces: list[str | None] = []
    for byte in snapshot:
        pieces.append(_piece(byte & 0x0F))
        pieces.append(_piece(byte >> 4))

    return BoardState(tuple(pieces))


class BoardDecoder:
    """Decodes board-channel frames and suppresses repeated snapshots."""

    def __init__(self) -> None:
        self._last_snapshot: bytes | None = None

    def reset(self) -> None:
        """Forget the last accepted snapshot."""
        self._last_snapshot = None

    def feed(self, frame: Frame) -> BoardState | None:
        """Process one board-channel frame.

        Returns:
            The new board, or None if the frame is not a snapshot or repeats
            the previous one

        Raises:
            DecodingError: If the snapshot is truncated or corrupt
        """
        if frame.header != ResponseHeader.BOARD:
            _LOGGER.debug("Ignoring board frame with header %s", frame.header.hex())
            return None

        snapshot = frame.payload[:SNAPSHOT_SIZE]
        if snapshot == self._last_snapshot:
            return None

        board = decode_snapshot(snapshot)
        self._last_snapshot = snapshot
        return board
