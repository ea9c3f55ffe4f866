"""Board position model."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from ..exceptions import InvalidSquareError

FILES: Final = "abcdefgh"
RANKS: Final = "12345678"

# Move state is not reported by the device
POSITION_SUFFIX: Final = " w - - 0 1"


def square_coordinates(square: str) -> tuple[int, int]:
    """Map a square name to its device (row, column).

    Row 0 is rank 8 and row 7 is rank 1. Column 7 is the a-file and
    column 0 the h-file, matching both the snapshot order and the LED
    bitmask layout.

    Raises:
        InvalidSquareError: If square is not exactly a file a-h and rank 1-8
    """
    if not isinstance(square, str) or len(square) != 2:
        raise InvalidSquareError(square)

    file, rank = square[0], square[1]
    if file not in FILES or rank not in RANKS:
        raise InvalidSquareError(square)

    return 7 - RANKS.index(rank), 7 - FILES.index(file)


@dataclass(frozen=True, slots=True)
class BoardState:
    """The 64 squares of one decoded board snapshot.

    Attributes:
        pieces: Piece symbols in device order (None for empty squares)
    """

    pieces: tuple[str | None, ...]

    def __post_init__(self) -> None:
        if len(self.pieces) != 64:
            raise ValueError(f"Board needs 64 squares, got {len(self.pieces)}")

    def piece_at(self, square: str) -> str | None:
        """Return the piece symbol on a square, or None if it is empty."""
        row, col = square_coordinates(square)
        return self.pieces[row * 8 + col]

    @property
    def position(self) -> str:
        """Position string (FEN) with a fixed move-state suffix."""
        ranks = []
        for row in range(8):
            rank = ""
            empty = 0
            for col in range(7, -1, -1):
                piece = self.pieces[row * 8 + col]
                if piece is None:
                    empty += 1
                    continue
                if empty:
                    rank += str(empty)
                    empty = 0
                rank += piece
            if empty:
                rank += str(empty)
            ranks.append(rank)

        return "/".join(ranks) + POSITION_SUFFIX
