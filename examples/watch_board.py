"""Print board positions as Lichess analysis links and report button presses.

Plays a short LED animation after connecting.

Usage:
    python examples/watch_board.py --duration 60
"""

from __future__ import annotations

import argparse
import asyncio
from datetime import datetime
from urllib.parse import quote

from chessnut_air import Button, ChessnutAir

LICHESS_ANALYSIS = "https://lichess.org/analysis/fromPosition/"

# Rings going in
ANIMATION = [
    ["a1", "b1", "c1", "d1", "e1", "f1", "g1", "h1", "b8", "c8", "d8", "e8", "f8", "g8",
     "h8", "a2", "a3", "a4", "a5", "a6", "a7", "a8", "h7", "h6", "h5", "h4", "h3", "h2"],
    ["b2", "c2", "d2", "e2", "f2", "g2", "b3", "b4", "b5", "b6", "b7", "c7", "d7", "e7",
     "f7", "g7", "g6", "g5", "g4", "g3"],
    ["c3", "d3", "e3", "f3", "c4", "c5", "c6", "d6", "e6", "f6", "f5", "f4"],
    ["d4", "e4", "d5", "e5"],
]


def _timestamp() -> str:
    return datetime.now().strftime("%H:%M:%S")


def _print_position(position: str) -> None:
    print(f"[{_timestamp()}] {LICHESS_ANALYSIS}{quote(position)}")


def _print_button(code: int) -> None:
    try:
        name = Button(code).name
    except ValueError:
        name = f"unknown ({code})"
    print(f"[{_timestamp()}] button {name}")


async def watch(duration: float) -> None:
    """Play a short LED animation, then print events until duration elapses."""
    async with ChessnutAir() as board:
        for frame in ANIMATION:
            await board.set_leds(frame)
            await asyncio.sleep(0.2)
        await board.clear_leds()

        board.change.subscribe(_print_position)
        board.button.subscribe(_print_button)
        stopped = asyncio.Event()
        board.disconnected.subscribe(lambda _: stopped.set())

        timeout = duration if duration > 0 else None
        try:
            await asyncio.wait_for(stopped.wait(), timeout=timeout)
            print("Board disconnected")
        except asyncio.TimeoutError:
            pass


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Watch a Chessnut Air board.")
    parser.add_argument(
        "--duration",
        type=float,
        default=60.0,
        help="Watch duration in seconds (0 = run until Ctrl+C). Default: 60",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    try:
        asyncio.run(watch(duration=args.duration))
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
