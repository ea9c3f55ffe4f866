"""Print name and battery status of a Chessnut Air.

Usage:
    python examples/print_info.py
    python examples/print_info.py --name "My Board"
"""

from __future__ import annotations

import argparse
import asyncio
import logging

from chessnut_air import DEVICE_NAME, ChessnutAir, ChessnutError


async def print_info(name: str) -> None:
    """Connect, query and print device information."""
    async with ChessnutAir(name=name) as board:
        device_name = await board.get_device_name()
        battery = await board.get_battery_status()

    print(f"My Chessnut Air is called {device_name!r}!")
    print(f"It has {battery.percent}% battery left.")
    print(f"It is {'charging' if battery.charging else 'not charging'}.")


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Print Chessnut Air device information.")
    parser.add_argument(
        "--name",
        default=DEVICE_NAME,
        help=f"Advertised board name. Default: {DEVICE_NAME!r}",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging.")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    logging.basicConfig(level=logging.DEBUG if args.debug else logging.WARNING)
    try:
        asyncio.run(print_info(args.name))
    except ChessnutError as err:
        raise SystemExit(f"Error: {err}") from err


if __name__ == "__main__":
    main()
