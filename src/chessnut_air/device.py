"""Main Chessnut Air device class."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from .controller import DEFAULT_RESPONSE_TIMEOUT, BoardController
from .events import EventChannel
from .models.battery import BatteryStatus
from .models.board import BoardState
from .models.enums import ConnectionState
from .protocol import (
    DEVICE_NAME,
    Command,
    ResponseHeader,
    build_set_led_command,
    parse_battery_status,
    parse_button_event,
    parse_device_name,
)
from .transport import BleakTransport, Transport

_LOGGER = logging.getLogger(__name__)


class ChessnutAir:
    """Chessnut Air electronic chessboard.

    Main API for talking to the board.

    Usage:
        async with ChessnutAir() as board:
            board.change.subscribe(print)
            await board.set_leds(["e2", "e4"])
            status = await board.get_battery_status()

    Channels:
        change: position string, once per distinct board snapshot
        board: decoded BoardState, alongside change
        button: button code (see Button)
        otb_data: raw bytes from the OTB characteristic
        disconnected: None, when the link drops unexpectedly
    """

    def __init__(
            self,
            name: str = DEVICE_NAME,
            transport: Transport | None = None,
            response_timeout: float = DEFAULT_RESPONSE_TIMEOUT,
    ):
        """Initialize Chessnut Air device.

        Args:
            name: Advertised name of the board (default: "Chessnut Air")
            transport: BLE transport (default: BleakTransport)
            response_timeout: Seconds to wait for query replies (default: 0.5)
        """
        self.response_timeout = response_timeout
        self._controller = BoardController(transport or BleakTransport(), name=name)
        self._board_state: BoardState | None = None

        self.change: EventChannel[str] = EventChannel("change")
        self.board: EventChannel[BoardState] = EventChannel("board")
        self.button: EventChannel[int] = EventChannel("button")
        self.otb_data = self._controller.otb_data
        self.disconnected = self._controller.disconnected

        self._controller.board_changed.subscribe(self._on_board_changed)
        self._controller.subscribe_misc(ResponseHeader.BUTTON, self._on_button)

    async def __aenter__(self) -> ChessnutAir:
        """Connect to the board."""
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Disconnect from the board."""
        await self.disconnect()

    @property
    def state(self) -> ConnectionState:
        return self._controller.state

    @property
    def is_connected(self) -> bool:
        return self._controller.is_ready

    @property
    def board_state(self) -> BoardState | None:
        """Last board reported by the device, if any."""
        return self._board_state

    @property
    def position(self) -> str | None:
        """Last position string reported by the device, if any."""
        if self._board_state is None:
            return None
        return self._board_state.position

    async def connect(self) -> None:
        """Scan for the board and connect to it."""
        self._board_state = None
        await self._controller.start()

    async def disconnect(self) -> None:
        """Disconnect from the board."""
        await self._controller.stop()

    async def set_leds(self, squares: Iterable[str]) -> None:
        """Turn on the LEDs of the given squares and turn off all others.

        Args:
            squares: Square names, for example ["e2", "e4"]

        Raises:
            InvalidSquareError: If a square name is invalid (nothing is sent)
            NotConnectedError: If not connected
        """
        await self._controller.send_command(build_set_led_command(squares))

    async def clear_leds(self) -> None:
        """Turn off all LEDs."""
        await self.set_leds(())

    async def get_device_name(self) -> str:
        """Return the name of the device. The name may be changed by the user in the app."""
        payload = await self._controller.request(
            Command.GET_DEVICE_NAME,
            ResponseHeader.DEVICE_NAME,
            timeout=self.response_timeout,
        )
        return parse_device_name(payload)

    async def get_battery_status(self) -> BatteryStatus:
        """Return battery percentage (0-100) and whether the board is charging.

        Raises:
            NotConnectedError: If not connected
            ResponseTimeoutError: If the board does not reply in time
            InvalidResponseError: If the reply is malformed
        """
        payload = await self._controller.request(
            Command.GET_BATTERY_STATUS,
            ResponseHeader.BATTERY_STATUS,
            timeout=self.response_timeout,
        )
        status = parse_battery_status(payload)
        _LOGGER.debug("Battery: %d%%, charging=%s", status.percent, status.charging)
        return status

    def _on_board_changed(self, board: BoardState) -> None:
        self._board_state = board
        self.board.emit(board)
        self.change.emit(board.position)

    def _on_button(self, payload: bytes) -> None:
        code = parse_button_event(payload)
        if code is None:
            _LOGGER.debug("Ignoring empty button event")
            return
        self.button.emit(code)
