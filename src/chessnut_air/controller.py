"""Connection lifecycle and command/response correlation."""

from __future__ import annotations

import asyncio
import logging
from collections import deque
from collections.abc import Callable, Generator
from typing import Any

from .events import EventChannel
from .exceptions import (
    AdapterUnavailableError,
    CharacteristicNotFoundError,
    ChessnutError,
    NotConnectedError,
    ResponseTimeoutError,
)
from .models.board import BoardState
from .models.enums import AdapterState, ConnectionState
from .protocol import (
    DEVICE_NAME,
    NOTIFY_CHARACTERISTICS,
    BoardDecoder,
    Characteristic,
    Command,
    Frame,
)
from .transport import Transport

_LOGGER = logging.getLogger(__name__)

DEFAULT_RESPONSE_TIMEOUT = 0.5  # seconds


class PendingResponse:
    """A caller waiting for a misc-channel reply with a given header.

    Await the object to get the reply payload. The deadline starts when the
    wait is registered, not when it is awaited.
    """

    def __init__(
            self,
            header: bytes,
            timeout: float,
            release: Callable[[PendingResponse], None],
    ):
        loop = asyncio.get_running_loop()
        self.header = header
        self.timeout = timeout
        self._release = release
        self._future: asyncio.Future[bytes] = loop.create_future()
        self._timer = loop.call_later(timeout, self._expire)
        # Also covers the awaiting task being cancelled from outside
        self._future.add_done_callback(lambda _: self._finish())

    def __await__(self) -> Generator[Any, None, bytes]:
        return self._future.__await__()

    @property
    def done(self) -> bool:
        return self._future.done()

    def resolve(self, payload: bytes) -> None:
        if self._future.done():
            return
        self._future.set_result(payload)
        self._finish()

    def fail(self, exc: BaseException) -> None:
        if self._future.done():
            return
        self._future.set_exception(exc)
        self._finish()

    def cancel(self) -> None:
        """Withdraw the wait without resolving it."""
        if self._future.done():
            return
        self._future.cancel()
        self._finish()

    def _expire(self) -> None:
        self.fail(ResponseTimeoutError(self.header, self.timeout))

    def _finish(self) -> None:
        self._timer.cancel()
        self._release(self)


class BoardController:
    """Owns the transport and routes its notifications.

    Channels:
        board_changed: BoardState, once per distinct snapshot
        otb_data: raw bytes from the OTB characteristic
        disconnected: None, when the link drops unexpectedly
    """

    def __init__(self, transport: Transport, name: str = DEVICE_NAME):
        self.name = name
        self._transport = transport
        self._state = ConnectionState.IDLE
        self._decoder = BoardDecoder()
        self._pending: dict[bytes, deque[PendingResponse]] = {}
        self._misc_handlers: dict[bytes, EventChannel[bytes]] = {}

        self.board_changed: EventChannel[BoardState] = EventChannel("board_changed")
        self.otb_data: EventChannel[bytes] = EventChannel("otb_data")
        self.disconnected: EventChannel[None] = EventChannel("disconnected")

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def is_ready(self) -> bool:
        return self._state is ConnectionState.READY

    def _set_state(self, state: ConnectionState) -> None:
        if state is not self._state:
            _LOGGER.debug("State %s -> %s", self._state.name, state.name)
            self._state = state

    async def start(self) -> None:
        """Find, connect and initialize the board.

        Raises:
            AdapterUnavailableError: If the adapter is not powered on
            DeviceNotFoundError: If the transport gives up scanning
            CharacteristicNotFoundError: If the board lacks a required characteristic
            BLEConnectionError: If connecting or subscribing fails
        """
        if self._state is ConnectionState.READY:
            return
        if self._state not in (ConnectionState.IDLE, ConnectionState.STOPPED):
            raise ChessnutError(f"Cannot start while {self._state.name}")

        self._decoder.reset()

        adapter_state = await self._transport.adapter_state()
        if adapter_state is not AdapterState.POWERED_ON:
            raise AdapterUnavailableError(adapter_state)

        self._set_state(ConnectionState.SCANNING)
        try:
            device = await self._transport.scan(self.name)

            self._set_state(ConnectionState.CONNECTING)
            await self._transport.connect(device, self._on_link_lost)
            await self._setup()
        except BaseException:
            self._set_state(ConnectionState.STOPPED)
            await self._transport.disconnect()
            raise

        self._set_state(ConnectionState.READY)
        _LOGGER.info("Connected to %s", self.name)

    async def _setup(self) -> None:
        for characteristic in Characteristic:
            if not self._transport.has_characteristic(characteristic.value):
                raise CharacteristicNotFoundError(characteristic.name)

        callbacks = {
            Characteristic.READ_OTB: self._on_otb_data,
            Characteristic.READ_MISC: self._on_misc_data,
            Characteristic.READ_BOARD: self._on_board_data,
        }
        for characteristic in NOTIFY_CHARACTERISTICS:
            await self._transport.subscribe(characteristic.value, callbacks[characteristic])

        await self._transport.write(Characteristic.WRITE.value, bytes(Command.INIT))

    async def stop(self) -> None:
        """Disconnect and fail any outstanding waits."""
        self._set_state(ConnectionState.STOPPED)
        self._fail_pending(NotConnectedError("Connection stopped"))
        self._decoder.reset()
        await self._transport.disconnect()
        _LOGGER.info("Disconnected from %s", self.name)

    async def send_command(self, data: bytes) -> None:
        """Write a command to the board.

        Raises:
            NotConnectedError: If the connection is not ready
            BLEConnectionError: If the write fails
        """
        if self._state is not ConnectionState.READY:
            raise NotConnectedError("Cannot send command before board is connected")

        _LOGGER.debug("Sending %s", bytes(data).hex())
        await self._transport.write(Characteristic.WRITE.value, bytes(data))

    def wait_for_response(
            self,
            header: bytes,
            timeout: float = DEFAULT_RESPONSE_TIMEOUT,
    ) -> PendingResponse:
        """Register a wait for the next misc reply with header.

        Register before sending the command so a fast reply is not missed.
        Waits on the same header are served in registration order.
        """
        header = bytes(header)
        pending = PendingResponse(header, timeout, self._release)
        self._pending.setdefault(header, deque()).append(pending)
        return pending

    async def request(
            self,
            command: bytes,
            header: bytes,
            timeout: float = DEFAULT_RESPONSE_TIMEOUT,
    ) -> bytes:
        """Send a command and return the payload of its reply.

        Raises:
            NotConnectedError: If the connection is not ready
            ResponseTimeoutError: If no reply arrives within timeout
        """
        pending = self.wait_for_response(header, timeout)
        try:
            await self.send_command(command)
        except BaseException:
            pending.cancel()
            raise
        return await pending

    def subscribe_misc(self, header: bytes, handler: Callable[[bytes], None]) -> Callable[[], None]:
        """Receive payloads of unsolicited misc frames with header.

        Returns:
            Callable that removes the handler again
        """
        header = bytes(header)
        channel = self._misc_handlers.get(header)
        if channel is None:
            channel = self._misc_handlers[header] = EventChannel(f"misc:{header.hex()}")
        return channel.subscribe(handler)

    def _release(self, pending: PendingResponse) -> None:
        waiters = self._pending.get(pending.header)
        if not waiters:
            return
        try:
            waiters.remove(pending)
        except ValueError:
            pass
        if not waiters:
            del self._pending[pending.header]

    def _fail_pending(self, exc: ChessnutError) -> None:
        for waiters in list(self._pending.values()):
            for pending in list(waiters):
                pending.fail(exc)
        self._pending.clear()

    def _on_link_lost(self) -> None:
        self._set_state(ConnectionState.STOPPED)
        self._fail_pending(NotConnectedError("Connection lost"))
        self._decoder.reset()
        self.disconnected.emit(None)

    def _on_board_data(self, data: bytes) -> None:
        board = self._decoder.feed(Frame.parse(data))
        if board is not None:
            self.board_changed.emit(board)

    def _on_misc_data(self, data: bytes) -> None:
        frame = Frame.parse(data)

        waiters = self._pending.get(frame.header)
        live = next((p for p in waiters or () if not p.done), None)
        if live is not None:
            live.resolve(frame.payload)
            return

        channel = self._misc_handlers.get(frame.header)
        if channel is not None and channel.emit(frame.payload):
            return

        _LOGGER.debug("Dropping unhandled misc data %s", data.hex())

    def _on_otb_data(self, data: bytes) -> None:
        if not self.otb_data.emit(data):
            _LOGGER.debug("Dropping unhandled OTB data (%d bytes)", len(data))
