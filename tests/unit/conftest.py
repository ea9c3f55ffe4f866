"""Shared fixtures for unit tests."""

from __future__ import annotations

import pytest

from chessnut_air.models.enums import AdapterState
from chessnut_air.protocol.commands import Characteristic
from chessnut_air.transport.base import Transport

ALL_CHARACTERISTICS = {c.value for c in Characteristic}


class FakeTransport(Transport):
    """In-memory transport that records writes and replays replies."""

    def __init__(
            self,
            adapter: AdapterState = AdapterState.POWERED_ON,
            characteristics: set[str] | None = None,
    ):
        self.adapter = adapter
        self.characteristics = ALL_CHARACTERISTICS if characteristics is None else characteristics
        self.replies: dict[bytes, list[tuple[str, bytes]]] = {}
        self.written: list[bytes] = []
        self.subscriptions: dict[str, object] = {}
        self.scanned_for: str | None = None
        self.disconnects = 0
        self._connected = False
        self._on_disconnect = None

    async def adapter_state(self) -> AdapterState:
        return self.adapter

    async def scan(self, name: str) -> str:
        self.scanned_for = name
        return "AA:BB:CC:DD:EE:FF"

    async def connect(self, device, on_disconnect) -> None:
        self._connected = True
        self._on_disconnect = on_disconnect

    async def disconnect(self) -> None:
        self.disconnects += 1
        self._connected = False
        self.subscriptions.clear()

    def has_characteristic(self, uuid: str) -> bool:
        return uuid in self.characteristics

    async def subscribe(self, uuid: str, callback) -> None:
        self.subscriptions[uuid] = callback

    async def write(self, uuid: str, data: bytes) -> None:
        assert uuid == Characteristic.WRITE.value
        self.written.append(data)
        for channel, reply in self.replies.get(data, []):
            self.notify(channel, reply)

    @property
    def is_connected(self) -> bool:
        return self._connected

    def notify(self, uuid: str, data: bytes) -> None:
        """Deliver a notification as the device would."""
        self.subscriptions[uuid](data)

    def drop_link(self) -> None:
        """Simulate the board going out of range."""
        self._connected = False
        self._on_disconnect()


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()
