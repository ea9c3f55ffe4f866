"""Abstract BLE transport consumed by the controller."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any

from ..models.enums import AdapterState

NotificationCallback = Callable[[bytes], None]
DisconnectCallback = Callable[[], None]


class Transport(ABC):
    """Radio link to a single peripheral.

    Implementations deliver notifications on the event loop thread, in
    arrival order.
    """

    @abstractmethod
    async def adapter_state(self) -> AdapterState:
        """Report whether the Bluetooth adapter is usable."""

    @abstractmethod
    async def scan(self, name: str) -> Any:
        """Scan until a peripheral advertising name is found.

        Scanning is stopped before returning.

        Returns:
            Opaque device handle accepted by connect()
        """

    @abstractmethod
    async def connect(self, device: Any, on_disconnect: DisconnectCallback) -> None:
        """Connect and discover services.

        on_disconnect is called if the link drops without disconnect().
        """

    @abstractmethod
    async def disconnect(self) -> None:
        """Drop the link and all notification subscriptions."""

    @abstractmethod
    def has_characteristic(self, uuid: str) -> bool:
        """Check that the connected peripheral exposes a characteristic."""

    @abstractmethod
    async def subscribe(self, uuid: str, callback: NotificationCallback) -> None:
        """Enable notifications on a characteristic."""

    @abstractmethod
    async def write(self, uuid: str, data: bytes) -> None:
        """Write to a characteristic without requesting a response."""

    @property
    @abstractmethod
    def is_connected(self) -> bool:
        """Check if currently connected."""
