"""BLE connection management."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from bleak import BleakClient, BleakScanner
from bleak.exc import BleakBluetoothNotAvailableError, BleakError
from bleak_retry_connector import BleakClientWithServiceCache, establish_connection

from ..exceptions import BLEConnectionError, BLETimeoutError, DeviceNotFoundError
from ..models.enums import AdapterState
from .base import DisconnectCallback, NotificationCallback, Transport

if TYPE_CHECKING:
    from bleak.backends.device import BLEDevice
    from bleak.backends.scanner import AdvertisementData

_LOGGER = logging.getLogger(__name__)

# bleak's "not available" reasons, by name
_REASON_STATES = {
    "NO_BLUETOOTH": AdapterState.UNSUPPORTED,
    "POWERED_OFF": AdapterState.POWERED_OFF,
    "DENIED_BY_USER": AdapterState.UNAUTHORIZED,
    "DENIED_BY_SYSTEM": AdapterState.UNAUTHORIZED,
}


def advertised_name_matches(local_name: str | None, expected: str) -> bool:
    """Compare an advertised local name with the expected device name."""
    return local_name is not None and local_name.strip() == expected.strip()


class BleakTransport(Transport):
    """Transport backed by bleak.

    Features:
    - Automatic retry logic with bleak-retry-connector
    - Service caching for faster reconnections
    - Notifications forwarded as bytes on the event loop
    """

    def __init__(
            self,
            timeout: float = 10.0,
            max_attempts: int = 4,
            use_services_cache: bool = True,
            scan_timeout: float | None = None,
    ):
        """Initialize BLE transport.

        Args:
            timeout: Connection timeout in seconds (default: 10)
            max_attempts: Maximum connection attempts for bleak-retry-connector (default: 4)
            use_services_cache: Enable GATT service caching for faster reconnections (default: True)
            scan_timeout: Give up scanning after this many seconds (default: scan forever)
        """
        self.timeout = timeout
        self.max_attempts = max_attempts
        self.use_services_cache = use_services_cache
        self.scan_timeout = scan_timeout

        self._client: BleakClient | None = None
        self._closing = False

    async def adapter_state(self) -> AdapterState:
        """Probe the adapter by briefly starting a scanner."""
        scanner = BleakScanner()
        try:
            await scanner.start()
        except BleakBluetoothNotAvailableError as e:
            reason = getattr(getattr(e, "reason", None), "name", "")
            _LOGGER.debug("Bluetooth not available: %s (%s)", e, reason)
            return _REASON_STATES.get(reason, AdapterState.UNKNOWN)
        except BleakError as e:
            _LOGGER.debug("Adapter probe failed: %s", e)
            return AdapterState.UNKNOWN

        await scanner.stop()
        return AdapterState.POWERED_ON

    async def scan(self, name: str) -> BLEDevice:
        """Scan until a device advertising name is found.

        Raises:
            DeviceNotFoundError: If scan_timeout elapses first
            BLEConnectionError: If scanning fails
        """
        loop = asyncio.get_running_loop()
        found: asyncio.Future[BLEDevice] = loop.create_future()

        def detection_callback(device: BLEDevice, advertisement: AdvertisementData) -> None:
            if found.done():
                return
            if not advertised_name_matches(advertisement.local_name, name):
                return
            _LOGGER.debug("Found %s at %s", name, device.address)
            found.set_result(device)

        scanner = BleakScanner(detection_callback=detection_callback)
        try:
            await scanner.start()
        except BleakError as e:
            raise BLEConnectionError(f"Failed to start scanning: {e}") from e

        try:
            return await asyncio.wait_for(found, timeout=self.scan_timeout)
        except asyncio.TimeoutError as e:
            raise DeviceNotFoundError(name) from e
        finally:
            await scanner.stop()

    async def connect(self, device: BLEDevice, on_disconnect: DisconnectCallback) -> None:
        """Establish BLE connection to device.

        Raises:
            BLEConnectionError: If connection fails
            BLETimeoutError: If connection times out
        """
        if self._client and self._client.is_connected:
            return  # Already connected

        def disconnected_callback(client: BleakClient) -> None:
            self._client = None
            if self._closing:
                return
            _LOGGER.info("Lost connection to %s", device.address)
            on_disconnect()

        try:
            _LOGGER.debug(
                "Connecting to %s with bleak-retry-connector (max_attempts=%d)",
                device.address,
                self.max_attempts
            )

            self._closing = False
            self._client = await establish_connection(
                client_class=BleakClientWithServiceCache,
                device=device,
                name=device.name or device.address,
                disconnected_callback=disconnected_callback,
                max_attempts=self.max_attempts,
                use_services_cache=self.use_services_cache,
                timeout=self.timeout,
            )

            _LOGGER.debug("Connected to %s", device.address)

        except asyncio.TimeoutError as e:
            raise BLETimeoutError(
                f"Connection timeout after {self.timeout}s"
            ) from e
        except Exception as e:
            raise BLEConnectionError(
                f"Failed to connect: {e}"
            ) from e

    async def disconnect(self) -> None:
        """Disconnect from device."""
        if self._client and self._client.is_connected:
            self._closing = True
            try:
                _LOGGER.debug("Disconnecting from %s", self._client.address)
                await self._client.disconnect()
            except Exception as e:
                _LOGGER.warning("Error during disconnect: %s", e)
            finally:
                self._client = None

    def has_characteristic(self, uuid: str) -> bool:
        if not self._client:
            return False
        return self._client.services.get_characteristic(uuid) is not None

    async def subscribe(self, uuid: str, callback: NotificationCallback) -> None:
        """Start notifications on a characteristic.

        Raises:
            BLEConnectionError: If not connected or subscription fails
        """
        if not self._client or not self._client.is_connected:
            raise BLEConnectionError("Not connected")

        def notification_callback(sender, data: bytearray) -> None:
            callback(bytes(data))

        try:
            await self._client.start_notify(uuid, notification_callback)
        except BleakError as e:
            raise BLEConnectionError(f"Failed to subscribe to {uuid}: {e}") from e

        _LOGGER.debug("Notifications started on %s", uuid)

    async def write(self, uuid: str, data: bytes) -> None:
        """Write command to device.

        Raises:
            BLEConnectionError: If not connected or write fails
        """
        if not self._client or not self._client.is_connected:
            raise BLEConnectionError("Not connected")

        try:
            await self._client.write_gatt_char(uuid, data, response=False)
        except Exception as e:
            raise BLEConnectionError(f"Write failed: {e}") from e

    @property
    def is_connected(self) -> bool:
        """Check if currently connected to device."""
        return self._client is not None and self._client.is_connected
