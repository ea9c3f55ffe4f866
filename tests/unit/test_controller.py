"""Test BoardController lifecycle, correlation and dispatch."""

from __future__ import annotations

import asyncio

import pytest

from chessnut_air.controller import BoardController
from chessnut_air.exceptions import (
    AdapterUnavailableError,
    CharacteristicNotFoundError,
    ChessnutError,
    NotConnectedError,
    ResponseTimeoutError,
)
from chessnut_air.models.enums import AdapterState, ConnectionState
from chessnut_air.protocol.commands import Characteristic, ResponseHeader

MISC = Characteristic.READ_MISC.value
BOARD = Characteristic.READ_BOARD.value
OTB = Characteristic.READ_OTB.value


async def _ready(transport) -> BoardController:
    controller = BoardController(transport)
    await controller.start()
    return controller


class TestLifecycle:
    """Test start/stop state transitions."""

    @pytest.mark.asyncio
    async def test_start_reaches_ready(self, transport):
        controller = BoardController(transport)
        assert controller.state is ConnectionState.IDLE

        await controller.start()

        assert controller.state is ConnectionState.READY
        assert transport.scanned_for == "Chessnut Air"
        assert set(transport.subscriptions) == {MISC, BOARD, OTB}
        assert transport.written == [b"\x21\x01\x00"]

    @pytest.mark.asyncio
    async def test_custom_name_is_scanned_for(self, transport):
        controller = BoardController(transport, name="Kitchen Board")
        await controller.start()
        assert transport.scanned_for == "Kitchen Board"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "adapter",
        [
            AdapterState.POWERED_OFF,
            AdapterState.UNAUTHORIZED,
            AdapterState.UNSUPPORTED,
            AdapterState.RESETTING,
            AdapterState.UNKNOWN,
        ],
    )
    async def test_adapter_unavailable(self, transport, adapter):
        transport.adapter = adapter
        controller = BoardController(transport)

        with pytest.raises(AdapterUnavailableError) as exc_info:
            await controller.start()

        assert exc_info.value.state is adapter
        assert controller.state is ConnectionState.IDLE
        assert transport.scanned_for is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("missing", list(Characteristic))
    async def test_missing_characteristic(self, transport, missing):
        transport.characteristics = {c.value for c in Characteristic} - {missing.value}
        controller = BoardController(transport)

        with pytest.raises(CharacteristicNotFoundError, match=missing.name) as exc_info:
            await controller.start()

        assert exc_info.value.name == missing.name
        assert controller.state is ConnectionState.STOPPED
        assert transport.disconnects == 1
        assert transport.written == []

    @pytest.mark.asyncio
    async def test_start_twice_is_noop(self, transport):
        controller = await _ready(transport)
        await controller.start()
        assert transport.written == [b"\x21\x01\x00"]

    @pytest.mark.asyncio
    async def test_stop_and_restart(self, transport):
        controller = await _ready(transport)

        await controller.stop()
        assert controller.state is ConnectionState.STOPPED
        assert transport.disconnects == 1

        await controller.start()
        assert controller.state is ConnectionState.READY

    @pytest.mark.asyncio
    async def test_start_while_connecting_rejected(self, transport):
        controller = BoardController(transport)
        controller._state = ConnectionState.CONNECTING
        with pytest.raises(ChessnutError, match="CONNECTING"):
            await controller.start()

    @pytest.mark.asyncio
    async def test_link_loss(self, transport):
        controller = await _ready(transport)
        events = []
        controller.disconnected.subscribe(events.append)
        pending = controller.wait_for_response(ResponseHeader.BATTERY_STATUS)

        transport.drop_link()

        assert events == [None]
        assert controller.state is ConnectionState.STOPPED
        with pytest.raises(NotConnectedError, match="lost"):
            await pending


class TestSendCommand:
    @pytest.mark.asyncio
    async def test_requires_ready(self, transport):
        controller = BoardController(transport)
        with pytest.raises(NotConnectedError):
            await controller.send_command(b"\x29\x01\x00")
        assert transport.written == []

    @pytest.mark.asyncio
    async def test_rejected_after_stop(self, transport):
        controller = await _ready(transport)
        await controller.stop()
        with pytest.raises(NotConnectedError):
            await controller.send_command(b"\x29\x01\x00")

    @pytest.mark.asyncio
    async def test_writes_bytes(self, transport):
        controller = await _ready(transport)
        await controller.send_command(bytearray(b"\x31\x01\x00"))
        assert transport.written[-1] == b"\x31\x01\x00"


class TestResponses:
    """Test wait_for_response correlation."""

    @pytest.mark.asyncio
    async def test_matching_reply_resolves(self, transport):
        controller = await _ready(transport)
        pending = controller.wait_for_response(b"\x2a\x02")

        transport.notify(MISC, b"\x2c\x0dname")  # other header
        transport.notify(MISC, b"\x2a\x02\x57\x01")

        assert await pending == b"\x57\x01"
        assert controller._pending == {}

    @pytest.mark.asyncio
    async def test_timeout(self, transport):
        controller = await _ready(transport)
        pending = controller.wait_for_response(b"\x2a\x02", timeout=0.01)

        with pytest.raises(ResponseTimeoutError) as exc_info:
            await pending

        assert exc_info.value.header == b"\x2a\x02"
        assert controller._pending == {}

    @pytest.mark.asyncio
    async def test_late_reply_does_not_resolve_expired_wait(self, transport):
        controller = await _ready(transport)
        late = []
        controller.subscribe_misc(b"\x2a\x02", late.append)
        pending = controller.wait_for_response(b"\x2a\x02", timeout=0.01)

        with pytest.raises(ResponseTimeoutError):
            await pending

        transport.notify(MISC, b"\x2a\x02\x57\x01")
        assert pending.done
        assert late == [b"\x57\x01"]

    @pytest.mark.asyncio
    async def test_deadline_starts_at_registration(self, transport):
        controller = await _ready(transport)
        pending = controller.wait_for_response(b"\x2a\x02", timeout=0.01)
        await asyncio.sleep(0.05)
        assert pending.done
        with pytest.raises(ResponseTimeoutError):
            await pending

    @pytest.mark.asyncio
    async def test_waiters_on_same_header_are_fifo(self, transport):
        controller = await _ready(transport)
        first = controller.wait_for_response(b"\x2a\x02")
        second = controller.wait_for_response(b"\x2a\x02")

        transport.notify(MISC, b"\x2a\x02\x01\x00")
        assert first.done and not second.done

        transport.notify(MISC, b"\x2a\x02\x02\x00")
        assert await first == b"\x01\x00"
        assert await second == b"\x02\x00"

    @pytest.mark.asyncio
    async def test_cancel_withdraws_wait(self, transport):
        controller = await _ready(transport)
        pending = controller.wait_for_response(b"\x2a\x02")
        pending.cancel()

        assert controller._pending == {}
        with pytest.raises(asyncio.CancelledError):
            await pending

    @pytest.mark.asyncio
    async def test_stop_fails_waiters(self, transport):
        controller = await _ready(transport)
        pending = controller.wait_for_response(b"\x2a\x02")

        await controller.stop()

        with pytest.raises(NotConnectedError, match="stopped"):
            await pending

    @pytest.mark.asyncio
    async def test_request_registers_before_sending(self, transport):
        """A reply delivered during the write must not be missed."""
        transport.replies[b"\x29\x01\x00"] = [(MISC, b"\x2a\x02\x50\x00")]
        controller = await _ready(transport)

        payload = await controller.request(b"\x29\x01\x00", b"\x2a\x02")

        assert payload == b"\x50\x00"

    @pytest.mark.asyncio
    async def test_request_not_connected_leaves_no_waiter(self, transport):
        controller = BoardController(transport)
        with pytest.raises(NotConnectedError):
            await controller.request(b"\x29\x01\x00", b"\x2a\x02")
        assert controller._pending == {}


class TestDispatch:
    """Test routing of notifications."""

    @pytest.mark.asyncio
    async def test_board_changes_emitted_once(self, transport):
        controller = await _ready(transport)
        boards = []
        controller.board_changed.subscribe(boards.append)
        frame = b"\x01\x24" + b"\x00" * 32 + b"\x00\x00\x00\x00"

        transport.notify(BOARD, frame)
        transport.notify(BOARD, frame)

        assert len(boards) == 1
        assert boards[0].position == "8/8/8/8/8/8/8/8 w - - 0 1"

    @pytest.mark.asyncio
    async def test_snapshot_resent_after_restart(self, transport):
        controller = await _ready(transport)
        boards = []
        controller.board_changed.subscribe(boards.append)
        frame = b"\x01\x24" + b"\x00" * 32

        transport.notify(BOARD, frame)
        await controller.stop()
        await controller.start()
        transport.notify(BOARD, frame)

        assert len(boards) == 2

    @pytest.mark.asyncio
    async def test_misc_handlers_by_header(self, transport):
        controller = await _ready(transport)
        buttons = []
        remove = controller.subscribe_misc(b"\x0f\x01", buttons.append)

        transport.notify(MISC, b"\x0f\x01\x02")
        transport.notify(MISC, b"\x23\x01\x00")  # unhandled, dropped
        remove()
        transport.notify(MISC, b"\x0f\x01\x01")

        assert buttons == [b"\x02"]

    @pytest.mark.asyncio
    async def test_waiter_takes_precedence_over_handler(self, transport):
        controller = await _ready(transport)
        unsolicited = []
        controller.subscribe_misc(b"\x2a\x02", unsolicited.append)
        pending = controller.wait_for_response(b"\x2a\x02")

        transport.notify(MISC, b"\x2a\x02\x57\x01")

        assert await pending == b"\x57\x01"
        assert unsolicited == []

    @pytest.mark.asyncio
    async def test_otb_data_forwarded_verbatim(self, transport):
        controller = await _ready(transport)
        received = []

        transport.notify(OTB, b"\x32\x01\x05")  # no subscriber, dropped
        controller.otb_data.subscribe(received.append)
        transport.notify(OTB, b"\x32\x01\x05")

        assert received == [b"\x32\x01\x05"]


class TestCancelledWaiters:
    """Waits cancelled from outside are released at once."""

    @pytest.mark.asyncio
    async def test_task_cancel_releases_waiter(self, transport):
        controller = await _ready(transport)
        pending = controller.wait_for_response(b"\x2a\x02")

        async def wait():
            return await pending

        task = asyncio.ensure_future(wait())
        await asyncio.sleep(0)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        await asyncio.sleep(0)

        assert pending.done
        assert controller._pending == {}

    @pytest.mark.asyncio
    async def test_reply_skips_finished_waiter(self, transport):
        controller = await _ready(transport)
        stale = controller.wait_for_response(b"\x2a\x02")
        fresh = controller.wait_for_response(b"\x2a\x02")
        stale._future.cancel()  # done callback has not run yet

        transport.notify(MISC, b"\x2a\x02\x57\x01")

        assert await fresh == b"\x57\x01"
