import asyncio
from datetime import datetime

import pytest

from osc_debugger.codec import Float32, Int32, Message, String, encode_message
from osc_debugger.errors import MalformedPacket, SocketError
from osc_debugger.monitor import DecodedRecord, DecodeErrorNotice, MonitorPump, MonitorState
from osc_debugger.transport import open_endpoint


VOLUME = encode_message(Message("/volume", (Float32(0.75),)))
COLOR = encode_message(Message("/light/1/color", (String("red"),)))
GARBAGE = b'\x00\x01\x02 not osc'


async def _stop(pump_task: asyncio.Task, stop_event: asyncio.Event) -> None:
    stop_event.set()
    await asyncio.wait_for(pump_task, timeout=1.0)


@pytest.mark.asyncio
async def test_malformed_datagram_does_not_stop_pump(receive_endpoint, collector):
    """
    Test three datagrams with the second malformed yield two records and one error notice.
    """
    for data in (VOLUME, GARBAGE, COLOR):
        receive_endpoint.feed(data)

    pump = MonitorPump(receive_endpoint, collector)
    stop_event = asyncio.Event()
    task = asyncio.create_task(pump.run(stop_event))

    await collector.wait_for(3)
    await asyncio.sleep(0.01)

    assert len(collector.items) == 3
    first, second, third = collector.items
    assert isinstance(first, DecodedRecord)
    assert first.message == Message("/volume", (Float32(0.75),))
    assert isinstance(second, DecodeErrorNotice)
    assert isinstance(second.error, MalformedPacket)
    assert second.raw_byte_size == len(GARBAGE)
    assert isinstance(third, DecodedRecord)
    assert third.message.address == "/light/1/color"

    assert pump.state == MonitorState.LISTENING
    assert not task.done()

    await _stop(task, stop_event)
    assert pump.state == MonitorState.STOPPED
    assert receive_endpoint.closed


@pytest.mark.asyncio
async def test_records_carry_sender_size_and_timestamp(receive_endpoint, collector):
    fixed = datetime(2024, 5, 1, 12, 0, 0, 123456)
    receive_endpoint.feed(VOLUME, sender_address="192.168.1.20", sender_port=50123)

    pump = MonitorPump(receive_endpoint, collector, clock=lambda: fixed)
    stop_event = asyncio.Event()
    task = asyncio.create_task(pump.run(stop_event))
    await collector.wait_for(1)
    await _stop(task, stop_event)

    record = collector.items[0]
    assert record.sender_address == "192.168.1.20"
    assert record.sender_port == 50123
    assert record.byte_size == len(VOLUME)
    assert record.received_at == fixed


@pytest.mark.asyncio
async def test_notices_preserve_arrival_order(receive_endpoint, collector):
    for i in range(10):
        receive_endpoint.feed(encode_message(Message(f"/seq/{i}", (Int32(i),))))

    pump = MonitorPump(receive_endpoint, collector)
    stop_event = asyncio.Event()
    task = asyncio.create_task(pump.run(stop_event))
    await collector.wait_for(10)
    await _stop(task, stop_event)

    assert [n.message.args[0].value for n in collector.items] == list(range(10))
    stats = pump.get_stats()
    assert stats["packets_received"] == 10
    assert stats["records_emitted"] == 10
    assert stats["decode_errors"] == 0
    assert stats["state"] == "stopped"


@pytest.mark.asyncio
async def test_socket_error_stops_pump_and_closes_endpoint(receive_endpoint, collector):
    receive_endpoint.feed(VOLUME)
    receive_endpoint.feed(SocketError("Socket error while receiving: boom"))
    receive_endpoint.feed(COLOR)

    pump = MonitorPump(receive_endpoint, collector)
    with pytest.raises(SocketError):
        await asyncio.wait_for(pump.run(asyncio.Event()), timeout=1.0)

    assert len(collector.items) == 1
    assert pump.state == MonitorState.STOPPED
    assert receive_endpoint.closed


@pytest.mark.asyncio
async def test_failing_sink_does_not_stop_pump(receive_endpoint):
    seen = []

    async def flaky_sink(notice):
        seen.append(notice)
        if len(seen) == 1:
            raise RuntimeError("display broke")

    receive_endpoint.feed(VOLUME)
    receive_endpoint.feed(COLOR)

    pump = MonitorPump(receive_endpoint, flaky_sink)
    stop_event = asyncio.Event()
    task = asyncio.create_task(pump.run(stop_event))
    for _ in range(200):
        if len(seen) == 2:
            break
        await asyncio.sleep(0.005)
    await _stop(task, stop_event)

    assert len(seen) == 2
    assert pump.get_stats()["sink_errors"] == 1


@pytest.mark.asyncio
async def test_stop_event_while_blocked_on_receive(receive_endpoint, collector):
    """
    Test setting the stop event while waiting for a datagram stops the pump and releases the endpoint.
    """
    pump = MonitorPump(receive_endpoint, collector)
    stop_event = asyncio.Event()
    task = asyncio.create_task(pump.run(stop_event))
    await asyncio.sleep(0.02)
    assert not task.done()

    await _stop(task, stop_event)

    assert task.result() is None
    assert pump.state == MonitorState.STOPPED
    assert receive_endpoint.closed
    assert collector.items == []


@pytest.mark.asyncio
async def test_task_cancellation_closes_endpoint(receive_endpoint, collector):
    pump = MonitorPump(receive_endpoint, collector)
    task = asyncio.create_task(pump.run())
    await asyncio.sleep(0.01)

    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task

    assert pump.state == MonitorState.STOPPED
    assert receive_endpoint.closed


@pytest.mark.asyncio
async def test_monitor_over_loopback(collector):
    pump = MonitorPump.bind(collector, port=0, address="127.0.0.1")
    _, port = pump.endpoint.local_address
    stop_event = asyncio.Event()
    task = asyncio.create_task(pump.run(stop_event))

    async with open_endpoint() as sender:
        await sender.send(COLOR, "127.0.0.1", port)
        await sender.send(GARBAGE, "127.0.0.1", port)
        await collector.wait_for(2)

    await _stop(task, stop_event)

    record, error = collector.items
    assert record.message == Message("/light/1/color", (String("red"),))
    assert record.sender_address == "127.0.0.1"
    assert record.byte_size == len(COLOR)
    assert isinstance(error, DecodeErrorNotice)
    assert pump.endpoint.closed
