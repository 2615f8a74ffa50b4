import asyncio

import pytest

from osc_debugger.constants import NetworkDefaults
from osc_debugger.errors import BindError, SendError, SocketError
from osc_debugger.transport import bind_endpoint, open_endpoint


@pytest.mark.asyncio
async def test_send_and_receive_over_loopback():
    """
    Test a datagram sent from an unbound endpoint arrives at a bound one with sender info.
    """
    receiver = bind_endpoint(0, "127.0.0.1")
    sender = open_endpoint()
    try:
        host, port = receiver.local_address
        assert host == "127.0.0.1"
        assert port > 0

        await sender.send(b'/ping\x00\x00\x00,\x00\x00\x00', "127.0.0.1", port)
        datagram = await asyncio.wait_for(receiver.receive(), timeout=1.0)

        assert datagram.data == b'/ping\x00\x00\x00,\x00\x00\x00'
        assert datagram.sender_address == "127.0.0.1"
        assert 0 < datagram.sender_port <= 65535
    finally:
        sender.close()
        receiver.close()


@pytest.mark.asyncio
async def test_send_resolves_localhost():
    receiver = bind_endpoint(0, "127.0.0.1")
    try:
        _, port = receiver.local_address
        async with open_endpoint() as sender:
            await sender.send(b'/a\x00\x00,\x00\x00\x00', "localhost", port)
        datagram = await asyncio.wait_for(receiver.receive(), timeout=1.0)
        assert datagram.data == b'/a\x00\x00,\x00\x00\x00'
    finally:
        receiver.close()


def test_bind_port_in_use_raises_bind_error():
    first = bind_endpoint(0, "127.0.0.1")
    try:
        _, port = first.local_address
        with pytest.raises(BindError):
            bind_endpoint(port, "127.0.0.1")
    finally:
        first.close()


@pytest.mark.parametrize("address", ["256.1.1.1", "not an address"])
def test_bind_invalid_address_raises_bind_error(address):
    with pytest.raises(BindError):
        bind_endpoint(9000, address)


@pytest.mark.parametrize("port", [-1, 65536, "8888", True])
def test_bind_invalid_port_raises_bind_error(port):
    with pytest.raises(BindError):
        bind_endpoint(port, "127.0.0.1")


def test_bind_error_is_os_error():
    assert issubclass(BindError, OSError)


@pytest.mark.asyncio
@pytest.mark.parametrize("port", [0, 65536, -5])
async def test_send_rejects_port_out_of_range(port):
    async with open_endpoint() as sender:
        with pytest.raises(SendError, match="Invalid port"):
            await sender.send(b'/a\x00\x00,\x00\x00\x00', "127.0.0.1", port)


@pytest.mark.asyncio
async def test_send_rejects_oversized_payload():
    payload = b'\x00' * (NetworkDefaults.MAX_UDP_PAYLOAD + 1)
    async with open_endpoint() as sender:
        with pytest.raises(SendError, match="exceeds"):
            await sender.send(payload, "127.0.0.1", 9000)


@pytest.mark.asyncio
async def test_send_unresolvable_host_raises_send_error():
    async with open_endpoint() as sender:
        with pytest.raises(SendError):
            await sender.send(b'/a\x00\x00,\x00\x00\x00', "host.invalid", 9000)


@pytest.mark.asyncio
async def test_send_after_close_raises_send_error():
    sender = open_endpoint()
    sender.close()
    with pytest.raises(SendError):
        await sender.send(b'/a\x00\x00,\x00\x00\x00', "127.0.0.1", 9000)


@pytest.mark.asyncio
async def test_receive_on_closed_endpoint_raises_socket_error():
    receiver = bind_endpoint(0, "127.0.0.1")
    receiver.close()
    with pytest.raises(SocketError):
        await receiver.receive()


@pytest.mark.asyncio
async def test_receive_on_send_endpoint_raises_socket_error():
    async with open_endpoint() as sender:
        with pytest.raises(SocketError):
            await sender.receive()


def test_close_is_idempotent():
    endpoint = bind_endpoint(0, "127.0.0.1")
    endpoint.close()
    endpoint.close()
    assert endpoint.closed
    assert endpoint.local_address is None


@pytest.mark.asyncio
async def test_receive_can_be_cancelled():
    receiver = bind_endpoint(0, "127.0.0.1")
    try:
        task = asyncio.create_task(receiver.receive())
        await asyncio.sleep(0.01)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
    finally:
        receiver.close()
