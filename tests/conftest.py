"""Shared fixtures and fakes for osc_debugger tests."""

import asyncio
from typing import Any, List

import pytest

from osc_debugger.errors import SendError
from osc_debugger.transport.endpoint import Datagram


class Collector:
    """Async sink that records everything it receives."""

    def __init__(self):
        self.items: List[Any] = []

    async def __call__(self, item: Any) -> None:
        self.items.append(item)

    async def wait_for(self, count: int, timeout: float = 1.0) -> None:
        async def _wait():
            while len(self.items) < count:
                await asyncio.sleep(0.005)
        await asyncio.wait_for(_wait(), timeout)


class FakeReceiveEndpoint:
    """
    In-memory stand-in for a bound UDPEndpoint.

    Items pushed with feed() are returned by receive() in order; exceptions
    are raised instead of returned.
    """

    def __init__(self):
        self.queue: asyncio.Queue = asyncio.Queue()
        self.closed = False
        self.close_calls = 0
        self.bound = True

    def feed(self, item, sender_address: str = "10.0.0.5", sender_port: int = 53000) -> None:
        if isinstance(item, (bytes, bytearray)):
            item = Datagram(bytes(item), sender_address, sender_port)
        self.queue.put_nowait(item)

    async def receive(self) -> Datagram:
        item = await self.queue.get()
        if isinstance(item, BaseException):
            raise item
        return item

    def close(self) -> None:
        self.closed = True
        self.close_calls += 1


class FakeSendEndpoint:
    """
    In-memory stand-in for a send UDPEndpoint.

    Records every successful send; the first `fail_times` sends raise SendError.
    """

    def __init__(self, fail_times: int = 0):
        self.sent = []
        self.fail_times = fail_times
        self.attempts = 0
        self.closed = False

    async def send(self, data: bytes, address: str, port: int) -> None:
        self.attempts += 1
        if self.attempts <= self.fail_times:
            raise SendError(f"Failed to send to {address}:{port}: network unreachable")
        self.sent.append((data, address, port))

    def close(self) -> None:
        self.closed = True


def lines_from(*lines):
    """Build an async line source that yields `lines`, then None."""
    remaining = list(lines)
    calls = []

    async def source():
        calls.append(len(calls))
        if not remaining:
            return None
        return remaining.pop(0)

    source.calls = calls
    source.remaining = remaining
    return source


@pytest.fixture
def collector():
    return Collector()


@pytest.fixture
def receive_endpoint():
    return FakeReceiveEndpoint()


@pytest.fixture
def send_endpoint():
    return FakeSendEndpoint()


@pytest.fixture
def make_send_endpoint():
    return FakeSendEndpoint


@pytest.fixture
def make_line_source():
    return lines_from
