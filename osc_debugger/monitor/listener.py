"""
Monitor pump: receives OSC datagrams, decodes them and hands one notice per
datagram to a sink.

The pump processes datagrams strictly in arrival order. A malformed datagram
produces a DecodeErrorNotice and the pump keeps listening; only a socket
failure stops it.
"""

import asyncio
import logging
from datetime import datetime
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Optional

from ..codec.osc_parser import parse_osc_message
from ..constants import NetworkDefaults
from ..errors import MalformedPacket, SocketError
from ..transport.endpoint import Datagram, UDPEndpoint, bind_endpoint
from ..utils.cancellation import wait_or_stop
from .records import DecodedRecord, DecodeErrorNotice, MonitorNotice


logger = logging.getLogger(__name__)

MonitorSink = Callable[[MonitorNotice], Awaitable[None]]


class MonitorState(Enum):
    LISTENING = "listening"
    DECODING = "decoding"
    STOPPED = "stopped"


class MonitorPump:
    """
    Async receive/decode/dispatch loop over one bound UDP endpoint.

    The pump owns the endpoint and closes it whenever run() returns or raises.
    """

    def __init__(
        self,
        endpoint: UDPEndpoint,
        sink: MonitorSink,
        clock: Callable[[], datetime] = datetime.now,
    ):
        """
        Initialize monitor pump.

        Args:
            endpoint: Bound endpoint to receive from
            sink: Async callback receiving a DecodedRecord or DecodeErrorNotice
            clock: Source of receive timestamps
        """
        self.endpoint = endpoint
        self.sink = sink
        self._clock = clock
        self.state = MonitorState.LISTENING

        self.stats = {
            "packets_received": 0,
            "bytes_received": 0,
            "records_emitted": 0,
            "decode_errors": 0,
            "sink_errors": 0,
        }

    @classmethod
    def bind(
        cls,
        sink: MonitorSink,
        port: int = NetworkDefaults.DEFAULT_PORT,
        address: str = NetworkDefaults.DEFAULT_ADDRESS,
    ) -> "MonitorPump":
        """
        Bind a receive endpoint and wrap it in a pump.

        Raises:
            BindError: If the endpoint cannot be bound
        """
        return cls(bind_endpoint(port, address), sink)

    async def run(self, stop_event: Optional[asyncio.Event] = None) -> None:
        """
        Receive and dispatch datagrams until stopped.

        Args:
            stop_event: Cancellation signal; when set, the pump stops at the
                next receive and returns normally

        Raises:
            SocketError: If the socket fails (the pump is stopped and the
                endpoint closed before the error propagates)
        """
        self.state = MonitorState.LISTENING
        logger.info("Monitor pump started")

        try:
            while True:
                completed, datagram = await wait_or_stop(self.endpoint.receive(), stop_event)
                if not completed:
                    logger.info("Monitor pump cancelled")
                    break

                self.stats["packets_received"] += 1
                self.stats["bytes_received"] += len(datagram.data)
                await self._process_datagram(datagram)

        except SocketError as e:
            logger.error(f"Monitor pump stopped on socket error: {e}")
            raise
        finally:
            self.state = MonitorState.STOPPED
            self.endpoint.close()
            logger.info("Monitor pump stopped")

    async def _process_datagram(self, datagram: Datagram) -> None:
        """
        Decode one datagram and dispatch exactly one notice.

        Args:
            datagram: Received payload and sender
        """
        self.state = MonitorState.DECODING
        received_at = self._clock()

        try:
            message = parse_osc_message(datagram.data)
        except MalformedPacket as e:
            self.stats["decode_errors"] += 1
            logger.debug(
                f"Malformed packet from {datagram.sender_address}:{datagram.sender_port}: {e}"
            )
            notice = DecodeErrorNotice(
                error=e,
                raw_byte_size=len(datagram.data),
                sender_address=datagram.sender_address,
                sender_port=datagram.sender_port,
                received_at=received_at,
            )
        else:
            self.stats["records_emitted"] += 1
            notice = DecodedRecord(
                message=message,
                sender_address=datagram.sender_address,
                sender_port=datagram.sender_port,
                byte_size=len(datagram.data),
                received_at=received_at,
            )

        await self._dispatch(notice)
        self.state = MonitorState.LISTENING

    async def _dispatch(self, notice: MonitorNotice) -> None:
        try:
            await self.sink(notice)
        except Exception as e:
            self.stats["sink_errors"] += 1
            logger.error(f"Error in monitor sink: {e}")

    def get_stats(self) -> Dict[str, Any]:
        """
        Get monitor statistics.

        Returns:
            dict: Packet, byte, record and error counters plus current state
        """
        return {**self.stats, "state": self.state.value}
