"""
Send pump: turns operator commands into OSC datagrams.

Each line read from the line source is parsed, encoded as a single-argument
message and sent to a fixed destination. Invalid input and failed sends are
reported to the sink and the loop continues; only a quit command, the end
of input or the stop event ends it.
"""

import asyncio
import logging
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Optional

from ..codec.osc_builder import encode_message
from ..errors import InvalidAddress, InvalidArgument, SendError
from ..transport.endpoint import UDPEndpoint, open_endpoint, validate_destination_port
from ..utils.cancellation import wait_or_stop
from .commands import is_quit_command, parse_command
from .results import SendResult


logger = logging.getLogger(__name__)

LineSource = Callable[[], Awaitable[Optional[str]]]
SendSink = Callable[[SendResult], Awaitable[None]]


class SendState(Enum):
    READING = "reading"
    SENDING = "sending"
    STOPPED = "stopped"


class SendPump:
    """
    Read/parse/send loop over one unbound UDP endpoint.

    The pump owns the endpoint and closes it whenever run() returns or raises.
    """

    def __init__(
        self,
        endpoint: UDPEndpoint,
        address: str,
        port: int,
        line_source: LineSource,
        sink: Optional[SendSink] = None,
    ):
        """
        Initialize send pump.

        Args:
            endpoint: Endpoint to send from
            address: Destination host
            port: Destination port (1-65535)
            line_source: Async callable returning the next input line,
                or None at end of input
            sink: Async callback receiving one SendResult per command
        """
        validate_destination_port(port)
        self.endpoint = endpoint
        self.address = address
        self.port = port
        self.line_source = line_source
        self.sink = sink
        self.state = SendState.READING

        self.stats = {
            "commands": 0,
            "sent_count": 0,
            "invalid_count": 0,
            "error_count": 0,
        }

    @classmethod
    def open(
        cls,
        address: str,
        port: int,
        line_source: LineSource,
        sink: Optional[SendSink] = None,
    ) -> "SendPump":
        """Open a send endpoint and wrap it in a pump."""
        return cls(open_endpoint(), address, port, line_source, sink)

    async def run(self, stop_event: Optional[asyncio.Event] = None) -> None:
        """
        Process commands until quit, end of input or cancellation.

        Args:
            stop_event: Cancellation signal; when set, the pump stops at the
                next line read and returns normally
        """
        self.state = SendState.READING
        logger.info(f"Send pump started, target {self.address}:{self.port}")

        try:
            while True:
                completed, line = await wait_or_stop(self.line_source(), stop_event)
                if not completed:
                    logger.info("Send pump cancelled")
                    break
                if line is None:
                    logger.info("End of input")
                    break
                if is_quit_command(line):
                    logger.info("Quit command received")
                    break

                await self._process_line(line)
        finally:
            self.state = SendState.STOPPED
            self.endpoint.close()
            logger.info("Send pump stopped")

    async def _process_line(self, line: str) -> None:
        """
        Parse, encode and send one command, then report exactly one result.

        Args:
            line: Raw input line
        """
        self.stats["commands"] += 1

        try:
            command = parse_command(line)
            data = encode_message(command.to_message())
        except (InvalidAddress, InvalidArgument) as e:
            self.stats["invalid_count"] += 1
            logger.debug(f"Rejected command {line!r}: {e}")
            await self._report(SendResult.invalid(line, e))
            return

        self.state = SendState.SENDING
        try:
            await self.endpoint.send(data, self.address, self.port)
        except SendError as e:
            self.stats["error_count"] += 1
            logger.warning(f"Failed to send {command.address}: {e}")
            result = SendResult.failed(line, command.address, command.argument, e)
        else:
            self.stats["sent_count"] += 1
            result = SendResult.sent(line, command.address, command.argument, len(data))
        finally:
            self.state = SendState.READING

        await self._report(result)

    async def _report(self, result: SendResult) -> None:
        if self.sink is None:
            return
        try:
            await self.sink(result)
        except Exception as e:
            logger.error(f"Error in send sink: {e}")

    def get_stats(self) -> Dict[str, Any]:
        """
        Get sender statistics.

        Returns:
            dict: Command, sent, invalid and error counters plus target
        """
        return {
            **self.stats,
            "state": self.state.value,
            "address": self.address,
            "port": self.port,
        }
