"""WebSocket server streaming decoded OSC traffic to web clients."""

import json
import logging
from typing import Any, Optional

from websockets.asyncio.server import ServerConnection, serve
from websockets.exceptions import ConnectionClosed

from .. import __version__
from ..monitor.records import DecodedRecord, DecodeErrorNotice, MonitorNotice
from .broadcaster import RecordBroadcaster
from .serializers import (
    create_decode_error_message,
    create_hello_message,
    create_record_message,
)


logger = logging.getLogger(__name__)


class RecordWebSocketServer:
    """
    WebSocket feed of monitor notices.

    An instance is itself a monitor sink: awaiting it with a notice
    broadcasts the serialized notice to every connected client.
    """

    def __init__(
        self,
        host: str = "localhost",
        port: int = 8765,
        listen_address: str = "0.0.0.0",
        listen_port: int = 0,
    ):
        """
        Initialize the WebSocket server.

        Args:
            host: Host address to bind to
            port: Port to listen on
            listen_address: UDP address the monitor listens on (sent in HELLO)
            listen_port: UDP port the monitor listens on (sent in HELLO)
        """
        self.host = host
        self.port = port
        self.listen_address = listen_address
        self.listen_port = listen_port
        self.broadcaster = RecordBroadcaster()
        self.server: Optional[Any] = None
        self._running = False

    async def start(self) -> None:
        """Start accepting WebSocket clients."""
        if self._running:
            logger.warning("Server is already running")
            return

        self.server = await serve(self._handle_client, self.host, self.port)
        self._running = True
        logger.info(f"WebSocket server started on ws://{self.host}:{self.port}")

    async def stop(self) -> None:
        """Disconnect clients and stop the server."""
        if not self._running:
            return

        self._running = False
        await self.broadcaster.close_all()
        if self.server:
            self.server.close()
            await self.server.wait_closed()
            self.server = None
        logger.info("WebSocket server stopped")

    async def _handle_client(self, websocket: ServerConnection) -> None:
        await self.broadcaster.register(websocket)
        try:
            hello = create_hello_message(self.listen_address, self.listen_port, __version__)
            await self.broadcaster.send_to_client(websocket, hello)

            # The feed is one-way; client messages are only logged
            async for message_str in websocket:
                try:
                    message = json.loads(message_str)
                    logger.debug(f"Ignoring client message: {message.get('type')}")
                except (json.JSONDecodeError, AttributeError) as e:
                    logger.debug(f"Invalid message from client: {e}")
        except ConnectionClosed:
            logger.info("Client connection closed")
        finally:
            await self.broadcaster.unregister(websocket)

    async def __call__(self, notice: MonitorNotice) -> None:
        if isinstance(notice, DecodedRecord):
            await self.broadcaster.broadcast(create_record_message(notice))
        elif isinstance(notice, DecodeErrorNotice):
            await self.broadcaster.broadcast(create_decode_error_message(notice))

    def get_client_count(self) -> int:
        return self.broadcaster.get_client_count()

    def is_running(self) -> bool:
        return self._running
