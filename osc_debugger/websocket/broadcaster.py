"""Fan-out of monitor notices to connected WebSocket clients."""

import asyncio
import json
import logging
from typing import Any, Dict

from websockets.asyncio.server import ServerConnection


logger = logging.getLogger(__name__)


class RecordBroadcaster:
    """
    Pushes JSON messages to every connected client.

    Each client gets a bounded queue drained by its own sender task, so a
    slow viewer never blocks the monitor pump and messages reach each client
    in the order they were broadcast. When a client's queue is full the
    message is dropped for that client only.
    """

    def __init__(self, queue_size: int = 1000):
        """
        Initialize the broadcaster.

        Args:
            queue_size: Per-client backlog before messages are dropped
        """
        self.queue_size = queue_size
        self.clients: Dict[ServerConnection, Dict[str, Any]] = {}
        self.dropped = 0
        self._lock = asyncio.Lock()

    async def register(self, websocket: ServerConnection) -> None:
        """Register a client and start its sender task."""
        async with self._lock:
            if websocket in self.clients:
                return
            queue: asyncio.Queue = asyncio.Queue(maxsize=self.queue_size)
            task = asyncio.create_task(self._client_sender_loop(websocket, queue))
            self.clients[websocket] = {'queue': queue, 'task': task}
            logger.info(f"Client connected. Total clients: {len(self.clients)}")

    async def unregister(self, websocket: ServerConnection) -> None:
        """Unregister a client and stop its sender task."""
        async with self._lock:
            client = self.clients.pop(websocket, None)
        if client is None:
            return

        task = client['task']
        if task is not asyncio.current_task():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
        logger.info(f"Client disconnected. Total clients: {len(self.clients)}")

    def _enqueue(self, queue: asyncio.Queue, message_json: str) -> None:
        try:
            queue.put_nowait(message_json)
        except asyncio.QueueFull:
            self.dropped += 1
            logger.warning("Client queue full, dropping message")

    async def broadcast(self, message: Dict[str, Any]) -> None:
        """
        Queue a message for all connected clients without waiting for delivery.

        Args:
            message: Message dictionary to broadcast
        """
        async with self._lock:
            queues = [client['queue'] for client in self.clients.values()]
        if not queues:
            return

        try:
            message_json = json.dumps(message)
        except (TypeError, ValueError) as e:
            logger.error(f"Failed to serialize message: {e}")
            return

        for queue in queues:
            self._enqueue(queue, message_json)

    async def send_to_client(self, websocket: ServerConnection, message: Dict[str, Any]) -> None:
        """Queue a message for a single client."""
        try:
            message_json = json.dumps(message)
        except (TypeError, ValueError) as e:
            logger.error(f"Failed to serialize message: {e}")
            return

        async with self._lock:
            client = self.clients.get(websocket)
        if client is not None:
            self._enqueue(client['queue'], message_json)

    async def _client_sender_loop(self, websocket: ServerConnection, queue: asyncio.Queue) -> None:
        """Send queued messages to one client until it goes away."""
        while True:
            message_json = await queue.get()
            try:
                await websocket.send(message_json)
            except Exception as e:
                logger.warning(f"Failed to send to client: {e}")
                await self.unregister(websocket)
                return
            finally:
                queue.task_done()

    def get_client_count(self) -> int:
        return len(self.clients)

    async def close_all(self) -> None:
        """Disconnect every client."""
        async with self._lock:
            websockets = list(self.clients.keys())

        for websocket in websockets:
            await self.unregister(websocket)
            try:
                await websocket.close()
            except Exception as e:
                logger.debug(f"Error closing client connection: {e}")

        logger.info("All clients disconnected")
