"""
Async line source backed by a blocking text stream.

A daemon thread performs the blocking readline() calls and hands lines to
the event loop, so waiting for operator input never blocks the loop and an
abandoned read does not keep the process alive.
"""

import asyncio
import logging
import sys
import threading
from typing import Optional, TextIO


logger = logging.getLogger(__name__)


class StdinLineReader:
    """
    Awaitable line source: `await reader()` returns the next line without
    its trailing newline, or None at end of input.
    """

    def __init__(self, stream: Optional[TextIO] = None, prompt: Optional[str] = None,
                 prompt_stream: Optional[TextIO] = None):
        """
        Args:
            stream: Stream to read from (default: stdin)
            prompt: Text written before each read, e.g. "> "
            prompt_stream: Where the prompt is written (default: stdout)
        """
        self.stream = stream or sys.stdin
        self.prompt = prompt
        self.prompt_stream = prompt_stream or sys.stdout
        self._queue: Optional[asyncio.Queue] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._thread: Optional[threading.Thread] = None

    def start(self) -> None:
        """Start the reader thread; must be called from the event loop."""
        if self._thread is not None:
            return
        self._loop = asyncio.get_running_loop()
        self._queue = asyncio.Queue()
        self._thread = threading.Thread(target=self._read_lines, name="stdin-reader", daemon=True)
        self._thread.start()

    def _deliver(self, line: Optional[str]) -> bool:
        try:
            self._loop.call_soon_threadsafe(self._queue.put_nowait, line)
        except RuntimeError:
            # Event loop already closed
            return False
        return True

    def _readline(self) -> str:
        """
        Read one line; undecodable bytes are kept as lone surrogates so the
        line is rejected downstream instead of ending input.
        """
        buffer = getattr(self.stream, "buffer", None)
        if buffer is None:
            return self.stream.readline()
        encoding = getattr(self.stream, "encoding", None) or "utf-8"
        return buffer.readline().decode(encoding, errors="surrogateescape")

    def _read_lines(self) -> None:
        while True:
            try:
                line = self._readline()
            except UnicodeDecodeError as e:
                logger.error(f"Cannot decode input, stopping input: {e}")
                line = ""
            except (OSError, ValueError) as e:
                logger.debug(f"Input stream closed: {e}")
                line = ""
            if not line:
                self._deliver(None)
                return
            if not self._deliver(line.rstrip("\r\n")):
                return

    async def __call__(self) -> Optional[str]:
        self.start()
        if self.prompt:
            self.prompt_stream.write(self.prompt)
            self.prompt_stream.flush()
        return await self._queue.get()
