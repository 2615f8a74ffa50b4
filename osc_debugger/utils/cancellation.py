"""
Cooperative cancellation for pump suspension points.
"""

import asyncio
from typing import Any, Awaitable, Optional, Tuple


async def wait_or_stop(
    awaitable: Awaitable[Any],
    stop_event: Optional[asyncio.Event],
) -> Tuple[bool, Any]:
    """
    Await `awaitable` unless `stop_event` is set first.

    A result that is already available when the event fires still wins,
    so a datagram that has been read is never dropped.

    Args:
        awaitable: Coroutine or future for the blocking read
        stop_event: Cancellation signal (None waits unconditionally)

    Returns:
        Tuple of (completed, result); result is None when stopped
    """
    if stop_event is None:
        return True, await awaitable

    task = asyncio.ensure_future(awaitable)
    if stop_event.is_set():
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        return False, None

    stopper = asyncio.ensure_future(stop_event.wait())
    try:
        await asyncio.wait({task, stopper}, return_when=asyncio.FIRST_COMPLETED)
    except asyncio.CancelledError:
        task.cancel()
        stopper.cancel()
        raise
    stopper.cancel()

    if not task.done():
        task.cancel()
        try:
            result = await task
        except asyncio.CancelledError:
            current = asyncio.current_task()
            if current is not None and current.cancelling():
                raise
            return False, None
        # Completed before the cancellation was delivered
        return True, result

    return True, task.result()
