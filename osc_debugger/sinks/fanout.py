"""
Combine several async sinks into one.
"""

import logging
from typing import Any, Awaitable, Callable


logger = logging.getLogger(__name__)


def fanout(*sinks: Callable[[Any], Awaitable[None]]) -> Callable[[Any], Awaitable[None]]:
    """
    Build a sink that forwards each notice to every given sink, in order.

    A failing sink is logged and does not prevent delivery to the others.
    """
    async def sink(notice: Any) -> None:
        for target in sinks:
            try:
                await target(notice)
            except Exception as e:
                logger.error(f"Error in sink {target!r}: {e}")

    return sink
