"""
Send pump: parses typed commands and sends them as OSC messages.
"""

from .commands import SendCommand, is_quit_command, parse_command
from .results import SendResult, SendStatus
from .sender import SendPump, SendState

__all__ = [
    "SendCommand",
    "is_quit_command",
    "parse_command",
    "SendResult",
    "SendStatus",
    "SendPump",
    "SendState",
]
