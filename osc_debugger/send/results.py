"""
Per-command outcome reported by the send pump.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..codec.types import Argument
from ..errors import OSCDebuggerError


class SendStatus(Enum):
    SENT = "sent"
    INVALID = "invalid"
    FAILED = "failed"


@dataclass(frozen=True)
class SendResult:
    """
    Standardized result for one operator command.

    Exactly one result is produced for every command that is not a quit
    command.
    """
    status: SendStatus
    line: str
    address: Optional[str] = None
    argument: Optional[Argument] = None
    byte_size: int = 0
    error: Optional[OSCDebuggerError] = None

    @classmethod
    def sent(cls, line: str, address: str, argument: Argument, byte_size: int) -> "SendResult":
        """Create a result for a datagram that left the socket."""
        return cls(SendStatus.SENT, line, address, argument, byte_size)

    @classmethod
    def invalid(cls, line: str, error: OSCDebuggerError) -> "SendResult":
        """Create a result for input rejected before sending."""
        return cls(SendStatus.INVALID, line, error=error)

    @classmethod
    def failed(cls, line: str, address: str, argument: Argument, error: OSCDebuggerError) -> "SendResult":
        """Create a result for a send the transport refused."""
        return cls(SendStatus.FAILED, line, address, argument, error=error)

    @property
    def success(self) -> bool:
        return self.status is SendStatus.SENT
