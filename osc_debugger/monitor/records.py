"""
Notices emitted by the monitor pump, one per received datagram.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Union

from ..codec.types import Message
from ..errors import MalformedPacket


@dataclass(frozen=True)
class DecodedRecord:
    """A successfully decoded datagram."""
    message: Message
    sender_address: str
    sender_port: int
    byte_size: int
    received_at: datetime = field(default_factory=datetime.now)


@dataclass(frozen=True)
class DecodeErrorNotice:
    """A datagram that could not be decoded."""
    error: MalformedPacket
    raw_byte_size: int
    sender_address: str
    sender_port: int
    received_at: datetime = field(default_factory=datetime.now)


MonitorNotice = Union[DecodedRecord, DecodeErrorNotice]
