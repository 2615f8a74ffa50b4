"""
Plain-text rendering of monitor notices and send results.

Record lines use a Wireshark-like timestamp followed by sender, size,
address, argument values and argument types:

    2024-05-01 12:00:00.123456 192.168.1.20:53000 16B /volume                        0.75 (float)
"""

import math
from typing import Iterable

from ..codec.types import Blob, Float32, String, Unknown
from ..constants import LogDefaults
from ..monitor.records import DecodedRecord, DecodeErrorNotice
from ..send.results import SendResult, SendStatus


def format_float(value: float) -> str:
    """Shortest readable form of a float32 value (0.75, 1.0, 3.14)."""
    if math.isnan(value) or math.isinf(value):
        return str(value)
    text = f"{value:.7g}"
    if not any(c in text for c in ".e"):
        text += ".0"
    return text


def format_value(arg) -> str:
    if isinstance(arg, Float32):
        return format_float(arg.value)
    if isinstance(arg, String):
        return arg.value
    if isinstance(arg, Blob):
        return f"<blob {len(arg.value)} bytes>"
    if isinstance(arg, Unknown):
        return f"<{arg.tag!r} {len(arg.data)} bytes>"
    return str(arg.value)


def format_type(arg) -> str:
    if isinstance(arg, Unknown):
        return f"unknown:{arg.tag}"
    return arg.type_name


def _join(items: Iterable[str]) -> str:
    return ", ".join(items)


def format_timestamp(notice) -> str:
    return notice.received_at.strftime(LogDefaults.TIMESTAMP_FORMAT)


def format_record(record: DecodedRecord) -> str:
    """Render one decoded datagram as a single line."""
    message = record.message
    prefix = (
        f"{format_timestamp(record)} {record.sender_address}:{record.sender_port} "
        f"{record.byte_size}B {message.address.ljust(LogDefaults.ADDRESS_COLUMN_WIDTH)}"
    )
    if not message.args:
        return f"{prefix} (null)"

    values = _join(format_value(arg) for arg in message.args)
    types = _join(format_type(arg) for arg in message.args)
    return f"{prefix} {values} ({types})"


def format_decode_error(notice: DecodeErrorNotice) -> str:
    """Render one undecodable datagram as a single line."""
    return (
        f"{format_timestamp(notice)} {notice.sender_address}:{notice.sender_port} "
        f"{notice.raw_byte_size}B Error parsing OSC message: {notice.error}"
    )


def format_send_result(result: SendResult) -> str:
    if result.status is SendStatus.SENT:
        return f"Sent: {result.address} = {format_value(result.argument)}"
    if result.status is SendStatus.INVALID:
        return f"Invalid command: {result.error}"
    return f"Error sending message: {result.error}"
