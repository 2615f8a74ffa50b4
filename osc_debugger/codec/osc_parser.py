"""
OSC (Open Sound Control) message parser.

Parses binary OSC messages received via UDP into Message values. Input is
untrusted: every read is bounds-checked and any structural problem raises
MalformedPacket instead of an arbitrary exception.

Arguments whose tag is not modelled are surfaced as Unknown rather than
failing the message, so a datagram with a usable address is never lost
because of one exotic argument.

Reference: http://opensoundcontrol.org/spec-1_0
"""

import struct
from typing import List, Tuple

from ..constants import OSCConstants
from ..errors import MalformedPacket
from .types import Blob, Float32, Int32, Message, String, Unknown


def _padded_end(offset: int) -> int:
    """Round an offset up to the next multiple of 4."""
    align = OSCConstants.ALIGNMENT
    return offset + (align - offset % align) % align


def _read_raw_string(data: bytes, offset: int) -> Tuple[bytes, int]:
    """
    Read OSC string bytes (null-terminated, padded to 4 bytes).

    Returns:
        Tuple of (raw bytes without terminator, new_offset)
    """
    null_idx = data.find(b'\x00', offset)
    if null_idx == -1:
        raise MalformedPacket("No null terminator found for OSC string", offset)

    new_offset = _padded_end(null_idx + 1)
    if new_offset > len(data):
        raise MalformedPacket(
            f"OSC string padding runs past end of packet ({new_offset} > {len(data)})", offset
        )
    if data[null_idx:new_offset].strip(b'\x00'):
        raise MalformedPacket("OSC string padding contains non-null bytes", null_idx)

    return data[offset:null_idx], new_offset


def _read_string(data: bytes, offset: int) -> Tuple[str, int]:
    raw, new_offset = _read_raw_string(data, offset)
    try:
        return raw.decode('utf-8'), new_offset
    except UnicodeDecodeError as e:
        raise MalformedPacket(f"OSC string is not valid UTF-8: {e}", offset) from e


def _require(data: bytes, offset: int, size: int, what: str) -> None:
    if offset + size > len(data):
        raise MalformedPacket(
            f"Truncated {what}: need {size} bytes at offset {offset}, "
            f"only {len(data) - offset} remain",
            offset,
        )


def _read_int(data: bytes, offset: int) -> Tuple[int, int]:
    """Read OSC int32 (big-endian)."""
    _require(data, offset, 4, "int32 argument")
    value = struct.unpack('>i', data[offset:offset + 4])[0]
    return value, offset + 4


def _read_float(data: bytes, offset: int) -> Tuple[float, int]:
    """Read OSC float32 (big-endian)."""
    _require(data, offset, 4, "float32 argument")
    value = struct.unpack('>f', data[offset:offset + 4])[0]
    return value, offset + 4


def _read_blob(data: bytes, offset: int) -> Tuple[bytes, int]:
    """Read OSC blob (int32 size, then padded payload)."""
    size, offset = _read_int(data, offset)
    if size < 0:
        raise MalformedPacket(f"Negative OSC blob size: {size}", offset - 4)
    end = offset + size
    padded = _padded_end(end)
    if padded > len(data):
        raise MalformedPacket(
            f"OSC blob of {size} bytes runs past end of packet", offset - 4
        )
    return data[offset:end], padded


def _read_string_argument(data: bytes, offset: int):
    raw, new_offset = _read_raw_string(data, offset)
    try:
        return String(raw.decode('utf-8')), new_offset
    except UnicodeDecodeError:
        # Keep the message; only this argument is unreadable
        return Unknown('s', raw), new_offset


def _skip_known_width(data: bytes, offset: int, tag: str) -> Tuple[Unknown, int]:
    width = OSCConstants.SKIPPABLE_TAG_WIDTHS[tag]
    if width is None:
        raw, new_offset = _read_raw_string(data, offset)
        return Unknown(tag, raw), new_offset
    _require(data, offset, width, f"'{tag}' argument")
    return Unknown(tag, data[offset:offset + width]), offset + width


def _parse_arguments(data: bytes, offset: int, type_tags: str) -> Tuple[List, int]:
    arguments = []
    for index, tag in enumerate(type_tags):
        if tag == 'i':
            value, offset = _read_int(data, offset)
            arguments.append(Int32(value))
        elif tag == 'f':
            value, offset = _read_float(data, offset)
            arguments.append(Float32(value))
        elif tag == 's':
            arg, offset = _read_string_argument(data, offset)
            arguments.append(arg)
        elif tag == 'b':
            value, offset = _read_blob(data, offset)
            arguments.append(Blob(value))
        elif tag in OSCConstants.SKIPPABLE_TAG_WIDTHS:
            arg, offset = _skip_known_width(data, offset, tag)
            arguments.append(arg)
        else:
            # Payload width unknown: the rest of the packet is opaque
            arguments.append(Unknown(tag, data[offset:]))
            arguments.extend(Unknown(t) for t in type_tags[index + 1:])
            offset = len(data)
            break
    return arguments, offset


def parse_osc_message(data: bytes) -> Message:
    """
    Parse binary OSC message into a Message.

    Args:
        data: Raw bytes from UDP packet

    Returns:
        Message: Parsed message with address and typed arguments

    Raises:
        MalformedPacket: If the packet is not a well-formed OSC message

    Example:
        >>> data = b'/volume\\x00,f\\x00\\x00?@\\x00\\x00'
        >>> parse_osc_message(data)
        Message(address='/volume', args=(Float32(value=0.75),))
    """
    data = bytes(data)
    if not data:
        raise MalformedPacket("Empty OSC packet", 0)
    if data[0:1] != OSCConstants.ADDRESS_PREFIX.encode():
        raise MalformedPacket(
            f"OSC packet must start with an address ('/'), got byte {data[0]:#04x}", 0
        )

    address, offset = _read_string(data, 0)

    if offset >= len(data):
        raise MalformedPacket(f"Missing OSC type tag string after address {address}", offset)
    type_tags, offset = _read_string(data, offset)
    if not type_tags.startswith(OSCConstants.TYPE_TAG_PREFIX):
        raise MalformedPacket(f"OSC type tags must start with ',': {type_tags!r}", offset)

    arguments, offset = _parse_arguments(data, offset, type_tags[1:])

    if offset != len(data):
        raise MalformedPacket(
            f"{len(data) - offset} unexpected bytes after last argument "
            f"(type tags {type_tags!r})",
            offset,
        )

    return Message(address=address, args=tuple(arguments))


decode_message = parse_osc_message
