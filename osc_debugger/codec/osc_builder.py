"""
OSC (Open Sound Control) message builder.

This module encodes Message values into OSC 1.0 wire bytes.
OSC messages consist of an address pattern, type tags, and arguments.

Reference: http://opensoundcontrol.org/spec-1_0
"""

import struct
from typing import Any

from ..constants import OSCConstants
from ..errors import InvalidArgument
from .types import Blob, Float32, Int32, Message, String, Unknown, validate_address


def _pad_to_multiple_of_4(data: bytes) -> bytes:
    """Pad bytes to a multiple of 4 bytes with null bytes."""
    remainder = len(data) % OSCConstants.ALIGNMENT
    if remainder != 0:
        data += b'\x00' * (OSCConstants.ALIGNMENT - remainder)
    return data


def _encode_string(s: str) -> bytes:
    """Encode a string as OSC string (null-terminated, padded to 4 bytes)."""
    encoded = s.encode('utf-8') + b'\x00'
    return _pad_to_multiple_of_4(encoded)


def _encode_int(i: int) -> bytes:
    """Encode an integer as OSC int32 (big-endian)."""
    return struct.pack('>i', i)


def _encode_float(f: float) -> bytes:
    """Encode a float as OSC float32 (big-endian)."""
    return struct.pack('>f', f)


def _encode_blob(b: bytes) -> bytes:
    """Encode bytes as OSC blob (int32 size prefix, padded payload)."""
    return struct.pack('>i', len(b)) + _pad_to_multiple_of_4(b)


def encode_argument(arg) -> bytes:
    """Encode the payload of a single argument (without its type tag)."""
    if isinstance(arg, Int32):
        return _encode_int(arg.value)
    elif isinstance(arg, Float32):
        return _encode_float(arg.value)
    elif isinstance(arg, String):
        return _encode_string(arg.value)
    elif isinstance(arg, Blob):
        return _encode_blob(arg.value)
    elif isinstance(arg, Unknown):
        raise InvalidArgument(f"Cannot encode argument with unknown type tag: {arg.tag!r}")
    raise InvalidArgument(f"Unsupported OSC argument type: {type(arg).__name__}")


def encode_message(message: Message) -> bytes:
    """
    Encode an OSC message to wire bytes.

    Args:
        message: Message to encode

    Returns:
        bytes: Complete OSC message ready to send via UDP

    Raises:
        InvalidArgument: If the message carries an Unknown argument

    Example:
        >>> encode_message(Message("/light/1/color", (String("red"),)))
        b'/light/1/color\\x00\\x00,s\\x00\\x00red\\x00'
    """
    validate_address(message.address)

    data = _encode_string(message.address)
    data += _encode_string(message.type_tags)
    for arg in message.args:
        data += encode_argument(arg)

    return data


def _to_argument(value: Any):
    if isinstance(value, (Int32, Float32, String, Blob)):
        return value
    if isinstance(value, bool):
        raise InvalidArgument("Boolean arguments are not supported")
    if isinstance(value, int):
        return Int32(value)
    if isinstance(value, float):
        return Float32(value)
    if isinstance(value, str):
        return String(value)
    if isinstance(value, (bytes, bytearray)):
        return Blob(bytes(value))
    raise InvalidArgument(f"Unsupported OSC argument type: {type(value).__name__}")


def build_osc_message(address: str, *args: Any) -> bytes:
    """
    Build an OSC message from an address and plain Python values.

    Args:
        address: OSC address pattern (e.g., "/mixer/volume")
        *args: Variable arguments (int, float, str, bytes or Argument values)

    Returns:
        bytes: Complete OSC message ready to send via UDP

    Example:
        >>> msg = build_osc_message("/volume", 0.75)
    """
    return encode_message(Message(address, tuple(_to_argument(arg) for arg in args)))
