"""Serializers for converting monitor notices to JSON-serializable dictionaries."""

import base64
import math
from typing import Any, Dict, Optional

from ..codec.types import Blob, Float32, Message, Unknown
from ..monitor.records import DecodedRecord, DecodeErrorNotice


def serialize_argument(arg) -> Dict[str, Any]:
    """
    Serialize a single OSC argument.

    Binary payloads are base64 encoded; non-finite floats become strings
    because JSON has no representation for them.
    """
    if isinstance(arg, Unknown):
        return {
            'type': 'unknown',
            'tag': arg.tag,
            'data': base64.b64encode(arg.data).decode('ascii'),
        }

    value: Any = arg.value
    if isinstance(arg, Blob):
        value = base64.b64encode(arg.value).decode('ascii')
    elif isinstance(arg, Float32) and not math.isfinite(arg.value):
        value = str(arg.value)

    return {'type': arg.type_name, 'tag': arg.tag, 'value': value}


def serialize_message(message: Message) -> Dict[str, Any]:
    return {
        'address': message.address,
        'type_tags': message.type_tags,
        'args': [serialize_argument(arg) for arg in message.args],
    }


def create_message(msg_type: str, payload: Dict[str, Any]) -> Dict[str, Any]:
    """
    Create a WebSocket message envelope.

    Args:
        msg_type: Message type (e.g. 'OSC_MESSAGE')
        payload: Message payload

    Returns:
        Message dictionary
    """
    return {
        'type': msg_type,
        'payload': payload,
    }


def create_record_message(record: DecodedRecord) -> Dict[str, Any]:
    """Create a message for a decoded datagram."""
    return create_message('OSC_MESSAGE', {
        'message': serialize_message(record.message),
        'sender': {'address': record.sender_address, 'port': record.sender_port},
        'byte_size': record.byte_size,
        'received_at': record.received_at.isoformat(),
    })


def create_decode_error_message(notice: DecodeErrorNotice) -> Dict[str, Any]:
    """Create a message for a datagram that failed to decode."""
    return create_message('DECODE_ERROR', {
        'error': str(notice.error),
        'offset': notice.error.offset,
        'sender': {'address': notice.sender_address, 'port': notice.sender_port},
        'byte_size': notice.raw_byte_size,
        'received_at': notice.received_at.isoformat(),
    })


def create_hello_message(listen_address: str, listen_port: int, version: Optional[str] = None) -> Dict[str, Any]:
    """Create the greeting sent to each newly connected client."""
    return create_message('HELLO', {
        'listening': {'address': listen_address, 'port': listen_port},
        'version': version,
    })
