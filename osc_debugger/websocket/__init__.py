"""WebSocket feed of decoded OSC traffic for web viewers."""

from .server import RecordWebSocketServer
from .broadcaster import RecordBroadcaster
from .serializers import create_decode_error_message, create_record_message, serialize_message

__all__ = [
    'RecordWebSocketServer',
    'RecordBroadcaster',
    'create_decode_error_message',
    'create_record_message',
    'serialize_message',
]
