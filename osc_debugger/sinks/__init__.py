"""
Sinks for monitor notices and send results.
"""

from .console import TrafficLog, default_log_path
from .fanout import fanout
from .formatting import format_decode_error, format_record, format_send_result

__all__ = [
    "TrafficLog",
    "default_log_path",
    "fanout",
    "format_decode_error",
    "format_record",
    "format_send_result",
]
