"""
Monitor pump: decodes incoming OSC traffic into records for a sink.
"""

from .records import DecodedRecord, DecodeErrorNotice, MonitorNotice
from .listener import MonitorPump, MonitorState

__all__ = ["DecodedRecord", "DecodeErrorNotice", "MonitorNotice", "MonitorPump", "MonitorState"]
