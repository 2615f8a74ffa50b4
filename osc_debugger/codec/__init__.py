"""
OSC codec: message types, binary encoding/decoding and text inference.
"""

from .types import Argument, Blob, Float32, Int32, Message, String, Unknown
from .osc_builder import build_osc_message, encode_message
from .osc_parser import decode_message, parse_osc_message
from .inference import infer_argument

__all__ = [
    "Argument",
    "Blob",
    "Float32",
    "Int32",
    "Message",
    "String",
    "Unknown",
    "build_osc_message",
    "encode_message",
    "decode_message",
    "parse_osc_message",
    "infer_argument",
]
