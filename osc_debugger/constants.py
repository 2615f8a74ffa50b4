"""
Constants for the OSC debugger.

This module centralizes magic values and defaults used by the codec,
the transport layer and the command-line front end.
"""

from enum import Enum


class NetworkDefaults:
    """Default endpoints and UDP limits."""

    DEFAULT_PORT = 8888
    DEFAULT_ADDRESS = "0.0.0.0"
    DEFAULT_WS_HOST = "localhost"
    DEFAULT_WS_PORT = 8765

    MIN_PORT = 1
    MAX_PORT = 65535

    # Receive buffer large enough for any UDP datagram
    MAX_DATAGRAM_SIZE = 65535
    # 65535 - 8 byte UDP header - 20 byte IPv4 header
    MAX_UDP_PAYLOAD = 65507


class OSCConstants:
    """Wire-format constants for the OSC 1.0 message subset."""

    ALIGNMENT = 4
    ADDRESS_PREFIX = "/"
    TYPE_TAG_PREFIX = ","

    INT32_MIN = -(2 ** 31)
    INT32_MAX = 2 ** 31 - 1

    # Payload widths of standard tags this tool does not model.
    # None marks a padded string payload.
    SKIPPABLE_TAG_WIDTHS = {
        "T": 0,
        "F": 0,
        "N": 0,
        "I": 0,
        "c": 4,
        "r": 4,
        "m": 4,
        "h": 8,
        "t": 8,
        "d": 8,
        "S": None,
    }


class CommandConstants:
    """Constants for the interactive send prompt."""

    QUIT_COMMANDS = frozenset({"q", "quit", "exit"})
    PROMPT = "> "


class LogDefaults:
    """Logging defaults."""

    TRAFFIC_LOGGER = "osc_debugger.traffic"
    LOG_FILE_PREFIX = "osc-monitor-"
    ADDRESS_COLUMN_WIDTH = 30
    TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S.%f"


class Mode(str, Enum):
    """Operating mode selected on the command line."""
    MONITOR = "monitor"
    SEND = "send"
