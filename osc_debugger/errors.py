"""
Exception hierarchy for the OSC debugger.

Per-message and per-command errors (MalformedPacket, InvalidAddress,
InvalidArgument, SendError) are handled inside the pumps and reported to
their sinks. Endpoint-level failures (BindError, SocketError) stop the
owning pump and propagate to the caller.
"""


class OSCDebuggerError(Exception):
    """Base class for all OSC debugger errors."""
    pass


class MalformedPacket(OSCDebuggerError, ValueError):
    """Raised when a datagram cannot be decoded as an OSC message."""

    def __init__(self, message: str, offset: int = None):
        super().__init__(message)
        self.offset = offset


class InvalidAddress(OSCDebuggerError, ValueError):
    """Raised when an OSC address is empty, lacks a leading '/' or contains NUL."""
    pass


class InvalidArgument(OSCDebuggerError, ValueError):
    """Raised when a value cannot be represented as an OSC argument."""
    pass


class ConfigError(OSCDebuggerError, ValueError):
    """Raised for invalid command-line or interactive configuration."""
    pass


class TransportError(OSCDebuggerError, OSError):
    """Base class for UDP endpoint failures."""
    pass


class BindError(TransportError):
    """Raised when a receive endpoint cannot be bound."""
    pass


class SendError(TransportError):
    """Raised when a datagram cannot be sent."""
    pass


class SocketError(TransportError):
    """Raised when the underlying socket fails while receiving."""
    pass
