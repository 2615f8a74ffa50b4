"""
OSC Debugger - observe and inject Open Sound Control messages over UDP.

This package provides:
- codec: OSC 1.0 message encoding/decoding and text-to-argument inference
- transport: UDP endpoints for receiving and sending datagrams
- monitor: pump that decodes incoming traffic into records
- send: pump that turns typed commands into outgoing OSC messages
"""

__version__ = "1.0.0"
