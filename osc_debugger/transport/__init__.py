"""
UDP transport for OSC datagrams.
"""

from .endpoint import Datagram, UDPEndpoint, bind_endpoint, open_endpoint

__all__ = ["Datagram", "UDPEndpoint", "bind_endpoint", "open_endpoint"]
