"""
UDP endpoint for receiving and sending OSC datagrams.

An endpoint exclusively owns one non-blocking IPv4 UDP socket. Receive
endpoints are bound with bind_endpoint(); send endpoints come from
open_endpoint() and stay unbound. Reads and writes go through the running
asyncio loop, so receive() is a suspension point that can be cancelled.
"""

import asyncio
import logging
import socket
from dataclasses import dataclass
from typing import Optional, Tuple

from ..constants import NetworkDefaults
from ..errors import BindError, SendError, SocketError


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Datagram:
    """One received UDP datagram and its sender."""
    data: bytes
    sender_address: str
    sender_port: int


def validate_destination_port(port: int) -> None:
    """
    Check that a destination port is in 1-65535.

    Raises:
        SendError: If the port is not an int in range
    """
    if isinstance(port, bool) or not isinstance(port, int):
        raise SendError(f"Invalid port number: {port!r}")
    if not NetworkDefaults.MIN_PORT <= port <= NetworkDefaults.MAX_PORT:
        raise SendError(
            f"Invalid port number: {port}. Port must be between "
            f"{NetworkDefaults.MIN_PORT} and {NetworkDefaults.MAX_PORT}."
        )


class UDPEndpoint:
    """
    Async wrapper around a UDP socket.

    close() is idempotent; the endpoint can also be used as an async
    context manager.
    """

    def __init__(self, sock: socket.socket, bound: bool = False):
        """
        Initialize endpoint.

        Args:
            sock: Socket to take ownership of (switched to non-blocking)
            bound: Whether the socket is bound and may receive
        """
        sock.setblocking(False)
        self.socket: Optional[socket.socket] = sock
        self.bound = bound

    @property
    def closed(self) -> bool:
        return self.socket is None

    @property
    def local_address(self) -> Optional[Tuple[str, int]]:
        """(host, port) the socket is bound to, or None for send endpoints."""
        if self.socket is None or not self.bound:
            return None
        return self.socket.getsockname()[:2]

    async def receive(self) -> Datagram:
        """
        Wait for exactly one datagram.

        Returns:
            Datagram: Payload with sender address and port

        Raises:
            SocketError: If the endpoint is closed, unbound or the socket fails
        """
        if self.socket is None:
            raise SocketError("Cannot receive on a closed endpoint")
        if not self.bound:
            raise SocketError("Cannot receive on an unbound send endpoint")

        loop = asyncio.get_running_loop()
        try:
            data, addr = await loop.sock_recvfrom(self.socket, NetworkDefaults.MAX_DATAGRAM_SIZE)
        except OSError as e:
            raise SocketError(f"Socket error while receiving: {e}") from e

        return Datagram(data=data, sender_address=addr[0], sender_port=addr[1])

    async def send(self, data: bytes, address: str, port: int) -> None:
        """
        Send one datagram.

        Args:
            data: Encoded payload
            address: Destination host name or IP address
            port: Destination port (1-65535)

        Raises:
            SendError: On invalid port, oversized payload, unresolvable or
                unreachable destination, or a closed endpoint
        """
        validate_destination_port(port)
        if len(data) > NetworkDefaults.MAX_UDP_PAYLOAD:
            raise SendError(
                f"Payload of {len(data)} bytes exceeds the UDP limit of "
                f"{NetworkDefaults.MAX_UDP_PAYLOAD} bytes"
            )
        if not address:
            raise SendError("Destination address cannot be empty")
        if self.socket is None:
            raise SendError("Cannot send on a closed endpoint")

        loop = asyncio.get_running_loop()
        try:
            infos = await loop.getaddrinfo(
                address, port, family=socket.AF_INET, type=socket.SOCK_DGRAM
            )
        except OSError as e:
            raise SendError(f"Cannot resolve {address}: {e}") from e
        if not infos:
            raise SendError(f"Cannot resolve {address}")
        sockaddr = infos[0][4]

        try:
            await loop.sock_sendto(self.socket, data, sockaddr)
        except OSError as e:
            raise SendError(f"Failed to send to {address}:{port}: {e}") from e

        logger.debug(f"Sent {len(data)} bytes to {address}:{port}")

    def close(self) -> None:
        """Close the socket. Safe to call more than once."""
        if self.socket is None:
            return
        try:
            self.socket.close()
        finally:
            self.socket = None
        logger.debug("UDP endpoint closed")

    async def __aenter__(self) -> "UDPEndpoint":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.close()


def bind_endpoint(port: int, address: str = NetworkDefaults.DEFAULT_ADDRESS) -> UDPEndpoint:
    """
    Create a UDP endpoint bound to address:port for receiving.

    Args:
        port: Local port (0 picks an ephemeral port)
        address: Local interface address (default: 0.0.0.0 for all interfaces)

    Returns:
        UDPEndpoint: Bound endpoint

    Raises:
        BindError: If the port is in use, permission is denied, or the
            address or port is invalid. The socket is closed first.
    """
    if isinstance(port, bool) or not isinstance(port, int) or not 0 <= port <= NetworkDefaults.MAX_PORT:
        raise BindError(f"Invalid port number: {port!r}")

    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    try:
        sock.bind((address, port))
    except (OSError, UnicodeError, TypeError) as e:
        sock.close()
        raise BindError(f"Cannot bind UDP socket to {address}:{port}: {e}") from e

    endpoint = UDPEndpoint(sock, bound=True)
    host, bound_port = endpoint.local_address
    logger.info(f"UDP endpoint listening on {host}:{bound_port}")
    return endpoint


def open_endpoint() -> UDPEndpoint:
    """
    Create an unbound UDP endpoint for sending.

    Raises:
        SocketError: If the operating system refuses to create a socket
    """
    try:
        sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    except OSError as e:
        raise SocketError(f"Cannot create UDP socket: {e}") from e
    return UDPEndpoint(sock, bound=False)
