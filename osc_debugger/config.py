"""
Validated run configuration for monitor and send mode.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple, Union

from .constants import NetworkDefaults
from .errors import ConfigError


def validate_port(value: Union[str, int], name: str = "Port") -> int:
    """
    Parse and range-check a port number.

    Args:
        value: Port as int or decimal text
        name: Label used in error messages

    Returns:
        int: Port in 1-65535

    Raises:
        ConfigError: If the value is not a number in range
    """
    if isinstance(value, bool):
        raise ConfigError(f"{name} must be a valid number")
    if isinstance(value, str):
        text = value.strip()
        if not text.isdecimal():
            raise ConfigError(f"{name} must be a valid number: {value!r}")
        if len(text) > 5:
            raise ConfigError(f"Invalid port number: {text}. Port must be between "
                              f"{NetworkDefaults.MIN_PORT} and {NetworkDefaults.MAX_PORT}.")
        value = int(text)
    if not isinstance(value, int):
        raise ConfigError(f"{name} must be a valid number")
    if not NetworkDefaults.MIN_PORT <= value <= NetworkDefaults.MAX_PORT:
        raise ConfigError(
            f"Invalid port number: {value}. Port must be between "
            f"{NetworkDefaults.MIN_PORT} and {NetworkDefaults.MAX_PORT}."
        )
    return value


def validate_host(value: Optional[str]) -> str:
    """
    Check that an IP address or host name is non-empty.

    Raises:
        ConfigError: If the value is empty or whitespace
    """
    if value is None or not value.strip():
        raise ConfigError("IP address cannot be empty")
    return value.strip()


def parse_address_port(target: str) -> Tuple[str, int]:
    """
    Parse 'address:port' or a bare 'port'.

    Example:
        >>> parse_address_port("127.0.0.1:9000")
        ('127.0.0.1', 9000)
        >>> parse_address_port("9000")
        ('0.0.0.0', 9000)

    Raises:
        ConfigError: For any other shape or an invalid port
    """
    parts = target.split(':')
    if len(parts) == 1:
        return NetworkDefaults.DEFAULT_ADDRESS, validate_port(parts[0])
    if len(parts) == 2:
        return validate_host(parts[0]), validate_port(parts[1])
    raise ConfigError("Invalid address:port format. Use format: address:port or just port")


@dataclass(frozen=True)
class MonitorConfig:
    """Configuration for monitor mode."""
    port: int = NetworkDefaults.DEFAULT_PORT
    address: str = NetworkDefaults.DEFAULT_ADDRESS
    log_file: Optional[Path] = None
    ws_port: Optional[int] = None
    ws_host: str = NetworkDefaults.DEFAULT_WS_HOST

    def __post_init__(self):
        validate_port(self.port)
        validate_host(self.address)
        if self.ws_port is not None:
            validate_port(self.ws_port, name="WebSocket port")


@dataclass(frozen=True)
class SendConfig:
    """Configuration for send mode."""
    port: int = NetworkDefaults.DEFAULT_PORT
    address: str = NetworkDefaults.DEFAULT_ADDRESS

    def __post_init__(self):
        validate_port(self.port)
        validate_host(self.address)
