"""
Parsing of operator commands typed at the send prompt.

Command format:
    <address> <value>

    /light/1/color "red"
    /volume 0.75
    /status 1
"""

from dataclasses import dataclass

from ..codec.inference import infer_argument
from ..codec.types import Argument, Message, validate_address
from ..constants import CommandConstants, OSCConstants
from ..errors import InvalidAddress, InvalidArgument


@dataclass(frozen=True)
class SendCommand:
    """A parsed command: target address and a single inferred argument."""
    address: str
    argument: Argument

    def to_message(self) -> Message:
        return Message(self.address, (self.argument,))


def is_quit_command(line: str) -> bool:
    """Return True for q, quit or exit (case-insensitive, surrounding whitespace ignored)."""
    return line.strip().lower() in CommandConstants.QUIT_COMMANDS


def parse_command(line: str) -> SendCommand:
    """
    Parse one line of operator input.

    The first whitespace-separated token is the OSC address; the remaining
    tokens are joined with single spaces and run through infer_argument().

    Args:
        line: Raw input line

    Returns:
        SendCommand: Address and inferred argument

    Raises:
        InvalidAddress: If the address token does not start with '/' or
            is not a valid OSC address
        InvalidArgument: If the input or value is empty or cannot be inferred
    """
    parts = line.split()
    if not parts:
        raise InvalidArgument("Input cannot be empty")

    address = parts[0]
    if not address.startswith(OSCConstants.ADDRESS_PREFIX):
        raise InvalidAddress(f"OSC address must start with /: {address}")
    validate_address(address)

    raw_value = " ".join(parts[1:])
    if not raw_value:
        raise InvalidArgument("Please provide a value")

    return SendCommand(address=address, argument=infer_argument(raw_value))
