"""
In-memory representation of OSC messages and their typed arguments.

Each argument variant carries its OSC type tag as a class attribute and
validates its value on construction, so any Message that exists can be
encoded without further checks.
"""

import math
import struct
from dataclasses import dataclass, field
from typing import ClassVar, Tuple, Union

from ..constants import OSCConstants
from ..errors import InvalidAddress, InvalidArgument


def _encodes_as_utf8(text: str) -> bool:
    """False for text with lone surrogates, which UTF-8 cannot carry."""
    try:
        text.encode('utf-8')
    except UnicodeEncodeError:
        return False
    return True


@dataclass(frozen=True)
class Int32:
    """32-bit signed integer argument (tag 'i')."""
    value: int
    tag: ClassVar[str] = "i"
    type_name: ClassVar[str] = "integer"

    def __post_init__(self):
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise InvalidArgument(f"Int32 value must be an int, got {type(self.value).__name__}")
        if not OSCConstants.INT32_MIN <= self.value <= OSCConstants.INT32_MAX:
            raise InvalidArgument(f"Integer out of int32 range: {self.value}")


@dataclass(frozen=True)
class Float32:
    """
    32-bit IEEE-754 float argument (tag 'f').

    The value is rounded to single precision on construction so that a
    decoded Float32 compares equal to the one that was encoded.
    """
    value: float
    tag: ClassVar[str] = "f"
    type_name: ClassVar[str] = "float"

    def __post_init__(self):
        if isinstance(self.value, bool) or not isinstance(self.value, (int, float)):
            raise InvalidArgument(f"Float32 value must be a number, got {type(self.value).__name__}")
        try:
            single = struct.unpack('>f', struct.pack('>f', self.value))[0]
        except (OverflowError, struct.error) as e:
            raise InvalidArgument(f"Float out of float32 range: {self.value}") from e
        object.__setattr__(self, "value", single)

    # NaN compares equal to NaN so a decoded NaN matches the encoded one
    def __eq__(self, other):
        if not isinstance(other, Float32):
            return NotImplemented
        if math.isnan(self.value) and math.isnan(other.value):
            return True
        return self.value == other.value

    def __hash__(self):
        if math.isnan(self.value):
            return hash((Float32, "nan"))
        return hash((Float32, self.value))


@dataclass(frozen=True)
class String:
    """Text argument (tag 's'), must not contain a NUL character."""
    value: str
    tag: ClassVar[str] = "s"
    type_name: ClassVar[str] = "string"

    def __post_init__(self):
        if not isinstance(self.value, str):
            raise InvalidArgument(f"String value must be a str, got {type(self.value).__name__}")
        if "\x00" in self.value:
            raise InvalidArgument("OSC string cannot contain a NUL character")
        if not _encodes_as_utf8(self.value):
            raise InvalidArgument(f"OSC string is not valid UTF-8 text: {self.value!r}")


@dataclass(frozen=True)
class Blob:
    """Raw byte argument (tag 'b')."""
    value: bytes
    tag: ClassVar[str] = "b"
    type_name: ClassVar[str] = "blob"

    def __post_init__(self):
        if not isinstance(self.value, (bytes, bytearray, memoryview)):
            raise InvalidArgument(f"Blob value must be bytes, got {type(self.value).__name__}")
        object.__setattr__(self, "value", bytes(self.value))


@dataclass(frozen=True)
class Unknown:
    """
    An argument whose tag this tool does not model.

    Only produced by the decoder. `data` holds the raw payload bytes when
    their extent is known, or the whole remaining buffer when it is not.
    """
    tag: str
    data: bytes = b""
    type_name: ClassVar[str] = "unknown"

    @property
    def value(self) -> bytes:
        return self.data


Argument = Union[Int32, Float32, String, Blob, Unknown]

ARGUMENT_TYPES = (Int32, Float32, String, Blob, Unknown)


def validate_address(address: str) -> str:
    """
    Check the OSC address invariant.

    Raises:
        InvalidAddress: If the address is empty, does not start with '/',
            or contains a NUL character
    """
    if not isinstance(address, str) or not address:
        raise InvalidAddress("OSC address cannot be empty")
    if not address.startswith(OSCConstants.ADDRESS_PREFIX):
        raise InvalidAddress(f"OSC address must start with '/': {address}")
    if "\x00" in address:
        raise InvalidAddress("OSC address cannot contain a NUL character")
    if not _encodes_as_utf8(address):
        raise InvalidAddress(f"OSC address is not valid UTF-8 text: {address!r}")
    return address


@dataclass(frozen=True)
class Message:
    """An OSC message: an address and an ordered tuple of arguments."""
    address: str
    args: Tuple[Argument, ...] = field(default_factory=tuple)

    def __post_init__(self):
        validate_address(self.address)
        args = tuple(self.args)
        for arg in args:
            if not isinstance(arg, ARGUMENT_TYPES):
                raise InvalidArgument(f"Unsupported OSC argument type: {type(arg).__name__}")
        object.__setattr__(self, "args", args)

    @property
    def type_tags(self) -> str:
        """Type-tag string as it appears on the wire, including the leading comma."""
        return OSCConstants.TYPE_TAG_PREFIX + "".join(arg.tag for arg in self.args)
