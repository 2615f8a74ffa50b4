"""
Text-to-argument inference for the send prompt.

The rule is syntactic and ordered:

1. A token wrapped in double quotes ("red") is a String with the quotes
   stripped. The quoted text must be non-empty and contain no other quote.
2. Otherwise a token containing '.' is a Float32. Only plain decimal
   notation is accepted; scientific notation, inf/nan, negative zero and
   values beyond float32 range are rejected.
3. Otherwise the token is a base-10 Int32; anything else is rejected.

So '"1.0"' is String("1.0") while 1.0 is Float32(1.0).
"""

import math
import re

from ..errors import InvalidArgument
from .types import Float32, Int32, String

_QUOTED_RE = re.compile(r'"([^"]+)"')
_FLOAT_RE = re.compile(r'[+-]?(?:\d+\.\d*|\.\d+)')
_INT_RE = re.compile(r'[+-]?\d+')


def infer_argument(token: str):
    """
    Infer a typed OSC argument from a raw text token.

    Args:
        token: Raw value text as typed by the operator

    Returns:
        String, Float32 or Int32

    Raises:
        InvalidArgument: If the token is empty or matches no rule

    Example:
        >>> infer_argument("42")
        Int32(value=42)
        >>> infer_argument('"red"')
        String(value='red')
    """
    if token is None or not token.strip():
        raise InvalidArgument("Value cannot be empty")

    quoted = _QUOTED_RE.fullmatch(token)
    if quoted:
        return String(quoted.group(1))

    if '.' in token:
        return _infer_float(token)

    if not _INT_RE.fullmatch(token):
        raise InvalidArgument(f"Invalid integer: {token}")
    # int32 never needs more than 10 digits
    if len(token.lstrip('+-').lstrip('0')) > 10:
        raise InvalidArgument(f"Integer out of int32 range: {token}")
    try:
        return Int32(int(token))
    except InvalidArgument as e:
        raise InvalidArgument(f"Integer out of int32 range: {token}") from e


def _infer_float(token: str) -> Float32:
    if not _FLOAT_RE.fullmatch(token):
        raise InvalidArgument(f"Invalid number: {token}")

    value = float(token)
    if value == 0.0 and math.copysign(1.0, value) < 0:
        raise InvalidArgument(f"Negative zero is not accepted: {token}")

    try:
        result = Float32(value)
    except InvalidArgument as e:
        raise InvalidArgument(f"Number out of float32 range: {token}") from e
    if math.isinf(result.value):
        raise InvalidArgument(f"Number out of float32 range: {token}")
    return result
