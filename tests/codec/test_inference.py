import pytest

from osc_debugger.codec import Float32, Int32, String, infer_argument
from osc_debugger.errors import InvalidArgument


@pytest.mark.parametrize("token, expected", [
    ("42", Int32(42)),
    ("-7", Int32(-7)),
    ("+5", Int32(5)),
    ("007", Int32(7)),
    ("2147483647", Int32(2147483647)),
    ("-2147483648", Int32(-2147483648)),
    ("3.14", Float32(3.14)),
    ("1.0", Float32(1.0)),
    ("1.", Float32(1.0)),
    (".5", Float32(0.5)),
    ("-0.25", Float32(-0.25)),
    ('"red"', String("red")),
    ('"1.0"', String("1.0")),
    ('"42"', String("42")),
    ('"hello world"', String("hello world")),
])
def test_infer_argument(token, expected):
    assert infer_argument(token) == expected


def test_unquoted_decimal_is_float_not_string():
    assert isinstance(infer_argument("1.0"), Float32)
    assert isinstance(infer_argument('"1.0"'), String)


@pytest.mark.parametrize("token", [
    "",
    "   ",
    "abc",
    "red",
    '""',
    '"a"b"',
    '"unterminated',
    "1e5",
    "1.5e3",
    "inf",
    "nan",
    "1.2.3",
    "1_000",
    "0x10",
    "-0.0",
    "-.0",
    "2147483648",
    "-2147483649",
    "99999999999999999999999",
    "1" * 50 + ".0",
])
def test_infer_argument_rejects(token):
    with pytest.raises(InvalidArgument):
        infer_argument(token)


def test_infer_empty_error_message():
    with pytest.raises(InvalidArgument, match="Value cannot be empty"):
        infer_argument("")
