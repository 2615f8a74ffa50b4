from datetime import datetime

import pytest

from osc_debugger.codec import Blob, Float32, Int32, Message, String, Unknown
from osc_debugger.errors import InvalidAddress, MalformedPacket, SendError
from osc_debugger.monitor import DecodedRecord, DecodeErrorNotice
from osc_debugger.send import SendResult
from osc_debugger.sinks import format_decode_error, format_record, format_send_result
from osc_debugger.sinks.formatting import format_float, format_type, format_value


AT = datetime(2024, 5, 1, 12, 0, 0, 123456)


def _record(*args, address="/volume"):
    return DecodedRecord(Message(address, args), "192.168.1.20", 53000, 20, AT)


def test_format_record_single_float():
    line = format_record(_record(Float32(0.75)))
    assert line == (
        "2024-05-01 12:00:00.123456 192.168.1.20:53000 20B "
        + "/volume".ljust(30)
        + " 0.75 (float)"
    )


def test_format_record_multiple_arguments():
    line = format_record(_record(Int32(3), String("red"), Blob(b"abc"), address="/mix"))
    assert line.endswith("3, red, <blob 3 bytes> (integer, string, blob)")


def test_format_record_without_arguments():
    assert format_record(_record(address="/ping")).endswith("/ping".ljust(30) + " (null)")


def test_format_record_long_address_is_not_truncated():
    address = "/" + "a" * 40
    assert f" {address} 1 (integer)" in format_record(_record(Int32(1), address=address))


@pytest.mark.parametrize("value, expected", [
    (0.75, "0.75"),
    (1.0, "1.0"),
    (-2.0, "-2.0"),
    (3.140000104904175, "3.14"),
    (float("inf"), "inf"),
])
def test_format_float(value, expected):
    assert format_float(value) == expected


def test_format_unknown_argument():
    arg = Unknown("h", b"\x00" * 8)
    assert format_value(arg) == "<'h' 8 bytes>"
    assert format_type(arg) == "unknown:h"


def test_format_decode_error():
    notice = DecodeErrorNotice(MalformedPacket("Missing type tag string", offset=8), 12, "10.0.0.5", 1234, AT)
    assert format_decode_error(notice) == (
        "2024-05-01 12:00:00.123456 10.0.0.5:1234 12B "
        "Error parsing OSC message: Missing type tag string"
    )


def test_format_send_results():
    sent = SendResult.sent("/volume 0.75", "/volume", Float32(0.75), 16)
    invalid = SendResult.invalid("volume", InvalidAddress("OSC address must start with /: volume"))
    failed = SendResult.failed("/a 1", "/a", Int32(1), SendError("network unreachable"))

    assert format_send_result(sent) == "Sent: /volume = 0.75"
    assert format_send_result(invalid) == "Invalid command: OSC address must start with /: volume"
    assert format_send_result(failed) == "Error sending message: network unreachable"
