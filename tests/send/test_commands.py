import pytest

from osc_debugger.codec import Float32, Int32, Message, String
from osc_debugger.errors import InvalidAddress, InvalidArgument
from osc_debugger.send import SendCommand, is_quit_command, parse_command


@pytest.mark.parametrize("line, address, argument", [
    ('/light/1/color "red"', "/light/1/color", String("red")),
    ("/volume 0.75", "/volume", Float32(0.75)),
    ("/status 1", "/status", Int32(1)),
    ("  /status   -3  ", "/status", Int32(-3)),
    ('/label "hello world"', "/label", String("hello world")),
    ('/n "1.0"', "/n", String("1.0")),
])
def test_parse_command(line, address, argument):
    command = parse_command(line)
    assert command == SendCommand(address, argument)


def test_command_to_message_has_single_argument():
    message = parse_command("/volume 0.75").to_message()
    assert message == Message("/volume", (Float32(0.75),))


def test_parse_command_rejects_address_without_slash():
    with pytest.raises(InvalidAddress, match="must start with /"):
        parse_command("volume 0.75")


def test_parse_command_requires_value():
    with pytest.raises(InvalidArgument, match="Please provide a value"):
        parse_command("/volume")


@pytest.mark.parametrize("line", ["", "   ", "\t"])
def test_parse_command_rejects_empty_input(line):
    with pytest.raises(InvalidArgument, match="Input cannot be empty"):
        parse_command(line)


@pytest.mark.parametrize("line", ["/volume loud", "/x 1e5", '/x ""', "/x 2147483648"])
def test_parse_command_rejects_uninferable_value(line):
    with pytest.raises(InvalidArgument):
        parse_command(line)


@pytest.mark.parametrize("line", ["q", "quit", "exit", "  QUIT ", "Exit"])
def test_quit_commands(line):
    assert is_quit_command(line)


@pytest.mark.parametrize("line", ["", "/q 1", "quitter", "stop"])
def test_not_quit_commands(line):
    assert not is_quit_command(line)
