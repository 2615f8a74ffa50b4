import asyncio
import logging
import signal
import sys
from pathlib import Path
from typing import List, Optional, Tuple, Union

from . import __version__
from .config import MonitorConfig, SendConfig, parse_address_port, validate_host, validate_port
from .constants import CommandConstants, Mode, NetworkDefaults
from .errors import BindError, ConfigError, TransportError
from .monitor import MonitorPump
from .send import SendPump, is_quit_command
from .sinks import TrafficLog, default_log_path, fanout
from .utils import StdinLineReader
from .websocket import RecordWebSocketServer


logger = logging.getLogger(__name__)

USAGE = """Usage: osc-debugger [COMMAND] [OPTIONS]

Commands:
  monitor [ADDRESS:PORT|PORT]  - Monitor incoming OSC messages
  send                         - Send OSC messages typed at the prompt
  (none)                       - Ask interactively

Monitor Options:
  --port=PORT        - Port to listen on (default: 8888)
  --address=HOST     - IP address to listen on (default: 0.0.0.0)
  --log              - Log traffic to osc-monitor-<timestamp>.log
  --log-file=PATH    - Log traffic to PATH
  --ws-port=PORT     - Stream decoded messages to WebSocket clients
  --ws-host=HOST     - WebSocket host (default: localhost)

Send Options:
  --port=PORT        - Port to send to (default: 8888)
  --address=HOST     - IP address to send to (default: 0.0.0.0)

Common Options:
  --log-level=LEVEL  - Diagnostic logging: DEBUG, INFO, WARNING, ERROR (default: WARNING)
  --version          - Show version
  -h, --help         - Show this help"""

RunConfig = Union[MonitorConfig, SendConfig]


def setup_logging(log_file: Path = None, level: str = "INFO"):
    """
    Configure diagnostic logging to console and, optionally, a file.

    Decoded traffic is not routed here; see TrafficLog.

    Args:
        log_file: Path to diagnostic log file (optional)
        level: Logging level (DEBUG, INFO, WARNING, ERROR)
    """
    detailed_formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    simple_formatter = logging.Formatter('%(levelname)s: %(message)s')

    numeric_level = getattr(logging, level.upper(), None)
    if not isinstance(numeric_level, int):
        raise ConfigError(f"Unknown log level: {level}")

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers = []

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(simple_formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file, mode='a')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(detailed_formatter)
        root_logger.addHandler(file_handler)

    return root_logger


def _split_option(arg: str) -> Tuple[str, Optional[str]]:
    if "=" in arg:
        name, value = arg.split("=", 1)
        return name, value
    return arg, None


def parse_args(argv: List[str]) -> Tuple[Mode, RunConfig, str]:
    """
    Parse command-line arguments.

    Args:
        argv: Arguments without the program name, starting with the command

    Returns:
        Tuple of (mode, config, log_level)

    Raises:
        ConfigError: For unknown commands or options and invalid values
    """
    if not argv:
        raise ConfigError("Missing command")

    try:
        mode = Mode(argv[0])
    except ValueError:
        raise ConfigError(f"Unknown command: {argv[0]}") from None

    port = NetworkDefaults.DEFAULT_PORT
    address = NetworkDefaults.DEFAULT_ADDRESS
    log_level = "WARNING"
    log_enabled = False
    log_file: Optional[Path] = None
    ws_port: Optional[int] = None
    ws_host = NetworkDefaults.DEFAULT_WS_HOST
    target: Optional[str] = None

    for arg in argv[1:]:
        name, value = _split_option(arg)
        if name == "--port" and value is not None:
            port = validate_port(value)
        elif name == "--address" and value is not None:
            address = validate_host(value)
        elif name == "--log-level" and value:
            log_level = value
        elif mode is Mode.MONITOR and name == "--log" and value is None:
            log_enabled = True
        elif mode is Mode.MONITOR and name == "--log-file" and value:
            log_enabled = True
            log_file = Path(value)
        elif mode is Mode.MONITOR and name == "--ws-port" and value is not None:
            ws_port = validate_port(value, name="WebSocket port")
        elif mode is Mode.MONITOR and name == "--ws-host" and value is not None:
            ws_host = validate_host(value)
        elif mode is Mode.MONITOR and not arg.startswith("-") and target is None:
            target = arg
        else:
            raise ConfigError(f"Unknown option for {mode.value}: {arg}")

    if mode is Mode.SEND:
        return mode, SendConfig(port=port, address=address), log_level

    if target is not None:
        address, port = parse_address_port(target)
    if log_enabled and log_file is None:
        log_file = default_log_path()

    config = MonitorConfig(
        port=port,
        address=address,
        log_file=log_file,
        ws_port=ws_port,
        ws_host=ws_host,
    )
    return mode, config, log_level


def _ask(question: str, default: Optional[str] = None) -> str:
    suffix = f" ({default})" if default is not None else ""
    answer = input(f"? {question}{suffix} ").strip()
    return answer or (default or "")


def run_interactive() -> Tuple[Mode, RunConfig]:
    """
    Ask for mode, port, address and logging on the terminal.

    Invalid answers are re-asked.
    """
    while True:
        choice = _ask("Which tool do you want to run? [monitor/send]", Mode.MONITOR.value).lower()
        if choice in (Mode.MONITOR.value, "m"):
            mode = Mode.MONITOR
            break
        if choice in (Mode.SEND.value, "s"):
            mode = Mode.SEND
            break
        print("Please answer 'monitor' or 'send'")

    verb = "listen on" if mode is Mode.MONITOR else "send to"
    while True:
        try:
            port = validate_port(_ask(f"What port do you want to {verb}?", str(NetworkDefaults.DEFAULT_PORT)))
            break
        except ConfigError as e:
            print(e)
    while True:
        try:
            address = validate_host(
                _ask(f"What IP address do you want to {verb}?", NetworkDefaults.DEFAULT_ADDRESS)
            )
            break
        except ConfigError as e:
            print(e)

    if mode is Mode.SEND:
        return mode, SendConfig(port=port, address=address)

    log_file = None
    if _ask("Do you want to enable logging to file? [y/N]", "n").lower() in ("y", "yes"):
        path = _ask("Log file path (leave empty for default):", "")
        log_file = Path(path) if path else default_log_path()
    return mode, MonitorConfig(port=port, address=address, log_file=log_file)


def print_banner(mode: Mode, target: str) -> None:
    print("\n" + "═" * 60)
    print(f"OSC Debugger v{__version__} - {mode.value.capitalize()} Mode")
    print("═" * 60)
    if mode is Mode.MONITOR:
        print(f"Listening on {target}")
        print("Ready to receive OSC messages...")
        print("Type 'q' + Enter or press Ctrl+C to exit\n")
    else:
        print(f"Target: {target}")
        print("\nMessage Format:")
        print("  <address> <value>")
        print("  - Address: OSC path (e.g., /light/1/color)")
        print('  - Value: Number or string in quotes (e.g., 42 or "red")')
        print("\nExample:")
        print('  /light/1/color "red"')
        print("  /volume 0.75")
        print("  /status 1")
        print("\nType your OSC messages below (or 'q' to quit):\n")


def install_signal_handlers(stop_event: asyncio.Event) -> None:
    """Set the stop event on SIGINT/SIGTERM where the loop supports it."""
    loop = asyncio.get_running_loop()

    def signal_handler():
        print("\nExiting...")
        stop_event.set()

    for sig in (signal.SIGTERM, signal.SIGINT):
        try:
            loop.add_signal_handler(sig, signal_handler)
        except (NotImplementedError, RuntimeError):
            logger.debug(f"Signal handler for {sig!r} not supported on this platform")


async def watch_for_quit(stop_event: asyncio.Event, reader: StdinLineReader) -> None:
    """Set the stop event when the operator types a quit command."""
    while not stop_event.is_set():
        line = await reader()
        if line is None:
            return
        if is_quit_command(line):
            stop_event.set()
            return


async def run_monitor(config: MonitorConfig, stop_event: Optional[asyncio.Event] = None) -> None:
    """
    Run monitor mode until cancelled.

    Raises:
        BindError: If the UDP (or WebSocket) port cannot be bound
        SocketError: If the socket fails while monitoring
    """
    stop_event = stop_event or asyncio.Event()
    install_signal_handlers(stop_event)

    traffic_log = TrafficLog(log_file=config.log_file)
    try:
        pump = MonitorPump.bind(sink=None, port=config.port, address=config.address)
    except TransportError:
        traffic_log.close()
        raise
    ws_server: Optional[RecordWebSocketServer] = None
    quit_task: Optional[asyncio.Task] = None

    try:
        sinks = [traffic_log]
        if config.ws_port is not None:
            ws_server = RecordWebSocketServer(
                host=config.ws_host,
                port=config.ws_port,
                listen_address=config.address,
                listen_port=config.port,
            )
            try:
                await ws_server.start()
            except OSError as e:
                raise BindError(
                    f"Cannot start WebSocket server on {config.ws_host}:{config.ws_port}: {e}"
                ) from e
            sinks.append(ws_server)
        pump.sink = fanout(*sinks)

        host, port = pump.endpoint.local_address
        print_banner(Mode.MONITOR, f"{host}:{port}")
        if traffic_log.log_file:
            print(f"Logging to: {traffic_log.log_file}")
        elif config.log_file:
            print(f"Cannot log to {config.log_file}, continuing without file logging")
        if ws_server:
            print(f"Streaming to ws://{config.ws_host}:{config.ws_port}")

        if sys.stdin is not None and sys.stdin.isatty():
            quit_task = asyncio.create_task(watch_for_quit(stop_event, StdinLineReader()))

        await pump.run(stop_event)
    finally:
        pump.endpoint.close()
        if quit_task:
            quit_task.cancel()
            try:
                await quit_task
            except asyncio.CancelledError:
                pass
        if ws_server:
            await ws_server.stop()
        traffic_log.close()

        stats = pump.get_stats()
        print("\nMonitor Statistics:")
        print(f"  Packets received: {stats['packets_received']}")
        print(f"  Messages decoded: {stats['records_emitted']}")
        print(f"  Decode errors: {stats['decode_errors']}")


async def run_send(config: SendConfig, stop_event: Optional[asyncio.Event] = None) -> None:
    """Run send mode until the operator quits or input ends."""
    stop_event = stop_event or asyncio.Event()
    install_signal_handlers(stop_event)

    traffic_log = TrafficLog()
    reader = StdinLineReader(prompt=CommandConstants.PROMPT)
    pump = SendPump.open(config.address, config.port, reader, sink=traffic_log.on_send_result)

    print_banner(Mode.SEND, f"{config.address}:{config.port}")
    try:
        await pump.run(stop_event)
    finally:
        traffic_log.close()
        print("\nGoodbye!")


def main(argv: Optional[List[str]] = None) -> int:
    argv = sys.argv[1:] if argv is None else argv

    if argv and argv[0] in ("-h", "--help"):
        print(USAGE)
        return 0
    if argv and argv[0] == "--version":
        print(__version__)
        return 0

    try:
        if argv:
            mode, config, log_level = parse_args(argv)
        else:
            mode, config = run_interactive()
            log_level = "WARNING"
        setup_logging(level=log_level)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except (KeyboardInterrupt, EOFError):
        print("\nCancelled.")
        return 0

    runner = run_monitor if mode is Mode.MONITOR else run_send
    try:
        asyncio.run(runner(config))
    except TransportError as e:
        print(f"Failed to start {mode.value}: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nShutdown complete.")

    return 0


if __name__ == "__main__":
    sys.exit(main())
