"""
Console and file sink for decoded traffic.

Traffic lines go through a dedicated logger so they can be printed bare on
the console and appended to a plain-text log file, independently of the
diagnostic logging configured by setup_logging().
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional, TextIO

from ..constants import LogDefaults
from ..monitor.records import DecodedRecord, DecodeErrorNotice, MonitorNotice
from ..send.results import SendResult
from .formatting import format_decode_error, format_record, format_send_result


logger = logging.getLogger(__name__)


def default_log_path(started_at: Optional[datetime] = None, directory: Optional[Path] = None) -> Path:
    """
    Build the default traffic log path.

    Returns:
        Path like ./osc-monitor-2024-05-01T12-00-00.log
    """
    started_at = started_at or datetime.now()
    directory = directory or Path.cwd()
    stamp = started_at.strftime("%Y-%m-%dT%H-%M-%S")
    return directory / f"{LogDefaults.LOG_FILE_PREFIX}{stamp}.log"


class TrafficLog:
    """
    Sink that renders monitor notices and send results as text lines.

    Usable directly as a MonitorSink (await traffic_log(notice)) and as a
    SendSink via on_send_result().
    """

    def __init__(self, log_file: Optional[Path] = None, stream: Optional[TextIO] = None):
        """
        Initialize traffic log.

        Args:
            log_file: Optional file to append plain-text lines to
            stream: Console stream (default: stdout)
        """
        self.log_file = Path(log_file) if log_file else None
        self.logger = logging.getLogger(LogDefaults.TRAFFIC_LOGGER)
        self.logger.setLevel(logging.INFO)
        self.logger.propagate = False
        self._handlers: List[logging.Handler] = []

        plain = logging.Formatter('%(message)s')

        console_handler = logging.StreamHandler(stream or sys.stdout)
        console_handler.setFormatter(plain)
        self._add_handler(console_handler)

        if self.log_file:
            try:
                self.log_file.parent.mkdir(parents=True, exist_ok=True)
                file_handler = logging.FileHandler(self.log_file, mode='a', encoding='utf-8')
            except OSError as e:
                logger.error(f"Cannot open log file {self.log_file}: {e}. Continuing without file logging")
                self.log_file = None
            else:
                file_handler.setFormatter(plain)
                self._add_handler(file_handler)
                logger.info(f"Logging to: {self.log_file}")

    def _add_handler(self, handler: logging.Handler) -> None:
        self.logger.addHandler(handler)
        self._handlers.append(handler)

    async def __call__(self, notice: MonitorNotice) -> None:
        if isinstance(notice, DecodedRecord):
            self.logger.info(format_record(notice))
        elif isinstance(notice, DecodeErrorNotice):
            self.logger.warning(format_decode_error(notice))
        else:
            raise TypeError(f"Unsupported notice type: {type(notice).__name__}")

    async def on_send_result(self, result: SendResult) -> None:
        if result.success:
            self.logger.info(format_send_result(result))
        else:
            self.logger.error(format_send_result(result))

    def close(self) -> None:
        """Detach and close the handlers this sink installed."""
        for handler in self._handlers:
            self.logger.removeHandler(handler)
            handler.close()
        self._handlers = []
        if self.log_file:
            logger.info("Log file closed.")
