"""Utility helpers shared by the pumps and the command-line front end."""

from .cancellation import wait_or_stop
from .stdin import StdinLineReader

__all__ = ["wait_or_stop", "StdinLineReader"]
