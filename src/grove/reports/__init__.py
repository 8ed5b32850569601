"""Reporting module for grove run output."""

from grove.reports.base import NullReporter, Reporter, notify
from grove.reports.console import ConsoleReporter


__all__ = [
    "ConsoleReporter",
    "NullReporter",
    "Reporter",
    "notify",
]
