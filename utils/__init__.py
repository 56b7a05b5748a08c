"""Shared utilities package for the backend test harness"""

from .logging_setup import configure_logging, parse_level, redact_headers

__all__ = [
    "configure_logging",
    "parse_level",
    "redact_headers",
]
