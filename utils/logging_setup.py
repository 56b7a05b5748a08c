"""Logging configuration for harness runs

Console output goes through Rich so pass/fail lines stay readable; an
optional plain-text log file keeps the full run for later inspection.
"""

import logging
import os
from typing import Mapping, Optional, Union

from rich.console import Console
from rich.logging import RichHandler

FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Header values that must never reach a log
SENSITIVE_HEADERS = frozenset({"authorization", "cookie", "set-cookie", "x-api-key", "api-key"})


def parse_level(level: Union[str, int]) -> int:
    """Translate a level name such as ``info`` into a logging level"""
    if isinstance(level, int):
        return level
    value = logging.getLevelName(level.strip().upper())
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level: {level}")
    return value


def configure_logging(
    level: Union[str, int] = "info",
    log_file: Optional[str] = None,
    console: Optional[Console] = None
) -> logging.Logger:
    """Install console (and optionally file) handlers on the root logger

    Args:
        level: Root log level
        log_file: Append a plain-text copy of every record to this file
        console: Rich console to render to (a stderr console by default)

    Returns:
        The configured root logger
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(parse_level(level))

    # Clear existing handlers to avoid duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
        markup=False,
    )
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(console_handler)

    if log_file:
        log_path = os.path.abspath(log_file)
        file_handler = logging.FileHandler(log_path, mode="a", encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        root_logger.addHandler(file_handler)
        root_logger.debug(f"Logging to {log_path}")

    # httpx logs every request at INFO; the harness logs its own summary
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    return root_logger


def redact_headers(headers: Mapping[str, str]) -> dict:
    """Copy of ``headers`` with credential values masked"""
    return {
        name: "[REDACTED]" if name.lower() in SENSITIVE_HEADERS else value
        for name, value in headers.items()
    }
