"""CLI package for the backend test harness

Parses arguments, authenticates, runs every discovered suite and exits
non-zero when any assertion failed or any suite errored.
"""

from cli.args import RunArgs
from cli.main import main, run
from cli.runner import run_suites

__all__ = [
    "RunArgs",
    "main",
    "run",
    "run_suites",
]
