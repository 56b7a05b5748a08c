"""CLI entry point and argument parsing"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from pydantic import ValidationError
from rich.console import Console

import settings
from auth import AuthError, GrantType
from utils.logging_setup import configure_logging
from .args import RunArgs
from .report_display import show_report
from .runner import run_suites

console = Console()
logger = logging.getLogger(__name__)

EXIT_INVALID_ARGS = 2
EXIT_INTERRUPTED = 130

# Flags forwarded to RunArgs when given
RUN_ARG_FIELDS = (
    "grant_type",
    "base_url",
    "client_id",
    "client_secret",
    "exchange_code",
    "username",
    "password",
    "refresh_token",
    "tests_dir",
    "auth_timeout",
    "request_timeout",
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Backend API integration test harness")
    parser.add_argument(
        "--grant-type",
        choices=[grant.value for grant in GrantType],
        default=settings.GRANT_TYPE,
        help="Grant type used to obtain the bearer token (default: from config)"
    )
    parser.add_argument("--base-url", default=settings.BASE_URL, help="Backend base URL")
    parser.add_argument("--client-id", default=settings.CLIENT_ID, help="OAuth client id")
    parser.add_argument("--client-secret", default=settings.CLIENT_SECRET, help="OAuth client secret")
    parser.add_argument("--exchange-code", default=settings.EXCHANGE_CODE, help="Exchange code (exchange_code grant)")
    parser.add_argument("--username", default=settings.USERNAME, help="Username (password grant)")
    parser.add_argument("--password", default=settings.PASSWORD, help="Password (password grant)")
    parser.add_argument("--refresh-token", default=settings.REFRESH_TOKEN, help="Refresh token (refresh_token grant)")
    parser.add_argument("--tests-dir", default=settings.TESTS_DIR, help="Directory searched for suite files")
    parser.add_argument("--auth-timeout", type=float, default=settings.AUTH_TIMEOUT, help="Token request timeout (s)")
    parser.add_argument("--request-timeout", type=float, default=settings.REQUEST_TIMEOUT, help="Test request timeout (s)")
    parser.add_argument("--log-level", default=settings.LOG_LEVEL, help="Log level (default: from config)")
    parser.add_argument("--log-file", default=settings.LOG_FILE, help="Append logs to this file")
    parser.add_argument("--debug", "-d", action="store_true", help="Enable debug logging")
    return parser


def run(argv: Optional[List[str]] = None) -> int:
    """Run the harness and return the process exit code"""
    parser = build_parser()
    options = parser.parse_args(argv)

    try:
        configure_logging("debug" if options.debug else options.log_level, options.log_file)
    except ValueError as e:
        console.print(f"[red]ERROR:[/red] {e}")
        return EXIT_INVALID_ARGS

    values = {name: getattr(options, name) for name in RUN_ARG_FIELDS if getattr(options, name) is not None}
    try:
        args = RunArgs(**values)
    except ValidationError as e:
        console.print("[red]ERROR:[/red] Invalid arguments")
        for error in e.errors():
            location = ".".join(str(part) for part in error["loc"]) or "arguments"
            console.print(f"  {location}: {error['msg']}")
        return EXIT_INVALID_ARGS

    try:
        report = asyncio.run(run_suites(args))
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        return EXIT_INTERRUPTED
    except AuthError as e:
        logger.critical(f"Error initializing backend client: {e}")
        console.print(f"\n[red]Fatal error:[/red] {e}")
        return 1
    except Exception as e:
        logger.critical(f"Harness run aborted: {e!r}")
        console.print(f"\n[red]Fatal error:[/red] {e}")
        if options.debug:
            console.print_exception()
        return 1

    show_report(report, console)
    return report.exit_code


def main():
    """Entry point for the CLI"""
    sys.exit(run())


if __name__ == "__main__":
    main()
