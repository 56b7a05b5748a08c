"""Harness run orchestration: authenticate, discover suites, run, report"""

import logging
from pathlib import Path
from typing import List, Optional

import httpx

from auth import AuthClient, AuthResponse
from backend import BackendTest, PendingResult, TestReport, set_backend
from .args import RunArgs
from .discovery import collect_test_files, iter_exports, load_test_module, suite_name

logger = logging.getLogger(__name__)


async def authenticate(args: RunArgs, transport: Optional[httpx.AsyncBaseTransport] = None) -> AuthResponse:
    """Acquire the bearer token every suite runs with

    Raises:
        AuthError: Any auth failure; the run cannot continue without a token
    """
    auth = AuthClient(
        args.client_id,
        args.client_secret,
        args.grant_type,
        args.base_url,
        timeout=args.auth_timeout,
        transport=transport,
    )
    return await auth.get_access_token(args.grant_type, args.grant_params())


async def run_test_file(backend: BackendTest, path: Path, root: Path) -> List[BaseException]:
    """Load one suite, await its exported chains and settle its requests

    Errors are logged and recorded in the report rather than raised, so one
    broken suite does not stop the others.

    Returns:
        The distinct errors the suite produced
    """
    name = suite_name(path, root)
    logger.info(f"Running test file: {name}")

    errors: List[BaseException] = []
    try:
        module = load_test_module(path, root)
    except Exception as e:
        errors.append(e)
    else:
        for export_name, export in iter_exports(module):
            if not isinstance(export, PendingResult):
                continue
            try:
                await export
            except Exception as e:
                logger.debug(f"{name}: export {export_name} failed")
                errors.append(e)
    errors.extend(await backend.settle())

    distinct: List[BaseException] = []
    for error in errors:
        if all(error is not seen for seen in distinct):
            distinct.append(error)
            logger.error(f"Error running test {name}: {error}")
            backend.report.record_error(name, error)
    return distinct


async def run_suites(
    args: RunArgs,
    *,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    report: Optional[TestReport] = None
) -> TestReport:
    """Run every discovered suite against the configured backend

    Args:
        args: Validated run arguments
        transport: Custom httpx transport for both auth and test requests
        report: Report to collect into (a new one by default)

    Returns:
        The report with every assertion outcome and suite error

    Raises:
        AuthError: If no token could be acquired
        FileNotFoundError: If the tests directory does not exist
    """
    root = Path(args.tests_dir)
    test_files = collect_test_files(root)

    auth_response = await authenticate(args, transport)

    backend = BackendTest.create(
        args.base_url,
        auth_response,
        timeout=args.request_timeout,
        transport=transport,
        report=report,
    )
    set_backend(backend)
    logger.info("Backend client initialized successfully")
    logger.info(f"Discovered {len(test_files)} test file(s) in {root}")

    try:
        for path in test_files:
            await run_test_file(backend, path, root)
    finally:
        set_backend(None)
        await backend.aclose()

    logger.info(backend.report.summary())
    return backend.report
