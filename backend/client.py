"""HTTP request engine for backend API tests"""

import asyncio
import logging
import time
from typing import Any, Coroutine, List, Mapping, Optional, Union

import httpx

from auth import AuthResponse
from utils.logging_setup import redact_headers
from .encoding import build_headers, build_url, encode_body
from .errors import NetworkFailure, ParseFailure
from .options import HttpMethod, TestOptions
from .pending import PendingResult
from .report import TestReport
from .result import TestResult

DEFAULT_TIMEOUT = 30.0

# Statuses that never carry a body, whatever their Content-Type says
BODYLESS_STATUSES = frozenset({204, 304})


def is_json_content_type(content_type: str) -> bool:
    media_type = content_type.split(";", 1)[0].strip().lower()
    return media_type == "application/json" or media_type.endswith("+json")


class BackendTest:
    """Issues one HTTP exchange per test and hands back chainable results

    Requests are scheduled as tasks on the running event loop, so ``test``
    and the verb helpers must be called from async code (or from code that
    runs while the loop is running, such as a suite module being imported
    by the runner). Tasks that finish cleanly are dropped right away; failed
    ones are kept until ``settle()`` collects their errors.
    """

    def __init__(
        self,
        base_url: str,
        auth: Union[AuthResponse, str, None] = None,
        *,
        default_headers: Optional[Mapping[str, str]] = None,
        send_token_by_default: bool = False,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        report: Optional[TestReport] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Args:
            base_url: Base URL every endpoint is appended to
            auth: AuthResponse (or bare access token) used for bearer auth
            default_headers: Headers sent with every request
            send_token_by_default: Put the bearer token into the default headers
            timeout: Default per-request timeout in seconds
            transport: Custom httpx transport (used by tests and the local stub)
            report: Report that assertion outcomes are collected into
            logger: Logger for request and assertion lines
        """
        self.base_url = base_url
        self.auth = auth if isinstance(auth, AuthResponse) else None
        self.token = auth.access_token if isinstance(auth, AuthResponse) else auth
        self.timeout = timeout
        self.report = report if report is not None else TestReport()
        self.logger = logger or logging.getLogger(__name__)
        self.default_headers = dict(default_headers or {})
        self._client = httpx.AsyncClient(transport=transport, timeout=timeout)
        self._tasks: List["asyncio.Future[TestResult]"] = []

        self.logger.info(f"BackendTest initialized with base URL: {self.base_url}")

        if send_token_by_default and self.token:
            self.default_headers["Authorization"] = f"Bearer {self.token}"
            self.logger.info("Default bearer token configured")

    @classmethod
    def create(cls, base_url: str, auth: Union[AuthResponse, str, None] = None, **kwargs: Any) -> "BackendTest":
        return cls(base_url, auth, **kwargs)

    async def __aenter__(self) -> "BackendTest":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    def test(self, description: str, options: TestOptions) -> PendingResult:
        """Start a test request

        Args:
            description: Human readable test description, used in every log line
            options: Request configuration

        Returns:
            PendingResult that can be awaited or have assertions chained onto it
        """
        self.logger.info(f"Running test: {description}")
        return PendingResult(self._spawn(self._execute(description, options)), self._spawn)

    def get(self, description: str, endpoint: str, **options: Any) -> PendingResult:
        return self.test(description, TestOptions(endpoint=endpoint, method=HttpMethod.GET, **options))

    def post(self, description: str, endpoint: str, **options: Any) -> PendingResult:
        return self.test(description, TestOptions(endpoint=endpoint, method=HttpMethod.POST, **options))

    def put(self, description: str, endpoint: str, **options: Any) -> PendingResult:
        return self.test(description, TestOptions(endpoint=endpoint, method=HttpMethod.PUT, **options))

    def patch(self, description: str, endpoint: str, **options: Any) -> PendingResult:
        return self.test(description, TestOptions(endpoint=endpoint, method=HttpMethod.PATCH, **options))

    def delete(self, description: str, endpoint: str, **options: Any) -> PendingResult:
        return self.test(description, TestOptions(endpoint=endpoint, method=HttpMethod.DELETE, **options))

    async def settle(self) -> List[BaseException]:
        """Wait for every request and chained assertion started so far

        Returns:
            Distinct exceptions raised by the settled tasks, in order
        """
        errors: List[BaseException] = []
        seen = set()
        while self._tasks:
            tasks, self._tasks = self._tasks, []
            for outcome in await asyncio.gather(*tasks, return_exceptions=True):
                if isinstance(outcome, BaseException) and id(outcome) not in seen:
                    seen.add(id(outcome))
                    errors.append(outcome)
        return errors

    def _spawn(self, coro: Coroutine[Any, Any, TestResult]) -> "asyncio.Future[TestResult]":
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            coro.close()
            raise RuntimeError("Test requests must be started while an event loop is running") from None
        task = loop.create_task(coro)
        self._tasks.append(task)
        task.add_done_callback(self._forget)
        return task

    def _forget(self, task: "asyncio.Future[TestResult]") -> None:
        if task.cancelled() or task.exception() is not None:
            return
        if task in self._tasks:
            self._tasks.remove(task)

    async def _execute(self, description: str, options: TestOptions) -> TestResult:
        method = options.method.value
        url = build_url(self.base_url, options.endpoint)
        headers = build_headers(
            self.default_headers,
            options.headers,
            body_type=options.body_type,
            sends_body=options.sends_body,
            token=self.token,
            bearer_auth=options.bearer_auth,
        )
        if options.bearer_auth and not self.token:
            self.logger.warning(f"{description}: bearer auth requested but no token is configured")

        body = encode_body(options.body_type, options.body) if options.sends_body else {}
        timeout = options.timeout if options.timeout is not None else self.timeout
        request = self._client.build_request(
            method, url, params=options.query_params or None, headers=headers, timeout=timeout, **body
        )
        url = str(request.url)

        self.logger.info(f"Test: {description} - {method} {options.endpoint}")
        self.logger.debug(
            f"{description}: {method} {url} headers={redact_headers(headers)} "
            f"body_type={options.body_type.value} body={options.body!r}"
        )

        try:
            start = time.perf_counter()
            # httpx timeouts apply per connect/read/write; this bounds the whole exchange
            response = await asyncio.wait_for(self._client.send(request), timeout)
            response_time = (time.perf_counter() - start) * 1000
        except asyncio.TimeoutError as e:
            self.logger.error(f"✗ Test failed: {description} - timed out after {timeout}s")
            raise NetworkFailure(description, method, url, f"timed out after {timeout}s") from e
        except httpx.RequestError as e:
            self.logger.error(f"✗ Test failed: {description} - {e!r}")
            raise NetworkFailure(description, method, url, repr(e)) from e

        data = self._parse_body(description, response)

        self.logger.info(
            f"Test Result: {description} - Status {response.status_code} ({response_time:.0f}ms)"
        )
        self.logger.debug(f"{description}: response data={data!r}")

        return TestResult(
            status=response.status_code,
            status_text=response.reason_phrase,
            data=data,
            headers=response.headers,
            response_time=response_time,
            description=description,
            report=self.report,
            logger=self.logger,
        )

    def _parse_body(self, description: str, response: httpx.Response) -> Any:
        content_type = response.headers.get("content-type", "")
        if not is_json_content_type(content_type):
            return response.text
        if response.status_code in BODYLESS_STATUSES and not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            self.logger.error(f"✗ {description}: response body is not valid JSON ({e})")
            raise ParseFailure(description, content_type, response.text) from e
