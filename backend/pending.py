"""Deferred assertion chaining over an in-flight request

``BackendTest.test`` returns a PendingResult straight away. Callers can
either ``await`` it for the TestResult or chain assertions through
``.expects`` before the response has arrived::

    await backend.get("status", "/status").expects.to_have_status(200) \\
        .expects.to_have_property("status", "UP")

Every step waits on the same shared request task; nothing in the chain can
issue a second request.
"""

import asyncio
from typing import Any, Awaitable, Callable, Coroutine, Generator

from .expectations import UNSET
from .result import TestResult

Spawn = Callable[[Coroutine[Any, Any, TestResult]], "asyncio.Future[TestResult]"]


class PendingResult(Awaitable[TestResult]):
    """Awaitable handle for a TestResult that may not exist yet"""

    def __init__(self, future: "asyncio.Future[TestResult]", spawn: Spawn):
        self._future = future
        self._spawn = spawn

    def __await__(self) -> Generator[Any, None, TestResult]:
        # Shielded so a cancelled awaiter cannot cancel the shared request
        return asyncio.shield(self._future).__await__()

    def __repr__(self) -> str:
        state = "settled" if self._future.done() else "pending"
        return f"<PendingResult {state}>"

    def done(self) -> bool:
        return self._future.done()

    @property
    def expects(self) -> "DeferredExpectations":
        return DeferredExpectations(self)

    def then(self, check: Callable[[TestResult], Any]) -> "PendingResult":
        """Schedule ``check`` to run once this step has settled

        Returns:
            A new PendingResult that resolves to the same TestResult
        """
        async def step() -> TestResult:
            result = await self
            check(result)
            return result

        return PendingResult(self._spawn(step()), self._spawn)


class DeferredExpectations:
    """Same assertion surface as Expectations, evaluated once the request settles"""

    def __init__(self, pending: PendingResult):
        self._pending = pending

    def to_have_status(self, expected: int) -> PendingResult:
        return self._pending.then(lambda result: result.expects.to_have_status(expected))

    def to_have_data(self, predicate: Callable[[Any], Any]) -> PendingResult:
        return self._pending.then(lambda result: result.expects.to_have_data(predicate))

    def to_match_data(self, expected: Any) -> PendingResult:
        return self._pending.then(lambda result: result.expects.to_match_data(expected))

    def to_have_header(self, name: str, value: Any = None) -> PendingResult:
        return self._pending.then(lambda result: result.expects.to_have_header(name, value))

    def to_have_property(self, path: str, value: Any = UNSET) -> PendingResult:
        return self._pending.then(lambda result: result.expects.to_have_property(path, value))
