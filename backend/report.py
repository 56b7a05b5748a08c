"""Aggregate pass/fail report for a harness run"""

from dataclasses import dataclass, field
from typing import List


@dataclass(frozen=True)
class AssertionOutcome:
    """One evaluated assertion

    Attributes:
        description: Test description the assertion belongs to
        check: Assertion name, e.g. ``to_have_status``
        passed: Whether the assertion held
        message: Human readable outcome, as logged
    """
    description: str
    check: str
    passed: bool
    message: str


@dataclass(frozen=True)
class SuiteError:
    """A suite file or request that failed before its assertions could run"""
    source: str
    error_type: str
    message: str


@dataclass
class TestReport:
    """Collects every assertion outcome and suite error of a run"""
    __test__ = False

    outcomes: List[AssertionOutcome] = field(default_factory=list)
    errors: List[SuiteError] = field(default_factory=list)

    def record(self, description: str, check: str, passed: bool, message: str) -> AssertionOutcome:
        outcome = AssertionOutcome(description=description, check=check, passed=passed, message=message)
        self.outcomes.append(outcome)
        return outcome

    def record_error(self, source: str, error: BaseException) -> SuiteError:
        suite_error = SuiteError(source=source, error_type=type(error).__name__, message=str(error))
        self.errors.append(suite_error)
        return suite_error

    @property
    def passed(self) -> List[AssertionOutcome]:
        return [outcome for outcome in self.outcomes if outcome.passed]

    @property
    def failed(self) -> List[AssertionOutcome]:
        return [outcome for outcome in self.outcomes if not outcome.passed]

    @property
    def ok(self) -> bool:
        return not self.failed and not self.errors

    @property
    def exit_code(self) -> int:
        return 0 if self.ok else 1

    def summary(self) -> str:
        return (
            f"{len(self.outcomes)} assertion(s): {len(self.passed)} passed, "
            f"{len(self.failed)} failed, {len(self.errors)} error(s)"
        )
