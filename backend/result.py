"""Settled result of a single test request"""

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

import httpx

from .expectations import Expectations
from .report import TestReport


@dataclass(frozen=True)
class TestResult:
    """Outcome of one HTTP exchange

    Attributes:
        status: HTTP status code
        status_text: Reason phrase
        data: Parsed JSON body, or the raw text for non-JSON responses
        headers: Response headers (case-insensitive)
        response_time: Elapsed milliseconds around the exchange
        description: Human readable test description
        report: Report that assertion outcomes are recorded into
        logger: Logger that assertion outcomes are written to
    """
    __test__ = False

    status: int
    status_text: str
    data: Any
    headers: httpx.Headers
    response_time: float
    description: str
    report: Optional[TestReport] = field(default=None, repr=False, compare=False)
    logger: Optional[logging.Logger] = field(default=None, repr=False, compare=False)

    @property
    def expects(self) -> Expectations:
        """Assertions bound to this result; each returns the result again"""
        return Expectations(self)
