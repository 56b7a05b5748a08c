"""Request and assertion engine for backend API tests"""

from .client import BackendTest, DEFAULT_TIMEOUT
from .encoding import build_headers, build_url, encode_body, stringify
from .errors import NetworkFailure, ParseFailure, RequestError
from .expectations import Expectations, canonical_json, resolve_property_path, values_equal
from .options import BodyType, HttpMethod, TestOptions
from .pending import DeferredExpectations, PendingResult
from .report import AssertionOutcome, SuiteError, TestReport
from .result import TestResult
from .session import get_backend, set_backend

__all__ = [
    "BackendTest",
    "DEFAULT_TIMEOUT",
    "build_headers",
    "build_url",
    "encode_body",
    "stringify",
    "NetworkFailure",
    "ParseFailure",
    "RequestError",
    "Expectations",
    "canonical_json",
    "resolve_property_path",
    "values_equal",
    "BodyType",
    "HttpMethod",
    "TestOptions",
    "DeferredExpectations",
    "PendingResult",
    "AssertionOutcome",
    "SuiteError",
    "TestReport",
    "TestResult",
    "get_backend",
    "set_backend",
]
