"""Assertions over a settled TestResult

Assertion failures are observational: they are logged and recorded in the
report but never raised, so a full endpoint survey can finish in one run.
"""

import json
import logging
from typing import TYPE_CHECKING, Any, Callable, Mapping, Tuple

if TYPE_CHECKING:
    from .result import TestResult

logger = logging.getLogger(__name__)

UNSET: Any = object()


def _normalise(value: Any) -> Any:
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, Mapping):
        return {str(key): _normalise(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_normalise(item) for item in value]
    return value


def canonical_json(value: Any) -> str:
    """Order-independent structural serialization used for equality checks"""
    return json.dumps(_normalise(value), sort_keys=True, separators=(",", ":"), default=str)


def values_equal(actual: Any, expected: Any) -> bool:
    # Booleans never equal numbers and 1 equals 1.0, as in JSON
    return canonical_json(actual) == canonical_json(expected)


def resolve_property_path(data: Any, path: str) -> Tuple[bool, Any]:
    """Walk a dot-separated path through nested mappings and lists

    Args:
        data: Parsed response body
        path: Path such as ``channels.client-events`` or ``0.status``

    Returns:
        Tuple of (found, value). ``found`` is False when a key is missing,
        an index is out of range or not numeric, or None (or a scalar) is
        reached before the path is exhausted.
    """
    current = data
    for segment in path.split("."):
        if isinstance(current, Mapping):
            if segment not in current:
                return False, None
            current = current[segment]
        elif isinstance(current, list):
            if not segment.isdigit() or int(segment) >= len(current):
                return False, None
            current = current[int(segment)]
        else:
            return False, None
    return True, current


class Expectations:
    """Assertion surface bound to one TestResult"""

    def __init__(self, result: "TestResult"):
        self._result = result

    def _emit(self, check: str, passed: bool, message: str) -> "TestResult":
        result = self._result
        log = result.logger or logger
        if passed:
            log.info(f"✓ {result.description}: {message}")
        else:
            log.error(f"✗ {result.description}: {message}")
        if result.report is not None:
            result.report.record(result.description, check, passed, message)
        return result

    def to_have_status(self, expected: int) -> "TestResult":
        actual = self._result.status
        if actual == expected:
            return self._emit("to_have_status", True, f"Status is {expected}")
        return self._emit("to_have_status", False, f"Expected status {expected}, got {actual}")

    def to_have_data(self, predicate: Callable[[Any], Any]) -> "TestResult":
        """Pass when ``predicate(data)`` is truthy; predicate errors propagate"""
        if predicate(self._result.data):
            return self._emit("to_have_data", True, "Data validation passed")
        return self._emit("to_have_data", False, "Data validation failed")

    def to_match_data(self, expected: Any) -> "TestResult":
        actual = self._result.data
        if values_equal(actual, expected):
            return self._emit("to_match_data", True, "Data matches expected")
        (self._result.logger or logger).debug(
            f"{self._result.description}: expected={canonical_json(expected)} actual={canonical_json(actual)}"
        )
        return self._emit("to_match_data", False, "Data doesn't match expected")

    def to_have_header(self, name: str, value: Any = None) -> "TestResult":
        actual = self._result.headers.get(name)
        passed = actual is not None and (value is None or actual == value)
        if passed:
            return self._emit("to_have_header", True, f"Header {name} validation passed")
        if actual is None:
            return self._emit("to_have_header", False, f"Header {name} not found")
        return self._emit("to_have_header", False, f"Header {name} validation failed: expected {value!r}, got {actual!r}")

    def to_have_property(self, path: str, value: Any = UNSET) -> "TestResult":
        """Check a dot-separated property path in the parsed body

        Without ``value`` the property only has to exist (a null value
        counts as present); with ``value`` it must equal it exactly.
        """
        found, actual = resolve_property_path(self._result.data, path)
        if not found:
            return self._emit("to_have_property", False, f"Property {path} not found")
        if value is UNSET or values_equal(actual, value):
            return self._emit("to_have_property", True, f"Property {path} validation passed")
        return self._emit(
            "to_have_property", False, f"Property {path} validation failed: expected {value!r}, got {actual!r}"
        )
