"""Access to the engine of the current harness run

Suite modules are plain Python files loaded by the runner. They pick up the
engine the runner authenticated with through ``get_backend()``.
"""

from typing import Optional

from .client import BackendTest

_active_backend: Optional[BackendTest] = None


def set_backend(backend: Optional[BackendTest]) -> None:
    """Register (or clear, with None) the engine suites should use"""
    global _active_backend
    _active_backend = backend


def get_backend() -> BackendTest:
    """Return the engine of the current run

    Raises:
        RuntimeError: If no run is in progress
    """
    if _active_backend is None:
        raise RuntimeError("No backend is active; suites must be run through the harness runner")
    return _active_backend
