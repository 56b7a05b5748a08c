"""Suite file discovery and loading

A suite is any ``.py`` file below the tests directory whose name does not
start with an underscore. Loading a suite executes it, which starts its
requests; exported PendingResult chains are then awaited by the runner.
"""

import importlib.util
import re
import sys
from pathlib import Path
from types import ModuleType
from typing import Iterator, List, Tuple, Union

from backend import PendingResult, TestResult

MODULE_PREFIX = "harness_suite_"


def collect_test_files(directory: Union[str, Path]) -> List[Path]:
    """Recursively list suite files, sorted by path

    Raises:
        FileNotFoundError: If ``directory`` does not exist
    """
    root = Path(directory)
    if not root.is_dir():
        raise FileNotFoundError(f"Test directory not found: {root}")

    return sorted(
        path for path in root.rglob("*.py")
        if path.is_file() and not path.name.startswith("_") and "__pycache__" not in path.parts
    )


def suite_name(path: Path, root: Union[str, Path]) -> str:
    """Display name of a suite: its path relative to root, without suffix"""
    return path.resolve().relative_to(Path(root).resolve()).with_suffix("").as_posix()


def load_test_module(path: Path, root: Union[str, Path]) -> ModuleType:
    """Import a suite file under a unique module name

    Args:
        path: Suite file
        root: Tests directory the file was discovered in

    Returns:
        The executed module
    """
    module_name = MODULE_PREFIX + re.sub(r"\W", "_", suite_name(path, root))
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise ImportError(f"Cannot load test file {path}")

    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except BaseException:
        sys.modules.pop(module_name, None)
        raise
    return module


def iter_exports(module: ModuleType) -> Iterator[Tuple[str, Union[PendingResult, TestResult]]]:
    """Yield the assertion chains a suite exports

    Uses ``__all__`` when the suite defines it, otherwise every public
    module attribute.
    """
    names = getattr(module, "__all__", None)
    if names is None:
        names = [name for name in vars(module) if not name.startswith("_")]

    for name in names:
        value = getattr(module, name, None)
        if isinstance(value, (PendingResult, TestResult)):
            yield name, value
