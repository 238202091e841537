"""
Filesystem discovery of test modules.

A test module is a Python file whose name ends with the configured suffix
(`.test.py` by default) and which defines a module-level callable, `run` by
default, taking `(environment, context)`. Modules that fail to import or do
not define the callable are skipped with a warning.
"""

import importlib.util
import logging
import re
import sys
from pathlib import Path

from expecttree.exceptions import DiscoveryError
from expecttree.models import TestModuleInfo

logger = logging.getLogger(__name__)

_MODULE_PREFIX = "_expecttree_module_"


def module_name(path: Path) -> str:
    """Test module name: the file name without its `.py` extension."""
    return path.name[:-3] if path.name.endswith(".py") else path.name


def relative_path(path: Path, root: Path) -> list[str]:
    """
    Leaf-to-root path segments of a test module.

    The first segment is the module name, followed by the enclosing
    directories up to and including the discovery root. When `root` is the
    module file itself the path is just the module name.
    """
    if path == root:
        return [module_name(path)]
    parents = list(path.relative_to(root).parent.parts)
    return [module_name(path), *reversed(parents), root.name]


def load_test_module(path: Path, segments: list[str], entry_point: str = "run") -> TestModuleInfo:
    """
    Import a test module from its file and return its descriptor.

    Params:
        path: File to import
        segments: Leaf-to-root path of the module
        entry_point: Name of the module-level callable to use as the body

    Raises:
        DiscoveryError: If the file cannot be imported or lacks the callable
    """
    display = "/".join(reversed(segments))
    unique_name = _MODULE_PREFIX + re.sub(r"\W", "_", display)

    spec = importlib.util.spec_from_file_location(unique_name, path)
    if spec is None or spec.loader is None:
        raise DiscoveryError(display, "not an importable Python file")

    module = importlib.util.module_from_spec(spec)
    sys.modules[unique_name] = module
    try:
        spec.loader.exec_module(module)
    except Exception as e:
        del sys.modules[unique_name]
        raise DiscoveryError(display, f"{type(e).__name__}: {e}") from e

    callback = getattr(module, entry_point, None)
    if not callable(callback):
        raise DiscoveryError(display, f"module does not define a callable '{entry_point}'")

    return TestModuleInfo(name=module_name(path), path=segments, callback=callback)


def discover_test_modules(
    root: Path | str, suffix: str = ".test.py", entry_point: str = "run"
) -> list[TestModuleInfo]:
    """
    Find and load every test module below `root`.

    Files are visited in sorted path order so discovery order is stable
    between runs.

    Params:
        root: Directory to search, or a single test module file
        suffix: File name suffix identifying test modules
        entry_point: Name of the module-level callable to use as the body

    Returns:
        Descriptors of every module that loaded successfully
    """
    root = Path(root).resolve()
    if root.is_file():
        candidates = [root] if root.name.endswith(suffix) else []
    else:
        candidates = sorted(p for p in root.rglob(f"*{suffix}") if p.is_file())

    modules_info: list[TestModuleInfo] = []
    for path in candidates:
        try:
            modules_info.append(load_test_module(path, relative_path(path, root), entry_point))
        except DiscoveryError as e:
            logger.warning("%s", e)

    logger.debug("Discovered %d test module(s) under %s", len(modules_info), root)
    return modules_info
