"""
Test run orchestration.

A `Tester` owns the whole lifecycle of one run: build the tree from module
descriptors, collect build messages, evaluate checks and expose the
results. Construction does all of the work; the instance is read-only
afterwards.
"""

import logging
import math
import time
from collections.abc import Iterable
from pathlib import Path

from expecttree.config import TesterSettings
from expecttree.core.tree_node import DetailNode
from expecttree.discovery import discover_test_modules
from expecttree.models import TestModuleInfo
from expecttree.reporting import format_results
from expecttree.results import TestResults
from expecttree.structure.builder import create_node_tree
from expecttree.structure.collectors import (
    collect_build_messages,
    collect_test_results,
    has_focus_attributes,
)

logger = logging.getLogger(__name__)


def _milliseconds() -> float:
    return time.perf_counter() * 1000


def _elapsed(start: float) -> float:
    """Milliseconds since `start`, truncated to three decimal places."""
    return math.floor((_milliseconds() - start) * 1000) / 1000


class Tester:
    """Build and run the tests described by a sequence of module descriptors.

    Usage:
        tester = Tester.from_directory("specs")
        tester.print_results()
        if tester.results.has_failures: ...
    """

    __test__ = False

    def __init__(self, modules_info: Iterable[TestModuleInfo], settings: TesterSettings | None = None):
        self._settings = settings or TesterSettings()
        self._modules_info = tuple(modules_info)
        results = TestResults()

        start = _milliseconds()
        tree = create_node_tree(self._modules_info, epsilon=self._settings.fuzzy_epsilon)
        collect_build_messages(tree, results)
        results.build_time = _elapsed(start)

        start = _milliseconds()
        focus_active = has_focus_attributes(tree)
        collect_test_results(tree, results, [], focus_active, False)
        results.run_time = _elapsed(start)

        logger.debug(
            "Ran %d module(s): %d passed, %d failed, %d skipped, %d build error(s)",
            len(self._modules_info),
            results.passed_count,
            results.failed_count,
            results.skipped_count,
            results.build_error_count,
        )

        self._tree = tree
        self._results = results

    @classmethod
    def from_directory(cls, root: Path | str, settings: TesterSettings | None = None) -> "Tester":
        """Discover the test modules under `root` and run them."""
        settings = settings or TesterSettings()
        modules_info = discover_test_modules(root, settings.test_suffix, settings.entry_point)
        return cls(modules_info, settings)

    @property
    def settings(self) -> TesterSettings:
        return self._settings

    @property
    def modules_info(self) -> tuple[TestModuleInfo, ...]:
        """Information for all test modules, as given before building the tests."""
        return self._modules_info

    @property
    def results(self) -> TestResults:
        return self._results

    @property
    def tree(self) -> DetailNode:
        return self._tree

    def format_results(self) -> str:
        return format_results(self._results)

    def print_results(self) -> None:
        print(self.format_results())
