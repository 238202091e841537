"""
Shared test fixtures and utilities for the expecttree test suite.
"""

import pytest

from expecttree import Tester, TestModuleInfo


def make_module(callback, name: str = "sample.test", root: str = "specs") -> TestModuleInfo:
    """Build a module descriptor located directly under `root`."""
    return TestModuleInfo(name=name, path=(name, root), callback=callback)


@pytest.fixture
def module_factory():
    """Factory for module descriptors: `module_factory(callback, name=..., root=...)`."""
    return make_module


@pytest.fixture
def run_module():
    """Run a single module body and return the finished Tester.

    Usage:
        def test_something(run_module):
            def body(env, context):
                env.expect(1)
                env.to_equal(1)

            tester = run_module(body)
            assert tester.results.passed_count == 1
    """

    def _run(callback, name: str = "sample.test", root: str = "specs", settings=None) -> Tester:
        return Tester([make_module(callback, name, root)], settings)

    return _run


@pytest.fixture
def module_path():
    """Path of the root node of a module created by `run_module` with defaults."""
    return ["specs", "sample.test"]
