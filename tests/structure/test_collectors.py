"""
Tests for the tree collectors.

This module tests the walks over finished trees, built by hand:
- Build message collection and path reconstruction
- Skip counting and focus propagation
- Containment of checks that raise
"""

from expecttree.checks import always_fail_check, equal_check
from expecttree.core import DetailNode, ExpectNode, NodeAttribute
from expecttree.results import TestResults
from expecttree.structure import (
    collect_build_messages,
    collect_test_results,
    count_expect_nodes,
    has_focus_attributes,
)


def _expect(value, expected, attributes: NodeAttribute | None = None) -> ExpectNode:
    node = ExpectNode(value=value, expected=expected, check=equal_check)
    if attributes is not None:
        node.add_attribute(attributes)
    return node


def _detail(name: str, *children, attributes: NodeAttribute | None = None) -> DetailNode:
    node = DetailNode(name=name, children=list(children))
    if attributes is not None:
        node.add_attribute(attributes)
    return node


def _run(tree: DetailNode) -> TestResults:
    results = TestResults()
    collect_test_results(tree, results, [], has_focus_attributes(tree), False)
    return results


class TestBuildMessages:
    """Test collection of build errors and debug messages."""

    def test_paths_follow_detail_names(self):
        """Nested errors are reported under the names of their ancestors."""
        inner = _detail("inner")
        inner.add_error("broken")
        outer = _detail("outer", inner)
        outer.add_message("note")
        tree = DetailNode(children=[outer])
        tree.add_error("global")

        results = TestResults()
        collect_build_messages(tree, results)

        assert results.build_error_paths == [[], ["outer", "inner"]]
        assert results.build_errors == [["global"], ["broken"]]
        assert results.message_paths == [["outer"]]
        assert results.build_error_count == 2
        assert results.message_count == 1

    def test_expect_nodes_not_descended(self):
        """Expect children contribute no build errors."""
        expect_node = _expect(1, 1)
        expect_node.add_error("ignored")
        results = TestResults()
        collect_build_messages(DetailNode(children=[expect_node]), results)
        assert results.build_error_count == 0


class TestCounting:
    """Test subtree helpers."""

    def test_count_expect_nodes_recurses(self):
        """All Expect nodes of a subtree are counted."""
        tree = _detail("a", _expect(1, 1), _detail("b", _expect(2, 2), _detail("c", _expect(3, 3))))
        assert count_expect_nodes(tree) == 3
        assert count_expect_nodes(_expect(1, 1)) == 1
        assert count_expect_nodes(_detail("empty")) == 0

    def test_focus_found_in_skipped_subtree(self):
        """The focus scan looks inside skipped subtrees too."""
        tree = DetailNode(
            children=[_detail("skipped", _expect(1, 1, NodeAttribute.FOCUS), attributes=NodeAttribute.SKIP)]
        )
        assert has_focus_attributes(tree)
        assert not has_focus_attributes(_detail("plain", _expect(1, 1)))


class TestRunResults:
    """Test check evaluation with skip and focus."""

    def test_pass_and_fail(self):
        """Results are tallied and failures grouped by scope."""
        tree = DetailNode(children=[_detail("group", _expect(1, 1), _expect(1, 2))])
        results = _run(tree)

        assert results.passed_count == 1
        assert results.failed_count == 1
        assert results.run_error_paths == [["group"]]
        assert len(results.run_errors[0]) == 1

    def test_nested_skip_counts_all_descendants(self):
        """A skipped detail counts every Expect node below it."""
        skipped = _detail(
            "skipped",
            _expect(1, 2),
            _detail("inner", _expect(1, 2), _expect(1, 2)),
            attributes=NodeAttribute.SKIP,
        )
        results = _run(DetailNode(children=[skipped, _expect(1, 1)]))

        assert results.skipped_count == 3
        assert results.passed_count == 1
        assert results.failed_count == 0

    def test_focus_propagates_to_descendants(self):
        """Expects below a focused detail run, others are skipped."""
        focused = _detail("focused", _expect(1, 1), _detail("inner", _expect(2, 2)), attributes=NodeAttribute.FOCUS)
        other = _detail("other", _expect(1, 2))
        results = _run(DetailNode(children=[focused, other]))

        assert results.passed_count == 2
        assert results.skipped_count == 1
        assert results.failed_count == 0

    def test_focus_inside_skip_does_not_run(self):
        """Skip wins even over a focused descendant."""
        tree = DetailNode(
            children=[
                _detail("skipped", _expect(1, 2, NodeAttribute.FOCUS), attributes=NodeAttribute.SKIP),
                _expect(1, 1),
            ]
        )
        results = _run(tree)

        assert results.skipped_count == 2
        assert results.passed_count == 0

    def test_fail_node(self):
        """A fail node reports its message."""
        tree = DetailNode(children=[ExpectNode(expected="later", check=always_fail_check)])
        results = _run(tree)
        assert results.failed_count == 1
        assert results.run_error_paths == [[]]
        assert results.run_errors == [["fail: later"]]

    def test_raising_check_counts_as_failure(self):
        """A check that raises is a failed test with a descriptive message."""

        class Unequal:
            def __eq__(self, other):
                raise TypeError("cannot compare")

        results = _run(DetailNode(children=[_expect(1, Unequal())]))
        assert results.failed_count == 1
        assert results.run_errors == [["TypeError raised by check: cannot compare"]]
