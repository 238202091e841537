"""
Tree walks turning a finished test tree into `TestResults`.

Two passes run over the same tree in the same child order, so paths are
reconstructed identically:
    - `collect_build_messages` gathers build errors and debug messages.
    - `collect_test_results` evaluates checks honoring skip and focus.
"""

from expecttree.core.tree_node import NodeAttribute, TreeNode
from expecttree.core.types import MessagePath
from expecttree.results import TestResults


def _child_path(path: MessagePath, child: TreeNode) -> MessagePath:
    return path if child.name is None else [*path, child.name]


def collect_build_messages(node: TreeNode, results: TestResults, path: MessagePath | None = None) -> None:
    """Depth-first collection of build errors and messages, keyed by path.

    Only Detail nodes are descended into; the node passed in is reported
    under `path` (the empty path for the tree root).
    """
    path = [] if path is None else path

    if node.messages:
        results.record_messages(path, node.messages)

    if node.is_detail:
        if node.errors:
            results.record_build_errors(path, node.errors)
        for child in node.children:
            collect_build_messages(child, results, _child_path(path, child))


def has_focus_attributes(node: TreeNode) -> bool:
    """True if the node or any descendant carries the Focus attribute."""
    if node.has_attribute(NodeAttribute.FOCUS):
        return True
    return any(has_focus_attributes(child) for child in node.children)


def count_expect_nodes(node: TreeNode) -> int:
    """Number of Expect nodes in a subtree, counted when the subtree is skipped."""
    if node.is_expect:
        return 1
    if node.is_detail:
        return sum(count_expect_nodes(child) for child in node.children)
    return 0


def collect_test_results(
    node: TreeNode,
    results: TestResults,
    path: MessagePath | None = None,
    focus_active: bool = False,
    parent_has_focus: bool = False,
) -> None:
    """
    Evaluate every reachable Expect node below `node` and tally the results.

    Params:
        node: Detail node whose children are evaluated
        results: Record receiving counts and run errors
        path: Path of `node`
        focus_active: Whether any node in the whole tree carries Focus
        parent_has_focus: Whether `node` or one of its ancestors carries Focus

    Skip short-circuits a whole subtree and wins over Focus. When focus is
    active, unfocused Expect nodes are counted as skipped. Run errors of the
    direct Expect children are recorded under `path` after the subtree
    finishes.
    """
    path = [] if path is None else path
    child_errors: list[str] = []

    for child in node.children:
        if child.has_attribute(NodeAttribute.SKIP):
            results.skipped_count += count_expect_nodes(child)
            continue

        has_focus = parent_has_focus or child.has_attribute(NodeAttribute.FOCUS)

        if child.is_expect:
            if focus_active and not has_focus:
                results.skipped_count += 1
                continue

            try:
                success, message = child.evaluate()
            except Exception as e:
                success, message = False, f"{type(e).__name__} raised by check: {e}"

            if success:
                results.passed_count += 1
            else:
                results.failed_count += 1
                child_errors.append(message or "check failed")

        elif child.is_detail:
            collect_test_results(child, results, _child_path(path, child), focus_active, has_focus)

    if child_errors:
        results.record_run_errors(path, child_errors)
