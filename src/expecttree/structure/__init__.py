"""
expecttree structure components.

This package provides the node stack, the lifecycle callback registry,
scope expansion and the collectors that walk a finished tree. The tree
builder lives in `expecttree.structure.builder`; it is not re-exported here
because it depends on the registration environment, which in turn depends
on this package.
"""

from expecttree.structure.collectors import (
    collect_build_messages,
    collect_test_results,
    count_expect_nodes,
    has_focus_attributes,
)
from expecttree.structure.expansion import expand_node, run_callback, run_scope_callbacks
from expecttree.structure.registry import CallbackRegistry, ScopeCallbacks, ScopeEvent
from expecttree.structure.stack import NodeStack, PendingAssertion, ScopeFrame

__all__ = [
    "NodeStack",
    "ScopeFrame",
    "PendingAssertion",
    "CallbackRegistry",
    "ScopeCallbacks",
    "ScopeEvent",
    "expand_node",
    "run_callback",
    "run_scope_callbacks",
    "collect_build_messages",
    "collect_test_results",
    "count_expect_nodes",
    "has_focus_attributes",
]
