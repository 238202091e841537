"""
Core expecttree components.

This package provides the node model and the shared type definitions used
by the tree builder, the collectors and the registration environment.
"""

from expecttree.core.tree_node import (
    NO_ATTRIBUTES,
    AttributeNode,
    DetailNode,
    ExpectNode,
    NodeAttribute,
    NodeKind,
    TreeNode,
)
from expecttree.core.types import (
    Callback,
    Check,
    CheckResult,
    MessageList,
    MessagePath,
    TestBuilder,
    TestContext,
)

__all__ = [
    "TreeNode",
    "DetailNode",
    "ExpectNode",
    "AttributeNode",
    "NodeKind",
    "NodeAttribute",
    "NO_ATTRIBUTES",
    "Callback",
    "Check",
    "CheckResult",
    "MessageList",
    "MessagePath",
    "TestBuilder",
    "TestContext",
]
