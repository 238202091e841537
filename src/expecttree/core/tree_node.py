"""
Tree node model for the expecttree framework.

This module contains the tagged node types that make up a test tree:
Detail nodes group other nodes, Expect nodes pair a tested value with a
check, and Attribute nodes are transient markers that modify the next
structural node.
"""

from dataclasses import dataclass, field
from enum import Enum, Flag, auto
from typing import Any

from expecttree.core.types import Check


class NodeKind(Enum):
    """Discriminator for tree node variants."""

    DETAIL = "detail"
    EXPECT = "expect"
    ATTRIBUTE = "attribute"


class NodeAttribute(Flag):
    """Debug attributes that can be applied to Detail and Expect nodes."""

    SKIP = auto()
    FOCUS = auto()
    TODO = auto()


NO_ATTRIBUTES = NodeAttribute(0)


@dataclass(eq=False)
class TreeNode:
    """Base node of the test tree.

    Errors and messages are stored most-recent-first and stay `None` until
    the first entry is recorded.
    """

    kind: NodeKind
    name: str | None = None
    children: list["TreeNode"] = field(default_factory=list)
    attributes: NodeAttribute = NO_ATTRIBUTES
    errors: list[str] | None = None
    messages: list[str] | None = None

    def has_attribute(self, attribute: NodeAttribute) -> bool:
        return attribute in self.attributes

    def add_attribute(self, attribute: NodeAttribute) -> None:
        self.attributes |= attribute

    def add_error(self, message: str) -> None:
        """Record a build error on this node."""
        if self.errors is None:
            self.errors = [message]
        else:
            self.errors.insert(0, message)

    def add_message(self, message: str) -> None:
        """Record a debug message on this node."""
        if self.messages is None:
            self.messages = [message]
        else:
            self.messages.insert(0, message)

    @property
    def is_detail(self) -> bool:
        return self.kind is NodeKind.DETAIL

    @property
    def is_expect(self) -> bool:
        return self.kind is NodeKind.EXPECT


@dataclass(eq=False)
class DetailNode(TreeNode):
    """Named grouping scope whose body is produced by calling `expand`.

    Root module nodes carry a `(environment, context)` callable; nested
    Detail nodes carry a zero-argument callable. Grouping nodes created for
    intermediate path segments have no `expand` at all.
    """

    kind: NodeKind = NodeKind.DETAIL
    expand: Any = None

    def find_child(self, name: str) -> "DetailNode | None":
        """Return the first Detail child with the given name."""
        for child in self.children:
            if isinstance(child, DetailNode) and child.name == name:
                return child
        return None


@dataclass(eq=False)
class ExpectNode(TreeNode):
    """Single assertion pairing a tested value with a check."""

    kind: NodeKind = NodeKind.EXPECT
    value: Any = None
    expected: Any = None
    check: Check | None = None

    @property
    def is_complete(self) -> bool:
        return self.check is not None

    def evaluate(self) -> tuple[bool, str | None]:
        """Run the installed check against the tested value."""
        return self.check(self.expected, self.value)


@dataclass(eq=False)
class AttributeNode(TreeNode):
    """Transient marker applied to the next Detail or Expect registration.

    For ToDo attributes `name` holds the TODO text.
    """

    kind: NodeKind = NodeKind.ATTRIBUTE
    attribute: NodeAttribute = NO_ATTRIBUTES

    def describe(self) -> str:
        """Human readable debug message emitted when the attribute is applied."""
        if self.attribute is NodeAttribute.TODO:
            return f"TODO: {self.name}"
        if self.attribute is NodeAttribute.SKIP:
            return "DebugSkip was used"
        return "DebugFocus was used"
