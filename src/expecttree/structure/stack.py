"""
Node stack mirroring the nested structure of registration callbacks.

Registration functions always operate on the top frame of the stack. Each
frame owns one open Detail (or root) node together with the assertion that
is waiting for its check and the run of attribute nodes waiting for their
target, so an Expect node is attached to its parent only once its check is
known.
"""

from dataclasses import dataclass, field
from typing import Any

from expecttree.core.tree_node import AttributeNode, DetailNode, ExpectNode
from expecttree.core.types import Check
from expecttree.exceptions import BuildError

INCOMPLETE_EXPECT_MESSAGE = "Encountered an Expect node without a validation check"
TRAILING_ATTRIBUTE_MESSAGE = "Encountered an attribute node at the end of the scope"


@dataclass
class PendingAssertion:
    """Expect node that has been opened but not yet given a check."""

    node: ExpectNode
    frame: "ScopeFrame"

    def finish(self, expected: Any, check: Check) -> ExpectNode:
        """Install the check and attach the node to the frame's Detail node."""
        self.node.expected = expected
        self.node.check = check
        self.frame.node.children.append(self.node)
        self.frame.pending = None
        return self.node

    def discard(self) -> None:
        """Drop the assertion without attaching it to the tree."""
        self.frame.pending = None


@dataclass
class ScopeFrame:
    """One open scope: a Detail node plus its in-progress registrations."""

    node: DetailNode
    pending: PendingAssertion | None = None
    attributes: list[AttributeNode] = field(default_factory=list)


class NodeStack:
    """Explicit push/pop stack of open scopes.

    One stack is created per test run and threaded through the registration
    environment; nested `detail` callbacks push a new frame before their body
    runs and pop it once the body returns.
    """

    def __init__(self):
        self._frames: list[ScopeFrame] = []

    def __len__(self) -> int:
        return len(self._frames)

    def push(self, node: DetailNode) -> ScopeFrame:
        frame = ScopeFrame(node=node)
        self._frames.append(frame)
        return frame

    def pop(self) -> ScopeFrame:
        return self._frames.pop()

    def top(self) -> ScopeFrame:
        return self._frames[-1]

    @property
    def current(self) -> DetailNode:
        """The Detail node registrations are currently attached to."""
        return self._frames[-1].node

    def add_error(self, message: str) -> None:
        self.current.add_error(message)

    def add_traced_error(self, message: str) -> None:
        """Record a build error including the user call site."""
        self.current.add_error(str(BuildError.traced(message)))

    def add_message(self, message: str) -> None:
        self.current.add_message(message)

    def begin_assertion(self, value: Any) -> PendingAssertion:
        """Open a new assertion in the top frame."""
        frame = self.top()
        pending = PendingAssertion(node=ExpectNode(value=value), frame=frame)
        frame.pending = pending
        return pending

    @property
    def pending(self) -> PendingAssertion | None:
        return self._frames[-1].pending

    def close_incomplete_expect(self) -> bool:
        """Discard a dangling assertion and report it.

        Returns:
            True if a dangling assertion was found
        """
        pending = self.top().pending
        if pending is None:
            return False
        pending.discard()
        self.add_traced_error(INCOMPLETE_EXPECT_MESSAGE)
        return True

    def push_attribute(self, node: AttributeNode) -> None:
        self.top().attributes.append(node)

    def take_attributes(self) -> list[AttributeNode]:
        """Pop the pending attribute run, innermost first."""
        frame = self.top()
        attributes = list(reversed(frame.attributes))
        frame.attributes.clear()
        return attributes

    def drop_attributes(self) -> bool:
        """Discard a pending attribute run.

        Returns:
            True if there were pending attributes
        """
        return bool(self.take_attributes())

    def apply_attributes(self, target: DetailNode | ExpectNode, attributes: list[AttributeNode]) -> None:
        """Fold an attribute batch into the target and note it on the parent scope."""
        for attribute_node in attributes:
            target.add_attribute(attribute_node.attribute)
            self.add_message(attribute_node.describe())

    def close_scope(self) -> None:
        """Validate the top frame before it is popped."""
        self.close_incomplete_expect()
        if self.drop_attributes():
            self.add_traced_error(TRAILING_ATTRIBUTE_MESSAGE)
