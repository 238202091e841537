"""
Tests for the tree node model.

Focus Areas:
1. Attribute flag handling
2. Error and message recording order
3. Variant specific behavior of Detail, Expect and Attribute nodes
"""

from expecttree.checks import equal_check
from expecttree.core import (
    NO_ATTRIBUTES,
    AttributeNode,
    DetailNode,
    ExpectNode,
    NodeAttribute,
    NodeKind,
)


class TestNodeAttributes:
    """Test attribute flags on nodes."""

    def test_new_node_has_no_attributes(self):
        """Nodes start without any attribute flag."""
        node = DetailNode(name="group")
        assert node.attributes == NO_ATTRIBUTES
        assert not node.has_attribute(NodeAttribute.SKIP)
        assert not node.has_attribute(NodeAttribute.FOCUS)

    def test_attributes_are_combined_with_union(self):
        """Adding several attributes keeps all of them."""
        node = ExpectNode(value=1)
        node.add_attribute(NodeAttribute.FOCUS)
        node.add_attribute(NodeAttribute.SKIP)
        node.add_attribute(NodeAttribute.FOCUS)

        assert node.has_attribute(NodeAttribute.SKIP)
        assert node.has_attribute(NodeAttribute.FOCUS)
        assert not node.has_attribute(NodeAttribute.TODO)


class TestErrorsAndMessages:
    """Test error and message lists."""

    def test_lists_are_none_until_first_entry(self):
        """Errors and messages stay None until something is recorded."""
        node = DetailNode(name="group")
        assert node.errors is None
        assert node.messages is None

    def test_entries_are_most_recent_first(self):
        """New entries are inserted at the front."""
        node = DetailNode(name="group")
        node.add_error("first")
        node.add_error("second")
        node.add_message("one")
        node.add_message("two")

        assert node.errors == ["second", "first"]
        assert node.messages == ["two", "one"]


class TestNodeVariants:
    """Test Detail, Expect and Attribute specifics."""

    def test_kinds(self):
        """Each variant carries its own discriminator."""
        assert DetailNode().kind is NodeKind.DETAIL
        assert ExpectNode().kind is NodeKind.EXPECT
        assert AttributeNode().kind is NodeKind.ATTRIBUTE
        assert DetailNode().is_detail
        assert ExpectNode().is_expect

    def test_find_child_returns_first_match(self):
        """Child lookup matches Detail names exactly and returns the first match."""
        first = DetailNode(name="a")
        second = DetailNode(name="a")
        parent = DetailNode(name="root", children=[ExpectNode(), first, second])

        assert parent.find_child("a") is first
        assert parent.find_child("A") is None

    def test_expect_node_evaluates_its_check(self):
        """An Expect node applies its check to (expected, value)."""
        node = ExpectNode(value={"a": 1}, expected={"a": 1}, check=equal_check)
        assert node.is_complete
        assert node.evaluate() == (True, None)

    def test_expect_node_without_check_is_incomplete(self):
        """An Expect node without a check is incomplete."""
        assert not ExpectNode(value=1).is_complete

    def test_attribute_descriptions(self):
        """Attribute nodes describe themselves for debug messages."""
        assert AttributeNode(attribute=NodeAttribute.SKIP).describe() == "DebugSkip was used"
        assert AttributeNode(attribute=NodeAttribute.FOCUS).describe() == "DebugFocus was used"
        assert AttributeNode(attribute=NodeAttribute.TODO, name="later").describe() == "TODO: later"
