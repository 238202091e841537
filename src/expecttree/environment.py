"""
Registration environment handed to test modules.

Test bodies describe their tests by calling the methods of a
`TestEnvironment`. Each call mutates the node stack or the callback
registry as a side effect, so nested `detail` callbacks that look like
sequential code end up building a tree.

Registration grammar per scope:

    ( attribute* ( detail | expect check | fail ) )*

Misuse of the grammar never raises. It is recorded as a build error on the
open scope, with the call site of the offending call.
"""

from collections.abc import Callable
from typing import Any

from expecttree.checks import (
    DEFAULT_EPSILON,
    VALUE_KIND_NAMES,
    always_fail_check,
    equal_check,
    greater_check,
    greater_or_equal_check,
    is_number,
    kind_of,
    less_check,
    less_or_equal_check,
    make_fuzzy_check,
    make_not_fuzzy_check,
    not_equal_check,
    not_throw_check,
    not_type_check,
    not_typeof_check,
    throw_check,
    type_check,
    typeof_check,
)
from expecttree.core.tree_node import AttributeNode, DetailNode, ExpectNode, NodeAttribute
from expecttree.core.types import Callback, Check
from expecttree.structure.expansion import expand_node
from expecttree.structure.registry import CallbackRegistry
from expecttree.structure.stack import NodeStack

_KIND_NAMES_TEXT = ", ".join(sorted(VALUE_KIND_NAMES))


def _kind_name(value: Any) -> str:
    return kind_of(value).value


class TestEnvironment:
    """Facade exposing the registration API to test modules.

    One environment is created per test run. It owns no state itself; it
    operates on the node stack and callback registry it was created with.
    """

    __test__ = False

    def __init__(self, stack: NodeStack, callbacks: CallbackRegistry, epsilon: float = DEFAULT_EPSILON):
        self._stack = stack
        self._callbacks = callbacks
        self._epsilon = epsilon

    # Lifecycle

    def _register_lifecycle(self, name: str, callback: Callback, register: Callable[[Callback], None]) -> None:
        if not callable(callback):
            self._stack.add_traced_error(f"{name} argument: function expected, got {_kind_name(callback)}")
            return
        register(callback)

    def on_start(self, callback: Callback) -> None:
        """Run the callback before building any of the tests."""
        if self._callbacks.ready:
            self._stack.add_traced_error("on_start can only be used in the body of a test module")
            return
        self._register_lifecycle("on_start", callback, self._callbacks.on_start)

    def on_end(self, callback: Callback) -> None:
        """Run the callback after building all of the tests."""
        if self._callbacks.ready:
            self._stack.add_traced_error("on_end can only be used in the body of a test module")
            return
        self._register_lifecycle("on_end", callback, self._callbacks.on_end)

    def on_scope_enter(self, callback: Callback) -> None:
        """Run the callback each time a nested scope is entered."""
        self._register_lifecycle("on_scope_enter", callback, self._callbacks.on_scope_enter)

    def on_scope_exit(self, callback: Callback) -> None:
        """Run the callback each time a nested scope is exited."""
        self._register_lifecycle("on_scope_exit", callback, self._callbacks.on_scope_exit)

    # Structure

    def detail(self, name: str, callback: Callback) -> None:
        """Create a new scope with the given description."""
        stack = self._stack
        if not isinstance(name, str):
            stack.add_traced_error(f"detail argument #1: string expected, got {_kind_name(name)}")
            return
        if not callable(callback):
            stack.add_traced_error(f"detail argument #2: function expected, got {_kind_name(callback)}")
            return
        if self._callbacks.in_scope_callback:
            stack.add_traced_error("Cannot call detail in on_scope_enter or on_scope_exit")
            return
        stack.close_incomplete_expect()

        attributes = stack.take_attributes()
        node = DetailNode(name=name, expand=callback)
        stack.current.children.append(node)
        stack.apply_attributes(node, attributes)

        if self._callbacks.ready:
            stack.push(node)
            try:
                expand_node(stack, self._callbacks, node)
            finally:
                stack.pop()

    def expect(self, value: Any) -> None:
        """Create a new test for the value. A check call is expected next."""
        stack = self._stack
        stack.close_incomplete_expect()

        attributes = stack.take_attributes()
        pending = stack.begin_assertion(value)
        stack.apply_attributes(pending.node, attributes)

    def fail(self, message: str | None = None) -> None:
        """Create a new test which immediately fails."""
        stack = self._stack
        if message is not None and not isinstance(message, str):
            stack.add_traced_error(f"fail argument: string expected, got {_kind_name(message)}")
            return
        stack.close_incomplete_expect()

        attributes = stack.take_attributes()
        node = ExpectNode(expected=message, check=always_fail_check)
        stack.apply_attributes(node, attributes)
        stack.current.children.append(node)

    # Checks

    def _validate_argument(self, valid: bool, message: str) -> bool:
        """Report an invalid check argument and discard the pending assertion."""
        if valid:
            return True
        pending = self._stack.pending
        if pending is not None:
            pending.discard()
        self._stack.add_traced_error(message)
        return False

    def _install(self, name: str, expected: Any, check: Check) -> None:
        stack = self._stack
        if stack.drop_attributes():
            stack.add_traced_error(f"Encountered an Attribute node before {name}")

        pending = stack.pending
        if pending is None:
            stack.add_traced_error(f"No Expect node to check against with {name}")
            return
        pending.finish(expected, check)

    def to_equal(self, expected: Any) -> None:
        """Fail if the tested value is not structurally equal to `expected`."""
        self._install("to_equal", expected, equal_check)

    def to_not_equal(self, expected: Any) -> None:
        """Fail if the tested value is structurally equal to `expected`."""
        self._install("to_not_equal", expected, not_equal_check)

    def _validate_kind_name(self, name: str, expected: Any) -> bool:
        return self._validate_argument(
            isinstance(expected, str) and expected in VALUE_KIND_NAMES,
            f"{name} argument: one of {_KIND_NAMES_TEXT} expected, got {expected!r}",
        )

    def to_be_type(self, expected: str) -> None:
        """Fail if the tested value's kind is not `expected`."""
        if self._validate_kind_name("to_be_type", expected):
            self._install("to_be_type", expected, type_check)

    def to_not_be_type(self, expected: str) -> None:
        """Fail if the tested value's kind is `expected`."""
        if self._validate_kind_name("to_not_be_type", expected):
            self._install("to_not_be_type", expected, not_type_check)

    def to_be_typeof(self, expected: str) -> None:
        """Fail if the tested value's class name is not `expected`."""
        if self._validate_argument(
            isinstance(expected, str),
            f"to_be_typeof argument: string expected, got {_kind_name(expected)}",
        ):
            self._install("to_be_typeof", expected, typeof_check)

    def to_not_be_typeof(self, expected: str) -> None:
        """Fail if the tested value's class name is `expected`."""
        if self._validate_argument(
            isinstance(expected, str),
            f"to_not_be_typeof argument: string expected, got {_kind_name(expected)}",
        ):
            self._install("to_not_be_typeof", expected, not_typeof_check)

    def to_throw(self, expected: str | None = None) -> None:
        """Fail if the tested function does not raise, or raises without `expected` in its message."""
        if self._validate_argument(
            expected is None or isinstance(expected, str),
            f"to_throw argument: string or None expected, got {_kind_name(expected)}",
        ):
            self._install("to_throw", expected, throw_check)

    def to_not_throw(self, expected: str | None = None) -> None:
        """Fail if the tested function raises, or raises with `expected` in its message."""
        if self._validate_argument(
            expected is None or isinstance(expected, str),
            f"to_not_throw argument: string or None expected, got {_kind_name(expected)}",
        ):
            self._install("to_not_throw", expected, not_throw_check)

    def _validate_fuzzy(self, name: str, expected: Any, epsilon: Any) -> bool:
        return self._validate_argument(
            is_number(expected), f"{name} argument #1: number expected, got {_kind_name(expected)}"
        ) and self._validate_argument(
            epsilon is None or is_number(epsilon),
            f"{name} argument #2: number expected, got {_kind_name(epsilon)}",
        )

    def to_fuzzy_equal(self, expected: float, epsilon: float | None = None) -> None:
        """Fail if the tested value is farther than `epsilon` from `expected`."""
        if self._validate_fuzzy("to_fuzzy_equal", expected, epsilon):
            check = make_fuzzy_check(self._epsilon if epsilon is None else epsilon)
            self._install("to_fuzzy_equal", expected, check)

    def to_not_fuzzy_equal(self, expected: float, epsilon: float | None = None) -> None:
        """Fail if the tested value is within `epsilon` of `expected`."""
        if self._validate_fuzzy("to_not_fuzzy_equal", expected, epsilon):
            check = make_not_fuzzy_check(self._epsilon if epsilon is None else epsilon)
            self._install("to_not_fuzzy_equal", expected, check)

    def _install_ordering(self, name: str, expected: Any, check: Check) -> None:
        if self._validate_argument(
            is_number(expected), f"{name} argument: number expected, got {_kind_name(expected)}"
        ):
            self._install(name, expected, check)

    def to_be_greater(self, expected: float) -> None:
        """Fail if the tested value is not strictly greater than `expected`."""
        self._install_ordering("to_be_greater", expected, greater_check)

    def to_be_greater_or_equal(self, expected: float) -> None:
        """Fail if the tested value is not greater than or equal to `expected`."""
        self._install_ordering("to_be_greater_or_equal", expected, greater_or_equal_check)

    def to_be_less(self, expected: float) -> None:
        """Fail if the tested value is not strictly less than `expected`."""
        self._install_ordering("to_be_less", expected, less_check)

    def to_be_less_or_equal(self, expected: float) -> None:
        """Fail if the tested value is not less than or equal to `expected`."""
        self._install_ordering("to_be_less_or_equal", expected, less_or_equal_check)

    # Debug attributes

    def _push_attribute(self, attribute: NodeAttribute, name: str | None = None) -> None:
        self._stack.close_incomplete_expect()
        self._stack.push_attribute(AttributeNode(attribute=attribute, name=name))

    def debug_skip(self) -> None:
        """Skip the next node and all of its children. Takes priority over focus."""
        self._push_attribute(NodeAttribute.SKIP)

    def debug_focus(self) -> None:
        """Only run the next node's tests (and those of other focused nodes)."""
        self._push_attribute(NodeAttribute.FOCUS)

    def debug_todo(self, message: str) -> None:
        """Attach a TODO message to the next node."""
        if not isinstance(message, str):
            self._stack.add_traced_error(f"debug_todo argument: string expected, got {_kind_name(message)}")
            return
        self._push_attribute(NodeAttribute.TODO, message)
