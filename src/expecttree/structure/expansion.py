"""
Scope expansion for Detail nodes.

Expanding a scope brackets the Detail body between its scope-enter and
scope-exit callbacks, inside a fresh callback frame. Every user callback is
invoked through `run_callback`, so a raising body or hook becomes a build
error on the currently open node instead of aborting the build.
"""

import logging
from collections.abc import Callable
from typing import Any

from expecttree.core.tree_node import DetailNode
from expecttree.exceptions import BuildError
from expecttree.structure.registry import CallbackRegistry, ScopeEvent
from expecttree.structure.stack import NodeStack

logger = logging.getLogger(__name__)


def run_callback(callback: Callable[..., Any], *args: Any, prefix: str | None = None) -> str | None:
    """
    Invoke a user callback, containing any exception it raises.

    Params:
        callback: Test body or lifecycle hook
        *args: Arguments forwarded to the callback
        prefix: Label prepended to the error text (e.g. the hook name)

    Returns:
        None on success, otherwise the formatted error including its traceback
    """
    try:
        callback(*args)
    except Exception as e:
        logger.debug("Callback %r raised %s", callback, type(e).__name__)
        return str(BuildError.from_exception(e, prefix))
    return None


def run_scope_callbacks(
    stack: NodeStack, callbacks: CallbackRegistry, event: ScopeEvent, label: str | None = None
) -> bool:
    """
    Run the scope callbacks of every active frame for one transition.

    Params:
        stack: Node stack; failures are recorded on its current node
        callbacks: Registry holding the active frames
        event: Scope transition being processed
        label: Optional scope name prefixed to error messages

    Returns:
        True if every callback succeeded
    """
    prefix = f"{label} {event.value}" if label else event.value
    succeeded = True
    with callbacks.scope_callbacks(event) as scope_callbacks:
        for callback in scope_callbacks:
            error = run_callback(callback, prefix=prefix)
            if error is not None:
                stack.add_error(error)
                succeeded = False
    return succeeded


def expand_node(stack: NodeStack, callbacks: CallbackRegistry, node: DetailNode) -> None:
    """
    Expand a Detail node whose frame is already on top of the stack.

    A failing scope-enter callback prevents the body from running; the
    scope-exit callbacks and the end-of-scope validation still happen.
    """
    callbacks.push()

    if run_scope_callbacks(stack, callbacks, ScopeEvent.ENTER):
        error = run_callback(node.expand)
        if error is not None:
            stack.add_error(error)

    run_scope_callbacks(stack, callbacks, ScopeEvent.EXIT)
    stack.close_scope()

    callbacks.pop()
