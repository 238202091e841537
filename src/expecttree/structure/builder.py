"""
Tree building for discovered test modules.

This module turns a flat list of `TestModuleInfo` descriptors into a
grouping tree keyed by path segments, then expands it in two phases:

1. Discovery pass: every root module body runs once. Top-level expects are
   registered immediately and top-level details are attached without being
   expanded, so the lifecycle callbacks of every module are known before
   any scope is entered.
2. Expansion pass: once every `on_start` callback succeeded, each root is
   re-entered and its details are expanded recursively between the root's
   scope callbacks. `on_end` callbacks always run afterwards.
"""

import logging
from collections.abc import Iterable

from expecttree.checks import DEFAULT_EPSILON
from expecttree.core.tree_node import DetailNode
from expecttree.core.types import TestContext
from expecttree.environment import TestEnvironment
from expecttree.models import TestModuleInfo
from expecttree.structure.expansion import expand_node, run_callback, run_scope_callbacks
from expecttree.structure.registry import CallbackRegistry, ScopeCallbacks, ScopeEvent
from expecttree.structure.stack import NodeStack

logger = logging.getLogger(__name__)


class TreeBuilder:
    """Builder coordinating the node stack, callback registry and environment.

    A builder is single use: create it, `add` every module, then `build`.
    The stack, registry and shared context are owned by the builder and are
    never shared between runs.
    """

    def __init__(self, epsilon: float = DEFAULT_EPSILON):
        self.tree = DetailNode()
        self.context: TestContext = {}
        self._stack = NodeStack()
        self._callbacks = CallbackRegistry()
        self._environment = TestEnvironment(self._stack, self._callbacks, epsilon)
        self._root_nodes: list[DetailNode] = []
        # ids of grouping and root module nodes created from module paths
        self._path_nodes: set[int] = set()
        self._built = False

    @property
    def environment(self) -> TestEnvironment:
        return self._environment

    @property
    def root_nodes(self) -> list[DetailNode]:
        return list(self._root_nodes)

    def add(self, module_info: TestModuleInfo) -> DetailNode | None:
        """
        Create or reuse the grouping nodes along a module's path.

        Path segments are matched by exact name against existing Detail
        children, first match wins. The module callback becomes the `expand`
        of the leaf node.

        Params:
            module_info: Descriptor of the module to add

        Returns:
            The leaf node for the module, or None if the module was rejected
        """
        if not module_info.path:
            self.tree.add_error(f"Test module {module_info.name} has an empty path")
            return None

        current = self.tree
        for segment in reversed(module_info.path):
            child = current.find_child(segment)
            if child is None:
                child = DetailNode(name=segment)
                current.children.append(child)
            current = child
            self._path_nodes.add(id(child))

        if current.expand is not None:
            current.add_error(f"Duplicate test module path: {module_info.display_path}")
            return None

        current.expand = module_info.callback
        self._root_nodes.append(current)
        return current

    def build(self) -> DetailNode:
        """Run both expansion phases and return the finished tree."""
        if self._built:
            raise RuntimeError("TreeBuilder.build() can only be called once")
        self._built = True

        stack = self._stack
        callbacks = self._callbacks
        stack.push(self.tree)

        logger.debug("Discovery pass over %d root module(s)", len(self._root_nodes))
        root_frames = [self._discover(root) for root in self._root_nodes]

        can_start = True
        for start_callback in callbacks.get_start_callbacks():
            error = run_callback(start_callback, prefix="on_start")
            if error is not None:
                stack.add_error(error)
                can_start = False

        if can_start:
            callbacks.set_ready()
            logger.debug("Expansion pass over %d root module(s)", len(self._root_nodes))
            for root, frame in zip(self._root_nodes, root_frames):
                self._expand_root(root, frame)
        else:
            logger.debug("Skipping expansion pass: an on_start callback failed")

        for end_callback in callbacks.get_end_callbacks():
            error = run_callback(end_callback, prefix="on_end")
            if error is not None:
                stack.add_error(error)

        stack.close_scope()
        stack.pop()
        return self.tree

    def _discover(self, root: DetailNode) -> ScopeCallbacks:
        """Run a root module body once, keeping its callback frame for later."""
        self._stack.push(root)
        self._callbacks.push()

        error = run_callback(root.expand, self._environment, self.context)
        if error is not None:
            self._stack.add_error(error)
        self._stack.close_scope()

        frame = self._callbacks.retain()
        self._stack.pop()
        return frame

    def _expand_root(self, root: DetailNode, frame: ScopeCallbacks) -> None:
        stack = self._stack
        callbacks = self._callbacks
        stack.push(root)
        callbacks.push(frame)

        if run_scope_callbacks(stack, callbacks, ScopeEvent.ENTER, label=root.name):
            for child in list(root.children):
                if isinstance(child, DetailNode) and id(child) not in self._path_nodes:
                    stack.push(child)
                    expand_node(stack, callbacks, child)
                    stack.pop()

        run_scope_callbacks(stack, callbacks, ScopeEvent.EXIT, label=root.name)
        stack.close_scope()

        callbacks.pop()
        stack.pop()


def create_node_tree(modules_info: Iterable[TestModuleInfo], epsilon: float = DEFAULT_EPSILON) -> DetailNode:
    """Build the complete test tree for a sequence of module descriptors."""
    builder = TreeBuilder(epsilon=epsilon)
    for module_info in modules_info:
        builder.add(module_info)
    return builder.build()
