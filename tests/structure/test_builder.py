"""
Tests for tree building.

This module tests the TreeBuilder:
- Grouping nodes created from module paths
- Rejection of empty and duplicate paths
- The two build phases and single-use builds
"""

import pytest

from expecttree import TestModuleInfo, TreeBuilder, create_node_tree
from expecttree.core import DetailNode, ExpectNode
from expecttree.structure.collectors import collect_build_messages
from expecttree.results import TestResults


def _noop(env, context):
    pass


class TestAdd:
    """Test module registration."""

    def test_creates_path_nodes_root_first(self):
        """Path segments become nested Detail nodes, root segment outermost."""
        builder = TreeBuilder()
        leaf = builder.add(TestModuleInfo(name="math.test", path=["math.test", "unit", "specs"], callback=_noop))

        specs = builder.tree.find_child("specs")
        unit = specs.find_child("unit")
        assert unit.find_child("math.test") is leaf
        assert leaf.expand is _noop
        assert builder.root_nodes == [leaf]

    def test_reuses_existing_grouping_nodes(self):
        """Modules under the same directories share grouping nodes."""
        builder = TreeBuilder()
        builder.add(TestModuleInfo(name="a.test", path=["a.test", "specs"], callback=_noop))
        builder.add(TestModuleInfo(name="b.test", path=["b.test", "specs"], callback=_noop))

        assert len(builder.tree.children) == 1
        assert [child.name for child in builder.tree.children[0].children] == ["a.test", "b.test"]

    def test_duplicate_path_is_rejected(self):
        """A second module with the same path is a build error on the leaf."""
        builder = TreeBuilder()
        first = builder.add(TestModuleInfo(name="a.test", path=["a.test", "specs"], callback=_noop))
        second = builder.add(TestModuleInfo(name="a.test", path=["a.test", "specs"], callback=lambda e, c: None))

        assert second is None
        assert first.expand is _noop
        assert first.errors == ["Duplicate test module path: specs/a.test"]
        assert builder.root_nodes == [first]

    def test_empty_path_is_rejected(self):
        """A module without path segments is a build error on the tree root."""
        builder = TreeBuilder()
        assert builder.add(TestModuleInfo(name="lost", path=[], callback=_noop)) is None
        assert builder.tree.errors == ["Test module lost has an empty path"]
        assert builder.tree.children == []

    def test_path_is_converted_to_tuple(self):
        """Module descriptors are immutable."""
        info = TestModuleInfo(name="a.test", path=["a.test", "specs"], callback=_noop)
        assert info.path == ("a.test", "specs")
        assert info.display_path == "specs/a.test"


class TestBuild:
    """Test the discovery and expansion phases."""

    def test_top_level_details_expanded_after_discovery(self):
        """Every module body runs before any detail is expanded."""
        log: list[str] = []

        def module_a(env, context):
            log.append("a body")
            env.detail("A", lambda: log.append("A"))

        def module_b(env, context):
            log.append("b body")
            env.detail("B", lambda: log.append("B"))

        create_node_tree(
            [
                TestModuleInfo(name="a.test", path=["a.test", "specs"], callback=module_a),
                TestModuleInfo(name="b.test", path=["b.test", "specs"], callback=module_b),
            ]
        )
        assert log == ["a body", "b body", "A", "B"]

    def test_tree_shape(self):
        """Details and expects become children in registration order."""

        def body(env, context):
            env.expect(1)
            env.to_equal(1)
            env.detail("group", lambda: (env.expect(2), env.to_equal(2)))

        tree = create_node_tree([TestModuleInfo(name="m", path=["m"], callback=body)])
        module = tree.find_child("m")

        assert isinstance(module.children[0], ExpectNode)
        group = module.children[1]
        assert isinstance(group, DetailNode)
        assert group.name == "group"
        assert isinstance(group.children[0], ExpectNode)
        assert group.children[0].value == 2

    def test_context_is_shared(self):
        """The builder passes its own context to every module body."""
        builder = TreeBuilder()
        builder.add(TestModuleInfo(name="m", path=["m"], callback=lambda env, context: context.update(seen=True)))
        builder.build()
        assert builder.context == {"seen": True}

    def test_build_only_once(self):
        """A builder cannot be reused."""
        builder = TreeBuilder()
        builder.build()
        with pytest.raises(RuntimeError):
            builder.build()

    def test_epsilon_reaches_environment(self):
        """Fuzzy checks use the builder's tolerance by default."""

        def body(env, context):
            env.expect(1.2)
            env.to_fuzzy_equal(1.0)

        tree = create_node_tree([TestModuleInfo(name="m", path=["m"], callback=body)], epsilon=0.5)
        expect_node = tree.find_child("m").children[0]
        assert expect_node.evaluate() == (True, None)

    def test_module_nested_under_another_module(self):
        """A module below another module's path is only expanded as its own root."""
        log: list[str] = []

        def outer(env, context):
            env.detail("outer detail", lambda: log.append("outer detail"))

        def inner(env, context):
            log.append("inner body")
            env.detail("inner detail", lambda: log.append("inner detail"))

        modules = [
            TestModuleInfo(name="outer", path=["outer", "specs"], callback=outer),
            TestModuleInfo(name="inner", path=["inner", "nested", "outer", "specs"], callback=inner),
        ]
        tree = create_node_tree(modules)
        results = TestResults()
        collect_build_messages(tree, results)

        assert results.build_error_count == 0
        assert log == ["inner body", "outer detail", "inner detail"]

    def test_registration_in_start_callback_is_checked(self):
        """An unfinished expect left by a start callback is a global build error."""
        builder = TreeBuilder()

        def body(env, context):
            env.on_start(lambda: env.expect(1))

        builder.add(TestModuleInfo(name="m", path=["m"], callback=body))
        builder.build()
        results = TestResults()
        collect_build_messages(builder.tree, results)

        assert results.build_error_paths == [[]]
        assert "without a validation check" in results.build_errors[0][0]

    def test_errors_collected_with_paths(self):
        """Build errors on nested nodes are reported under their path."""

        def body(env, context):
            env.detail("group", lambda: env.expect(1))

        tree = create_node_tree([TestModuleInfo(name="m", path=["m", "specs"], callback=body)])
        results = TestResults()
        collect_build_messages(tree, results)

        assert results.build_error_paths == [["specs", "m", "group"]]
        assert results.build_error_count == 1
