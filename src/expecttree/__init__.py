"""
expecttree - A declarative unit-testing micro-framework

Test modules register nested `detail` groups and `expect` assertions on a
`TestEnvironment`; expecttree builds a tree from those registrations,
applies skip/focus/todo attributes, runs every check and aggregates the
outcome into `TestResults`.
"""

from importlib.metadata import version

from expecttree.config import TesterSettings
from expecttree.environment import TestEnvironment
from expecttree.models import TestModuleInfo
from expecttree.results import TestResults
from expecttree.structure.builder import TreeBuilder, create_node_tree
from expecttree.tester import Tester

__version__ = version("expecttree")

__all__ = [
    "__version__",
    "Tester",
    "TesterSettings",
    "TestEnvironment",
    "TestModuleInfo",
    "TestResults",
    "TreeBuilder",
    "create_node_tree",
]
