"""
Core type definitions for the expecttree framework.

This module contains the type aliases shared between the node model, the
check library and the registration environment.
"""

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from expecttree.environment import TestEnvironment

CheckResult = tuple[bool, str | None]

Check = Callable[[Any, Any], CheckResult]

Callback = Callable[[], None]

MessagePath = list[str]

MessageList = list[str]

TestContext = dict[Any, Any]

TestBuilder = Callable[["TestEnvironment", TestContext], None]
