"""
Registry for lifecycle callbacks registered by test modules.

This module contains the scoped registry that stores `on_start`, `on_end`,
`on_scope_enter` and `on_scope_exit` callbacks. Every expandable scope
pushes its own frame so callbacks registered inside a scope only apply to
that scope and the scopes nested inside it.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum

from expecttree.core.types import Callback


class ScopeEvent(Enum):
    """Scope transitions that trigger scope callbacks."""

    ENTER = "on_scope_enter"
    EXIT = "on_scope_exit"


@dataclass
class ScopeCallbacks:
    """Callbacks registered while one scope was open."""

    start: list[Callback] = field(default_factory=list)
    end: list[Callback] = field(default_factory=list)
    scope_enter: list[Callback] = field(default_factory=list)
    scope_exit: list[Callback] = field(default_factory=list)

    def for_event(self, event: ScopeEvent) -> list[Callback]:
        return self.scope_enter if event is ScopeEvent.ENTER else self.scope_exit


def _flatten(lists: list[list[Callback]]) -> list[Callback]:
    """Outer-to-inner frame order, most recently registered first within a frame."""
    callbacks: list[Callback] = []
    for frame_callbacks in lists:
        callbacks.extend(reversed(frame_callbacks))
    return callbacks


class CallbackRegistry:
    """Stack of callback frames with flattened, priority-ordered retrieval.

    Responsibilities:
    - Isolate the registrations of each nesting level in its own frame
    - Retain root module frames between the discovery and expansion passes
    - Flag when scope callbacks are running so tree mutation can be refused
    """

    def __init__(self):
        self._frames: list[ScopeCallbacks] = []
        self._retained: list[ScopeCallbacks] = []
        self._ready = False
        self._in_scope_callback = False

    @property
    def ready(self) -> bool:
        """True once every start callback succeeded and scopes may expand."""
        return self._ready

    def set_ready(self) -> None:
        self._ready = True

    @property
    def in_scope_callback(self) -> bool:
        return self._in_scope_callback

    @property
    def depth(self) -> int:
        return len(self._frames)

    def push(self, frame: ScopeCallbacks | None = None) -> ScopeCallbacks:
        """Open a callback frame, or re-enter a retained one."""
        frame = frame if frame is not None else ScopeCallbacks()
        self._frames.append(frame)
        return frame

    def pop(self) -> ScopeCallbacks:
        return self._frames.pop()

    def retain(self) -> ScopeCallbacks:
        """Close the top frame but keep its start and end callbacks active."""
        frame = self._frames.pop()
        self._retained.append(frame)
        return frame

    def on_start(self, callback: Callback) -> None:
        self._frames[-1].start.append(callback)

    def on_end(self, callback: Callback) -> None:
        self._frames[-1].end.append(callback)

    def on_scope_enter(self, callback: Callback) -> None:
        self._frames[-1].scope_enter.append(callback)

    def on_scope_exit(self, callback: Callback) -> None:
        self._frames[-1].scope_exit.append(callback)

    def get_start_callbacks(self) -> list[Callback]:
        frames = self._retained + self._frames
        return _flatten([frame.start for frame in frames])

    def get_end_callbacks(self) -> list[Callback]:
        frames = self._retained + self._frames
        return _flatten([frame.end for frame in frames])

    @contextmanager
    def scope_callbacks(self, event: ScopeEvent) -> Iterator[list[Callback]]:
        """
        Yield the scope callbacks of every active frame for one scope transition.

        The list is computed on entry, since nested scopes register their own
        callbacks. While the block runs `in_scope_callback` is True.

        Params:
            event: Whether the scope is being entered or exited

        Yields:
            Callbacks to invoke, in priority order
        """
        self._in_scope_callback = True
        try:
            yield _flatten([frame.for_event(event) for frame in self._frames])
        finally:
            self._in_scope_callback = False
