"""
Exception classes for expecttree.

This module defines the exception types raised while building test trees
and loading test modules, together with the call-site context attached to
build errors.
"""

import os
import sys
import traceback
from dataclasses import dataclass
from types import FrameType

_PACKAGE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))


@dataclass
class CallSite:
    """
    Location of a user call that produced a build error.

    Params:
        file: Python file containing the call
        line: Line number of the call
        function: Name of the function the call was made from
    """

    file: str
    line: int
    function: str

    def format_location(self) -> str:
        return f'  File "{self.file}", line {self.line}, in {self.function}'


def _is_internal(frame: FrameType) -> bool:
    return os.path.abspath(frame.f_code.co_filename).startswith(_PACKAGE_DIR + os.sep)


def capture_call_sites(limit: int = 3) -> list[CallSite]:
    """
    Capture the innermost user frames of the current call stack.

    Frames belonging to the expecttree package are skipped so the result
    points at the test code that misused the registration API.

    Params:
        limit: Maximum number of frames to capture

    Returns:
        Call sites ordered innermost first
    """
    sites: list[CallSite] = []
    frame = sys._getframe(1)
    while frame is not None and len(sites) < limit:
        if not _is_internal(frame):
            sites.append(
                CallSite(
                    file=frame.f_code.co_filename,
                    line=frame.f_lineno,
                    function=frame.f_code.co_name,
                )
            )
        frame = frame.f_back
    return sites


class ExpectTreeError(Exception):
    """Base exception for all expecttree errors."""

    pass


class BuildError(ExpectTreeError):
    """Raised for malformed registration usage or failing user callbacks.

    Build errors are never propagated past the invocation site: they are
    converted with `str()` and recorded on the currently open node.
    """

    def __init__(self, message: str, context: list[CallSite] | str | None = None):
        """
        Initialize the exception.

        Params:
            message: Description of the problem
            context: Call sites of the offending call, or a preformatted traceback
        """
        self.message = message
        self.context = context
        super().__init__(self._format())

    @classmethod
    def traced(cls, message: str) -> "BuildError":
        """Create a build error carrying the current user call sites."""
        return cls(message, capture_call_sites())

    @classmethod
    def from_exception(cls, exc: BaseException, prefix: str | None = None) -> "BuildError":
        """Create a build error from an exception raised by a user callback."""
        message = "".join(traceback.format_exception_only(type(exc), exc)).strip()
        if prefix:
            message = f"{prefix}: {message}"
        formatted = "".join(traceback.format_tb(exc.__traceback__)).rstrip()
        return cls(message, formatted)

    def _format(self) -> str:
        if not self.context:
            return self.message
        if isinstance(self.context, str):
            return f"{self.message}\n{self.context}"
        lines = [self.message]
        lines.extend(site.format_location() for site in self.context)
        return "\n".join(lines)


class DiscoveryError(ExpectTreeError):
    """Raised when a test module cannot be loaded."""

    def __init__(self, path: str, reason: str):
        """
        Initialize the exception.

        Params:
            path: Display path of the module, segments joined with '/'
            reason: Why the module was rejected
        """
        self.path = path
        self.reason = reason
        super().__init__(f"Skipped {path}: {reason}")
