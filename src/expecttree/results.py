"""
Results record produced by a test run.

Build errors, debug messages and run errors are stored as parallel arrays:
the list at index `i` of `build_errors` belongs to the path at index `i` of
`build_error_paths`, and likewise for the other two kinds.
"""

from typing import ClassVar

from pydantic import BaseModel, Field

from expecttree.core.types import MessageList, MessagePath


class TestResults(BaseModel):
    """Aggregate results of one build and run pass.

    Times are in milliseconds, truncated to three decimal places.
    """

    __test__: ClassVar[bool] = False

    build_time: float = 0.0
    run_time: float = 0.0

    build_error_count: int = 0
    build_error_paths: list[MessagePath] = Field(default_factory=list)
    build_errors: list[MessageList] = Field(default_factory=list)

    message_count: int = 0
    message_paths: list[MessagePath] = Field(default_factory=list)
    messages: list[MessageList] = Field(default_factory=list)

    passed_count: int = 0
    skipped_count: int = 0
    failed_count: int = 0
    run_error_paths: list[MessagePath] = Field(default_factory=list)
    run_errors: list[MessageList] = Field(default_factory=list)

    def record_build_errors(self, path: MessagePath, errors: MessageList) -> None:
        self.build_error_paths.append(list(path))
        self.build_errors.append(list(errors))
        self.build_error_count += len(errors)

    def record_messages(self, path: MessagePath, messages: MessageList) -> None:
        self.message_paths.append(list(path))
        self.messages.append(list(messages))
        self.message_count += len(messages)

    def record_run_errors(self, path: MessagePath, errors: MessageList) -> None:
        self.run_error_paths.append(list(path))
        self.run_errors.append(list(errors))

    @property
    def total_count(self) -> int:
        return self.passed_count + self.skipped_count + self.failed_count

    @property
    def has_failures(self) -> bool:
        """True if any build error was recorded or any check failed."""
        return self.build_error_count > 0 or self.failed_count > 0
