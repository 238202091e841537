"""
Plain-text rendering of `TestResults`.

Each group of messages is printed under its path, one segment per line
with increasing indentation, followed by the messages indented one level
deeper than the last segment.
"""

from expecttree.core.types import MessageList, MessagePath
from expecttree.results import TestResults

BANNER = "=============== Test results ==============="
FOOTER = "============================================"
INDENT = "\t"


def format_message_groups(header: str, paths: list[MessagePath], groups: list[MessageList]) -> str:
    lines = [header]
    for path, messages in zip(paths, groups):
        for depth, key in enumerate(path):
            lines.append(f"{INDENT * depth}\\{key}")
        for message in messages:
            lines.append(f"{INDENT * len(path)}- {message}")
    return "\n".join(lines) + "\n"


def format_results(results: TestResults) -> str:
    """Render the default text report for a test run."""
    output = [
        "",
        BANNER,
        "",
        f"Build Time: {results.build_time}ms",
        f"Run Time: {results.run_time}ms",
        "",
        f"{results.passed_count} Passed Test(s)",
        f"{results.failed_count} Failed Test(s)",
        f"{results.skipped_count} Skipped Test(s)",
        "",
    ]

    if results.message_count > 0:
        output.append(
            format_message_groups(
                f"{results.message_count} Debug Message(s):",
                results.message_paths,
                results.messages,
            )
        )

    if results.build_error_count == 0:
        output.append("Successfully built tests")
    else:
        output.append(
            format_message_groups(
                f"{results.build_error_count} Build Error(s):",
                results.build_error_paths,
                results.build_errors,
            )
        )

    if results.failed_count == 0:
        output.append("Successfully ran tests")
    else:
        output.append(
            format_message_groups(
                f"{results.failed_count} Run Error(s):",
                results.run_error_paths,
                results.run_errors,
            )
        )

    output.append("")
    output.append(FOOTER)
    return "\n".join(output)
