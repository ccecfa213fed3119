"""
System interaction: spawning the build tool and streaming its output.

- Environment merging and command formatting
- Cooperative cancellation tokens
- The asyncio-based process runner with ordered output events
"""

from .commands import check_executable_installed, format_command, merged_environment
from .cancellation import CancellationToken
from .process_runner import (
    ProcessEvent,
    ProcessExited,
    ProcessRunner,
    StderrChunk,
    StdoutLine,
)

__all__ = [
    "check_executable_installed",
    "format_command",
    "merged_environment",
    "CancellationToken",
    "ProcessEvent",
    "ProcessExited",
    "ProcessRunner",
    "StderrChunk",
    "StdoutLine",
]
