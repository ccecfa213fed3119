"""
Command-line and environment helpers for spawning the build tool.
"""

import logging
import os
import shlex
import shutil
from typing import Dict, Mapping, Optional, Sequence

logger = logging.getLogger(__name__)


def merged_environment(overrides: Optional[Mapping[str, Optional[str]]] = None) -> Dict[str, str]:
    """Overlay ``overrides`` onto the current process environment.

    A value of None removes the variable.

    Args:
        overrides: Extra environment variables supplied by the caller.

    Returns:
        A new environment dictionary suitable for subprocess spawning.
    """
    env = dict(os.environ)
    for key, value in (overrides or {}).items():
        if value is None:
            env.pop(key, None)
        else:
            env[key] = str(value)
    return env


def format_command(executable: str, args: Sequence[str]) -> str:
    """Render a command line for logging, quoting where needed."""
    return shlex.join([executable, *args])


def check_executable_installed(executable: str) -> bool:
    """Check if ``executable`` can be found on PATH (or exists, if a path).

    Returns:
        True if the executable resolves, False otherwise.
    """
    found = shutil.which(executable)
    logger.debug(f"Lookup for '{executable}': {found}")
    return found is not None
