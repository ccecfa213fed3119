"""
Expansion of ``${cargo:<key>}`` placeholders in launch configurations.

Typically used to substitute the resolved program path into a launch
configuration (``"program": "${cargo:program}"``). Placeholders of any other
type are left as-is for the host to expand.
"""

import re
from typing import Any, Mapping

from ..errors import PlaceholderError

PLACEHOLDER_PATTERN = re.compile(r"\$\{(\w+):([^}]+)\}")


def expand_cargo(config: Any, values: Mapping[str, Any]) -> Any:
    """
    Return a copy of ``config`` with cargo placeholders replaced.

    Dicts, lists and tuples are walked recursively; dict keys are not expanded.

    Raises:
        PlaceholderError: If a placeholder names a key missing from ``values``
    """
    def replace(match: re.Match) -> str:
        kind, key = match.group(1), match.group(2)
        if kind != "cargo":
            return match.group(0)
        if key not in values or values[key] is None:
            raise PlaceholderError(f"cargo:{key} is not defined")
        return str(values[key])

    if isinstance(config, str):
        return PLACEHOLDER_PATTERN.sub(replace, config)
    if isinstance(config, Mapping):
        return {key: expand_cargo(value, values) for key, value in config.items()}
    if isinstance(config, (list, tuple)):
        return type(config)(expand_cargo(item, values) for item in config)
    return config
