"""
Configuration data models.

This module contains the configuration structures loaded from `config.toml`.
"""

from dataclasses import dataclass, field
from typing import List

DEFAULT_METADATA_ARGS = ["metadata", "--no-deps", "--format-version=1"]

# asyncio's default StreamReader limit (64 KiB) is too small for
# compiler-message lines carrying large rendered diagnostics.
DEFAULT_STREAM_LIMIT = 16 * 1024 * 1024


@dataclass
class CargoSettings:
    """
    How the build tool is invoked, loaded from the `[cargo]` table.
    """

    # Executable name or path, looked up on PATH when not absolute.
    executable: str = "cargo"
    # Value passed as --color=<mode> to build invocations.
    color: str = "always"
    # Arguments for the metadata invocation.
    metadata_args: List[str] = field(default_factory=lambda: list(DEFAULT_METADATA_ARGS))
    # Maximum length in bytes of a single stdout line.
    stream_limit: int = DEFAULT_STREAM_LIMIT


@dataclass
class LoggingSettings:
    """
    Logging behaviour, loaded from the `[logging]` table.
    """

    level: str = "INFO"


@dataclass
class AppConfig:
    """
    The root configuration object that aggregates all loaded settings.
    """

    cargo: CargoSettings = field(default_factory=CargoSettings)
    logging: LoggingSettings = field(default_factory=LoggingSettings)
