"""
cargolaunch: cargo build orchestration for debugger front ends.

This package runs cargo, interprets its JSON message stream, determines the
artifact to debug and synthesizes launch configurations from project
metadata.

The package is organized into specialized modules:
- config: Configuration management and validation
- models: Data structures and type definitions
- validation: Input validation and error handling helpers
- system: Process spawning, output streaming and cancellation
- parsing: Cargo message parsing
- artifacts: Artifact collection and resolution
- launch: Launch configuration synthesis and placeholder expansion
- orchestration: The top-level Cargo operations
- cli: Command-line interface

Usage:
    From command line:
        cargolaunch program -- build --bin demo
        cargolaunch configs

    Programmatically:
        from cargolaunch import Cargo, CargoLaunchRequest
        cargo = Cargo(project_root)
        program = cargo.resolve_program_sync(CargoLaunchRequest(args=("build",)))
"""

from .config import get_config, clear_config_cache, set_config_path
from .orchestration import Cargo
from .cli import main_cli

from .models import (
    AppConfig,
    ArtifactFilter,
    BuildInvocation,
    CargoLaunchRequest,
    CompilationArtifact,
    LaunchConfigDescriptor,
    ProjectMetadata,
)

from .errors import (
    AmbiguousMatchError,
    ArtifactResolutionError,
    BuildInvocationError,
    CargoLaunchError,
    MetadataError,
    NoMatchError,
    ParseError,
    PlaceholderError,
    ProcessError,
    SpawnError,
    SpawnFailure,
)

from .launch import expand_cargo
from .system import CancellationToken

__version__ = "1.0.0"

__all__ = [
    # Main interfaces
    "get_config",
    "clear_config_cache",
    "set_config_path",
    "Cargo",
    "CancellationToken",
    "expand_cargo",
    "main_cli",
    # Models
    "AppConfig",
    "ArtifactFilter",
    "BuildInvocation",
    "CargoLaunchRequest",
    "CompilationArtifact",
    "LaunchConfigDescriptor",
    "ProjectMetadata",
    # Errors
    "AmbiguousMatchError",
    "ArtifactResolutionError",
    "BuildInvocationError",
    "CargoLaunchError",
    "MetadataError",
    "NoMatchError",
    "ParseError",
    "PlaceholderError",
    "ProcessError",
    "SpawnError",
    "SpawnFailure",
]
