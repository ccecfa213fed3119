"""
Data models used throughout cargolaunch.

Configuration Models:
- Application configuration loaded from TOML

Build Models:
- Build invocations, compilation artifacts and artifact filters
- Structured cargo messages (tagged by ``reason``)

Launch Models:
- Project metadata snapshots
- Launch configuration descriptors
"""

from .config import AppConfig, CargoSettings, LoggingSettings
from .artifacts import ArtifactFilter, BuildInvocation, CargoLaunchRequest, CompilationArtifact
from .messages import (
    CargoMessage,
    CompilerArtifactMessage,
    CompilerDiagnosticMessage,
    OtherMessage,
    ParsedLine,
    PlainLine,
    StructuredLine,
)
from .metadata import PackageMetadata, ProjectMetadata, TargetMetadata
from .launch import LaunchConfigDescriptor, WORKSPACE_FOLDER

__all__ = [
    # Configuration
    "AppConfig",
    "CargoSettings",
    "LoggingSettings",
    # Build
    "ArtifactFilter",
    "BuildInvocation",
    "CargoLaunchRequest",
    "CompilationArtifact",
    "CargoMessage",
    "CompilerArtifactMessage",
    "CompilerDiagnosticMessage",
    "OtherMessage",
    "ParsedLine",
    "PlainLine",
    "StructuredLine",
    # Launch
    "PackageMetadata",
    "ProjectMetadata",
    "TargetMetadata",
    "LaunchConfigDescriptor",
    "WORKSPACE_FOLDER",
]
