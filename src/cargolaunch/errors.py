"""
Error taxonomy for cargo invocations and artifact resolution.

Spawn and process failures are wrapped with context and propagated to the
caller. Parse failures never leave the parser. Resolution errors carry the
full and filtered candidate lists so callers can explain why nothing (or too
much) matched.
"""

from enum import Enum
from typing import TYPE_CHECKING, Optional, Sequence

if TYPE_CHECKING:
    from .models.artifacts import ArtifactFilter, CompilationArtifact


class CargoLaunchError(Exception):
    """Base class for all errors raised by cargolaunch."""


class SpawnFailure(Enum):
    """Why the build tool could not be started."""
    NOT_FOUND = "not_found"
    OTHER = "other"


class SpawnError(CargoLaunchError):
    """
    The build tool executable could not be started.

    ``reason`` distinguishes a missing executable (callers may fall back)
    from every other spawn failure.
    """

    def __init__(self, executable: str, reason: SpawnFailure, detail: str = ""):
        if reason is SpawnFailure.NOT_FOUND:
            message = f"Executable '{executable}' was not found"
        else:
            message = f"Could not start '{executable}'"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
        self.executable = executable
        self.reason = reason

    @property
    def not_found(self) -> bool:
        return self.reason is SpawnFailure.NOT_FOUND


class ProcessError(CargoLaunchError):
    """
    The build tool terminated abnormally.

    ``exit_code`` is None when the failure happened while reading its output.
    """

    def __init__(self, executable: str, exit_code: Optional[int], detail: str = ""):
        if exit_code is None:
            message = f"Reading output of '{executable}' failed"
        elif exit_code < 0:
            message = f"'{executable}' was terminated by signal {-exit_code}"
        else:
            message = f"'{executable}' exited with code {exit_code}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
        self.executable = executable
        self.exit_code = exit_code


class BuildInvocationError(CargoLaunchError):
    """Running the build failed; the underlying error is ``__cause__``."""


class ParseError(CargoLaunchError):
    """A brace-prefixed stdout line was not a valid JSON object."""

    def __init__(self, line: str, detail: str):
        super().__init__(f"Could not parse JSON: {detail} in \"{line}\"")
        self.line = line
        self.detail = detail


class ArtifactResolutionError(CargoLaunchError):
    """Base for failures to pick exactly one artifact."""

    def __init__(
        self,
        message: str,
        artifacts: Sequence["CompilationArtifact"],
        matches: Sequence["CompilationArtifact"],
        artifact_filter: Optional["ArtifactFilter"] = None,
    ):
        super().__init__(message)
        self.artifacts = list(artifacts)
        self.matches = list(matches)
        self.artifact_filter = artifact_filter


class NoMatchError(ArtifactResolutionError):
    """The filter left no artifacts."""


class AmbiguousMatchError(ArtifactResolutionError):
    """The filter left more than one artifact."""


class MetadataError(CargoLaunchError):
    """Cargo exited successfully but produced no metadata document."""


class PlaceholderError(CargoLaunchError):
    """A ${cargo:...} placeholder referenced an undefined key."""
