"""
Structured cargo messages.

Each JSON line cargo prints is keyed by a ``reason`` field. The variants below
cover the reasons the engine acts on; everything else becomes OtherMessage.
Old and new artifact schemas are already reconciled into ``outputs``.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple, Union

from .artifacts import CompilationArtifact

REASON_COMPILER_ARTIFACT = "compiler-artifact"
REASON_COMPILER_MESSAGE = "compiler-message"


@dataclass(frozen=True)
class CompilerArtifactMessage:
    target_name: str
    target_kinds: Tuple[str, ...]
    profile_test: bool
    outputs: Tuple[CompilationArtifact, ...]

    @property
    def is_executable(self) -> bool:
        """True for binaries other than build scripts, and for any test build."""
        is_binary = "bin" in self.target_kinds
        is_build_script = "custom-build" in self.target_kinds
        return (is_binary and not is_build_script) or self.profile_test


@dataclass(frozen=True)
class CompilerDiagnosticMessage:
    rendered: str


@dataclass(frozen=True)
class OtherMessage:
    reason: Optional[str]
    payload: Dict[str, Any] = field(default_factory=dict, compare=False)


CargoMessage = Union[CompilerArtifactMessage, CompilerDiagnosticMessage, OtherMessage]


@dataclass(frozen=True)
class StructuredLine:
    """A stdout line that parsed as a JSON object."""
    payload: Dict[str, Any]


@dataclass(frozen=True)
class PlainLine:
    """A stdout line that does not look like JSON."""
    text: str


ParsedLine = Union[StructuredLine, PlainLine]
