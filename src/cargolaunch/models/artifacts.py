"""
Build invocation and compilation artifact models.
"""

from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

MESSAGE_FORMAT_ARG = "--message-format=json"
ARGS_SEPARATOR = "--"


@dataclass(frozen=True)
class BuildInvocation:
    """
    One run of the build tool: arguments, extra environment and working directory.

    ``cwd`` of None means the project root.
    """

    args: Tuple[str, ...]
    env: Mapping[str, str] = field(default_factory=dict)
    cwd: Optional[Path] = None

    def __post_init__(self):
        object.__setattr__(self, "args", tuple(self.args))
        object.__setattr__(self, "env", MappingProxyType(dict(self.env)))
        if self.cwd is not None:
            object.__setattr__(self, "cwd", Path(self.cwd))

    def with_message_format(self, color: str = "always") -> "BuildInvocation":
        """
        Return a copy that asks cargo for JSON messages.

        The flags go immediately before the first ``--`` so they are not
        passed through to the program being run, or at the end otherwise.
        """
        args = list(self.args)
        pos = args.index(ARGS_SEPARATOR) if ARGS_SEPARATOR in args else len(args)
        args[pos:pos] = [MESSAGE_FORMAT_ARG, f"--color={color}"]
        return BuildInvocation(args=tuple(args), env=dict(self.env), cwd=self.cwd)

    def command_line(self, executable: str) -> str:
        return " ".join([executable, *self.args])


@dataclass(frozen=True)
class CompilationArtifact:
    """A binary produced by a single build step."""

    file_path: str
    target_name: str
    target_kind: str


@dataclass(frozen=True)
class ArtifactFilter:
    """
    Optional name/kind constraint applied to compilation artifacts.

    Unset fields match anything; set fields must match exactly.
    """

    name: Optional[str] = None
    kind: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> Optional["ArtifactFilter"]:
        if data is None:
            return None
        return cls(name=data.get("name"), kind=data.get("kind"))

    def matches(self, artifact: CompilationArtifact) -> bool:
        if self.name is not None and artifact.target_name != self.name:
            return False
        if self.kind is not None and artifact.target_kind != self.kind:
            return False
        return True

    def to_dict(self) -> Dict[str, str]:
        result = {}
        if self.name is not None:
            result["name"] = self.name
        if self.kind is not None:
            result["kind"] = self.kind
        return result


@dataclass(frozen=True)
class CargoLaunchRequest:
    """
    The `cargo` block of a launch configuration.

    Mirrors what the host passes in: cargo arguments, extra environment,
    an optional working directory and an optional artifact filter.
    """

    args: Tuple[str, ...]
    env: Mapping[str, str] = field(default_factory=dict)
    cwd: Optional[Path] = None
    artifact_filter: Optional[ArtifactFilter] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CargoLaunchRequest":
        args: Sequence[str] = data.get("args") or []
        cwd = data.get("cwd")
        return cls(
            args=tuple(args),
            env=dict(data.get("env") or {}),
            cwd=Path(cwd) if cwd else None,
            artifact_filter=ArtifactFilter.from_dict(data.get("filter")),
        )

    def to_invocation(self) -> BuildInvocation:
        return BuildInvocation(args=self.args, env=self.env, cwd=self.cwd)
