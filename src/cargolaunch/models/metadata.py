"""
Project metadata models.

Only the fields needed to synthesize launch configurations are read from the
`cargo metadata` document; everything else is ignored.
"""

from dataclasses import dataclass
from typing import Any, Mapping, Tuple


@dataclass(frozen=True)
class TargetMetadata:
    name: str
    kinds: Tuple[str, ...]


@dataclass(frozen=True)
class PackageMetadata:
    name: str
    targets: Tuple[TargetMetadata, ...]


@dataclass(frozen=True)
class ProjectMetadata:
    """Snapshot of `packages -> targets -> kind` from one metadata call."""

    packages: Tuple[PackageMetadata, ...]

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ProjectMetadata":
        """
        Build from a parsed metadata document.

        Raises:
            KeyError, TypeError: If a required field is missing or malformed
        """
        packages = []
        for pkg in data["packages"]:
            targets = tuple(
                TargetMetadata(name=target["name"], kinds=tuple(target["kind"]))
                for target in pkg["targets"]
            )
            packages.append(PackageMetadata(name=pkg["name"], targets=targets))
        return cls(packages=tuple(packages))
