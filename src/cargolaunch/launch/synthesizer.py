"""
Launch configuration synthesis from cargo metadata.

Every package target becomes one or more "build, then debug" descriptors
according to its kinds:

- library kinds: one unit-test descriptor per target
- bin / example: debug the target, and debug its unit tests
- bench / test: debug the test-mode build
"""

import logging
from typing import List, Optional

from ..models.artifacts import ArtifactFilter
from ..models.launch import WORKSPACE_FOLDER, LaunchConfigDescriptor
from ..models.metadata import PackageMetadata, ProjectMetadata, TargetMetadata

logger = logging.getLogger(__name__)

LIBRARY_KINDS = frozenset(["lib", "rlib", "staticlib", "dylib", "cstaticlib"])
RUNNABLE_KINDS = frozenset(["bin", "example"])
TEST_KINDS = frozenset(["bench", "test"])

PRETTY_KIND_NAMES = {
    "bin": "executable",
    "bench": "benchmark",
    "test": "integration test",
}

DEFAULT_PROGRAM = f"{WORKSPACE_FOLDER}/<executable file>"


def pretty_kind(kind: str) -> str:
    return PRETTY_KIND_NAMES.get(kind, kind)


class LaunchConfigSynthesizer:
    """Builds launch descriptors from a project metadata snapshot."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or globals()["logger"]

    def default_configs(self) -> List[LaunchConfigDescriptor]:
        """The placeholder launch used when no cargo project is available."""
        return [LaunchConfigDescriptor(
            name="Debug",
            build_args=(),
            artifact_filter=None,
            working_directory=WORKSPACE_FOLDER,
            program=DEFAULT_PROGRAM,
        )]

    def synthesize(
        self,
        metadata: ProjectMetadata,
        directory: Optional[str] = None,
    ) -> List[LaunchConfigDescriptor]:
        """
        Produce descriptors for every qualifying target in ``metadata``.

        Args:
            metadata: Packages and targets reported by cargo
            directory: Working directory for the cargo build, used verbatim;
                defaults to the workspace folder placeholder

        Returns:
            Descriptors in package, target, kind order
        """
        working_directory = str(directory) if directory else WORKSPACE_FOLDER
        configs: List[LaunchConfigDescriptor] = []
        for package in metadata.packages:
            for target in package.targets:
                configs.extend(self._target_configs(package, target, working_directory))

        self.logger.info(f"Synthesized {len(configs)} launch configuration(s) "
                         f"from {len(metadata.packages)} package(s)")
        return configs

    def _target_configs(
        self,
        package: PackageMetadata,
        target: TargetMetadata,
        working_directory: str,
    ) -> List[LaunchConfigDescriptor]:
        configs: List[LaunchConfigDescriptor] = []

        def add(name: str, build_args: List[str], artifact_filter: ArtifactFilter) -> None:
            configs.append(LaunchConfigDescriptor(
                name=name,
                build_args=tuple(build_args + [f"--package={package.name}"]),
                artifact_filter=artifact_filter,
                working_directory=working_directory,
            ))

        lib_added = False
        for kind in target.kinds:
            if kind in LIBRARY_KINDS:
                # One test descriptor per library target; the first library kind wins.
                if not lib_added:
                    add(f"Debug unit tests in library '{target.name}'",
                        ["test", "--no-run", "--lib"],
                        ArtifactFilter(name=target.name, kind="lib"))
                    lib_added = True
            elif kind in RUNNABLE_KINDS:
                label = pretty_kind(kind)
                add(f"Debug {label} '{target.name}'",
                    ["build", f"--{kind}={target.name}"],
                    ArtifactFilter(name=target.name, kind=kind))
                add(f"Debug unit tests in {label} '{target.name}'",
                    ["test", "--no-run", f"--{kind}={target.name}"],
                    ArtifactFilter(name=target.name, kind=kind))
            elif kind in TEST_KINDS:
                add(f"Debug {pretty_kind(kind)} '{target.name}'",
                    ["test", "--no-run", f"--{kind}={target.name}"],
                    ArtifactFilter(name=target.name, kind=kind))
            else:
                self.logger.debug(f"Skipping target '{target.name}' kind '{kind}'")
        return configs
