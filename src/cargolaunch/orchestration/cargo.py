"""
Top-level cargo operations.

This module contains the Cargo class, which coordinates the process runner,
message parser, artifact collector, resolver and launch configuration
synthesizer to answer the two questions a debugger front end asks:

- which program should be debugged for this cargo launch block?
- which launch configurations does this project offer?
"""

import asyncio
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from ..artifacts import ArtifactCollector, ArtifactResolver, DiagnosticSink
from ..config import get_config
from ..errors import BuildInvocationError, MetadataError, ProcessError, SpawnError
from ..launch import LaunchConfigSynthesizer
from ..models.artifacts import ArtifactFilter, BuildInvocation, CargoLaunchRequest, CompilationArtifact
from ..models.config import AppConfig
from ..models.launch import LaunchConfigDescriptor
from ..models.messages import StructuredLine
from ..models.metadata import ProjectMetadata
from ..parsing import MessageParser
from ..system import CancellationToken, ProcessRunner

logger = logging.getLogger(__name__)


class Cargo:
    """
    Cargo operations for one project root.

    Each operation spawns exactly one cargo process and owns its own
    accumulated state, so concurrent calls on the same instance do not
    interfere.
    """

    def __init__(
        self,
        project_root: Path,
        config: Optional[AppConfig] = None,
        cancellation: Optional[CancellationToken] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Args:
            project_root: Default working directory for cargo
            config: Application configuration; the global one when omitted
            cancellation: Token that interrupts any running cargo process
            logger: Logger injected into every component
        """
        self.project_root = Path(project_root)
        self.config = config or get_config()
        self.cancellation = cancellation
        self.logger = logger or globals()["logger"]

        settings = self.config.cargo
        self.runner = ProcessRunner(
            executable=settings.executable,
            default_cwd=self.project_root,
            stream_limit=settings.stream_limit,
            logger=self.logger,
        )
        self.parser = MessageParser(self.logger)
        self.collector = ArtifactCollector(self.runner, self.parser, settings.color, self.logger)
        self.resolver = ArtifactResolver(self.logger)
        self.synthesizer = LaunchConfigSynthesizer(self.logger)

    async def resolve_program(
        self,
        request: CargoLaunchRequest,
        on_diagnostic: Optional[DiagnosticSink] = None,
    ) -> str:
        """
        Build with cargo and return the path of the single matching artifact.

        Args:
            request: Cargo arguments, environment, working directory and filter
            on_diagnostic: Receives compiler output as it is produced; logged
                when omitted

        Raises:
            BuildInvocationError: If cargo could not be run or failed
            NoMatchError: If no artifact matches the filter
            AmbiguousMatchError: If several artifacts match the filter
        """
        sink = on_diagnostic or self._log_diagnostic
        artifacts = await self.collect_artifacts(request.to_invocation(), sink)
        return self.program_from_artifacts(artifacts, request.artifact_filter)

    async def collect_artifacts(
        self,
        invocation: BuildInvocation,
        on_diagnostic: DiagnosticSink,
    ) -> List[CompilationArtifact]:
        """Run cargo and return the debuggable artifacts it produced."""
        return await self.collector.collect(invocation, on_diagnostic, self.cancellation)

    def program_from_artifacts(
        self,
        artifacts: Sequence[CompilationArtifact],
        artifact_filter: Optional[ArtifactFilter] = None,
    ) -> str:
        return self.resolver.resolve(artifacts, artifact_filter)

    async def get_launch_configs(self, directory: Optional[str] = None) -> List[LaunchConfigDescriptor]:
        """
        Offer launch configurations for the targets of the cargo project.

        Falls back to the built-in default when cargo is not installed or the
        directory holds no cargo project.

        Args:
            directory: Project directory overriding the project root; also
                recorded verbatim as the descriptors' working directory

        Raises:
            MetadataError: If cargo succeeded without printing metadata
            BuildInvocationError: If cargo could not be run for another reason
        """
        payload: Optional[Dict[str, Any]] = None

        def on_stdout_line(line: str) -> None:
            nonlocal payload
            parsed = self.parser.parse_line(line)
            if isinstance(parsed, StructuredLine):
                payload = parsed.payload

        def on_stderr_chunk(chunk: str) -> None:
            text = chunk.rstrip()
            if text:
                self.logger.info(text)

        invocation = BuildInvocation(
            args=tuple(self.config.cargo.metadata_args),
            cwd=Path(directory) if directory else None,
        )
        try:
            exit_code = await self.runner.run(
                invocation, on_stdout_line, on_stderr_chunk, self.cancellation, check=False
            )
        except SpawnError as e:
            if e.not_found:
                self.logger.warning(f"{e}; using default launch configurations")
                return self.synthesizer.default_configs()
            raise BuildInvocationError("Cargo metadata invocation failed.") from e
        except ProcessError as e:
            raise BuildInvocationError("Cargo metadata invocation failed.") from e

        if exit_code != 0:
            # Most likely there is no Cargo.toml here.
            self.logger.info(f"cargo metadata exited with code {exit_code}; using default launch configurations")
            return self.synthesizer.default_configs()

        if payload is None:
            raise MetadataError("Cargo has produced no metadata")

        try:
            metadata = ProjectMetadata.from_dict(payload)
        except (KeyError, TypeError) as e:
            raise MetadataError(f"Cargo metadata is malformed: {type(e).__name__}: {e}") from e

        return self.synthesizer.synthesize(metadata, directory)

    def resolve_program_sync(
        self,
        request: CargoLaunchRequest,
        on_diagnostic: Optional[DiagnosticSink] = None,
    ) -> str:
        """Blocking variant of resolve_program() for callers without an event loop."""
        return asyncio.run(self.resolve_program(request, on_diagnostic))

    def get_launch_configs_sync(self, directory: Optional[str] = None) -> List[LaunchConfigDescriptor]:
        """Blocking variant of get_launch_configs()."""
        return asyncio.run(self.get_launch_configs(directory))

    def _log_diagnostic(self, text: str) -> None:
        text = text.rstrip()
        if text:
            self.logger.info(text)
