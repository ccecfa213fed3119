"""
Compilation artifact collection.

Runs a cargo build with JSON messages enabled and accumulates the artifacts
that can be debugged: executables (but not build scripts) and anything built
with the test profile. Compiler diagnostics, plain stdout text and stderr are
forwarded to the caller as they arrive so a failing build is never silent.
"""

import logging
from typing import Callable, List, Optional

from ..errors import BuildInvocationError, ProcessError, SpawnError
from ..models.artifacts import BuildInvocation, CompilationArtifact
from ..models.messages import CompilerArtifactMessage, CompilerDiagnosticMessage, StructuredLine
from ..parsing import MessageParser
from ..system import CancellationToken, ProcessRunner

logger = logging.getLogger(__name__)

DiagnosticSink = Callable[[str], None]


class ArtifactCollector:
    """
    Collects debuggable artifacts from one cargo invocation.

    The collector keeps no state between calls; every collect() builds its
    own artifact list.
    """

    def __init__(
        self,
        runner: ProcessRunner,
        parser: Optional[MessageParser] = None,
        color: str = "always",
        logger: Optional[logging.Logger] = None,
    ):
        self.runner = runner
        self.logger = logger or globals()["logger"]
        self.parser = parser or MessageParser(self.logger)
        self.color = color

    async def collect(
        self,
        invocation: BuildInvocation,
        on_diagnostic: DiagnosticSink,
        cancellation: Optional[CancellationToken] = None,
    ) -> List[CompilationArtifact]:
        """
        Run cargo and return the debuggable artifacts in emission order.

        An empty result is not an error here.

        Raises:
            BuildInvocationError: If cargo could not be started or failed
        """
        artifacts: List[CompilationArtifact] = []

        def on_stdout_line(line: str) -> None:
            parsed = self.parser.parse_line(line)
            if parsed is None:
                return
            if not isinstance(parsed, StructuredLine):
                # The runner strips the line terminator; put it back so the
                # sink sees the line as cargo printed it.
                on_diagnostic(parsed.text + "\n")
                return

            message = self.parser.classify(parsed.payload)
            if isinstance(message, CompilerArtifactMessage):
                if message.is_executable:
                    artifacts.extend(message.outputs)
                    for artifact in message.outputs:
                        self.logger.debug(f"Collected artifact {artifact}")
            elif isinstance(message, CompilerDiagnosticMessage):
                on_diagnostic(message.rendered)

        command_invocation = invocation.with_message_format(self.color)
        try:
            await self.runner.run(
                command_invocation,
                on_stdout_line,
                on_diagnostic,
                cancellation=cancellation,
                check=True,
            )
        except (SpawnError, ProcessError) as e:
            self.logger.error(f"`{command_invocation.command_line(self.runner.executable)}` failed: {e}")
            raise BuildInvocationError("Cargo invocation failed.") from e

        self.logger.info(f"Cargo produced {len(artifacts)} debuggable artifact(s)")
        return artifacts
