"""
Build tool process runner.

This module spawns the build tool, streams its stdout line by line and its
stderr in raw chunks, and reports the exit code only after both streams are
fully drained. Cancellation sends SIGINT and lets the process exit on its own.
"""

import asyncio
import codecs
import logging
import signal
import subprocess
from contextlib import aclosing
from dataclasses import dataclass
from pathlib import Path
from typing import AsyncIterator, Callable, Optional, Union

import psutil

from ..errors import ProcessError, SpawnError, SpawnFailure
from ..models.artifacts import BuildInvocation
from ..models.config import DEFAULT_STREAM_LIMIT
from ..validation import ErrorSeverity, handle_error, handle_subprocess_error
from .cancellation import CancellationToken
from .commands import format_command, merged_environment

logger = logging.getLogger(__name__)

STDERR_CHUNK_SIZE = 4096


@dataclass(frozen=True)
class StdoutLine:
    text: str


@dataclass(frozen=True)
class StderrChunk:
    text: str


@dataclass(frozen=True)
class ProcessExited:
    exit_code: int


ProcessEvent = Union[StdoutLine, StderrChunk, ProcessExited]

# Marks the end of one output stream in the event queue.
_EOF = object()


class ProcessRunner:
    """
    Runs the build tool and exposes its output as an ordered event stream.

    Each call to events() or run() owns its own process and queue; a runner
    instance holds configuration only and can be shared.
    """

    def __init__(
        self,
        executable: str = "cargo",
        default_cwd: Optional[Path] = None,
        stream_limit: int = DEFAULT_STREAM_LIMIT,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Args:
            executable: Build tool name or path
            default_cwd: Working directory when the invocation has none
            stream_limit: Maximum length of a single stdout line in bytes
            logger: Logger to use instead of the module logger
        """
        self.executable = executable
        self.default_cwd = Path(default_cwd) if default_cwd is not None else None
        self.stream_limit = stream_limit
        self.logger = logger or globals()["logger"]

    async def events(
        self,
        invocation: BuildInvocation,
        cancellation: Optional[CancellationToken] = None,
    ) -> AsyncIterator[ProcessEvent]:
        """
        Spawn the process and yield its output events in order.

        Stdout lines keep their emission order. Stderr chunks are interleaved
        as they arrive. ProcessExited is always the last event.

        Raises:
            SpawnError: If the process could not be started
            ProcessError: If reading the output failed
        """
        process = await self._spawn(invocation)
        queue: asyncio.Queue = asyncio.Queue()
        readers = [
            asyncio.create_task(self._read_lines(process.stdout, queue)),
            asyncio.create_task(self._read_chunks(process.stderr, queue)),
        ]
        unregister: Optional[Callable[[], None]] = None
        if cancellation is not None:
            unregister = cancellation.register(lambda: self._interrupt(process))

        try:
            open_streams = len(readers)
            while open_streams:
                event = await queue.get()
                if event is _EOF:
                    open_streams -= 1
                    self._raise_reader_failure(readers)
                    continue
                yield event

            exit_code = await process.wait()
            self.logger.debug(f"'{self.executable}' (PID {process.pid}) exited with code {exit_code}")
            yield ProcessExited(exit_code)
        finally:
            if unregister is not None:
                unregister()
            for reader in readers:
                if not reader.done():
                    reader.cancel()
            if process.returncode is None:
                await self._terminate(process)

    async def run(
        self,
        invocation: BuildInvocation,
        on_stdout_line: Callable[[str], None],
        on_stderr_chunk: Callable[[str], None],
        cancellation: Optional[CancellationToken] = None,
        check: bool = False,
    ) -> int:
        """
        Run the process to completion, delivering output through callbacks.

        Args:
            invocation: Arguments, environment and working directory
            on_stdout_line: Called for every stdout line, without terminator
            on_stderr_chunk: Called for every chunk of stderr text
            cancellation: Optional token that interrupts the process
            check: Raise ProcessError on a non-zero exit code

        Returns:
            The process exit code

        Raises:
            SpawnError: If the process could not be started
            ProcessError: On abnormal termination when ``check`` is set
        """
        exit_code: Optional[int] = None
        async with aclosing(self.events(invocation, cancellation)) as events:
            async for event in events:
                if isinstance(event, StdoutLine):
                    on_stdout_line(event.text)
                elif isinstance(event, StderrChunk):
                    on_stderr_chunk(event.text)
                else:
                    exit_code = event.exit_code

        if check and exit_code != 0:
            raise ProcessError(self.executable, exit_code)
        return exit_code

    async def _spawn(self, invocation: BuildInvocation) -> asyncio.subprocess.Process:
        cwd = invocation.cwd or self.default_cwd
        command = format_command(self.executable, invocation.args)

        if cwd is not None and not cwd.is_dir():
            raise SpawnError(self.executable, SpawnFailure.OTHER,
                             f"working directory does not exist: {cwd}")

        self.logger.info(f"Running `{command}` in {cwd or Path.cwd()}")
        try:
            process = await asyncio.create_subprocess_exec(
                self.executable,
                *invocation.args,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                cwd=cwd,
                env=merged_environment(invocation.env),
                limit=self.stream_limit,
            )
        except FileNotFoundError as e:
            raise SpawnError(self.executable, SpawnFailure.NOT_FOUND) from e
        except OSError as e:
            handle_subprocess_error(
                error=e,
                command=command,
                severity=ErrorSeverity.ERROR,
                reraise=False,
                logger=self.logger,
            )
            raise SpawnError(self.executable, SpawnFailure.OTHER, str(e)) from e

        self.logger.debug(f"Started '{self.executable}' with PID {process.pid}")
        return process

    async def _read_lines(self, stream: asyncio.StreamReader, queue: asyncio.Queue) -> None:
        try:
            while True:
                raw = await stream.readline()
                if not raw:
                    break
                text = raw.decode("utf-8", errors="replace")
                if text.endswith("\n"):
                    text = text[:-1]
                if text.endswith("\r"):
                    text = text[:-1]
                queue.put_nowait(StdoutLine(text))
        finally:
            queue.put_nowait(_EOF)

    async def _read_chunks(self, stream: asyncio.StreamReader, queue: asyncio.Queue) -> None:
        decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        try:
            while True:
                raw = await stream.read(STDERR_CHUNK_SIZE)
                text = decoder.decode(raw, final=not raw)
                if text:
                    queue.put_nowait(StderrChunk(text))
                if not raw:
                    break
        finally:
            queue.put_nowait(_EOF)

    def _raise_reader_failure(self, readers) -> None:
        # A reader that hit an error stops draining its pipe; bail out rather
        # than wait for an EOF that may never come.
        for reader in readers:
            if reader.done() and not reader.cancelled() and reader.exception() is not None:
                error = reader.exception()
                raise ProcessError(self.executable, None, str(error)) from error

    def _interrupt(self, process: asyncio.subprocess.Process) -> None:
        """Deliver SIGINT to the build tool without escalating."""
        if process.returncode is not None:
            return
        self.logger.info(f"Cancellation requested, sending SIGINT to '{self.executable}' (PID {process.pid})")
        try:
            psutil.Process(process.pid).send_signal(signal.SIGINT)
        except psutil.NoSuchProcess:
            self.logger.debug(f"Process {process.pid} already exited")
        except psutil.AccessDenied as e:
            handle_error(
                error=e,
                context=f"interrupting PID {process.pid}",
                severity=ErrorSeverity.WARNING,
                reraise=False,
                logger=self.logger,
            )

    async def _terminate(self, process: asyncio.subprocess.Process) -> None:
        """Stop a process whose output is no longer being consumed."""
        self.logger.warning(f"Output of '{self.executable}' (PID {process.pid}) abandoned, terminating it")
        try:
            process.terminate()
        except ProcessLookupError:
            pass
        await process.wait()
