"""
Tests for ProcessRunner against real child processes.

The running Python interpreter stands in for the build tool so these tests
exercise actual pipes, signals and exit codes.
"""

import signal
import sys
import textwrap
from contextlib import aclosing
from typing import List

import pytest

from cargolaunch.errors import ProcessError, SpawnError, SpawnFailure
from cargolaunch.models import BuildInvocation
from cargolaunch.system import (
    CancellationToken,
    ProcessExited,
    ProcessRunner,
    StderrChunk,
    StdoutLine,
)

pytestmark = [
    pytest.mark.integration,
    pytest.mark.skipif(sys.platform == "win32", reason="relies on POSIX signals"),
]


def python_invocation(code: str, **kwargs) -> BuildInvocation:
    return BuildInvocation(args=("-c", textwrap.dedent(code)), **kwargs)


@pytest.fixture
def runner():
    return ProcessRunner(executable=sys.executable)


class Recorder:
    def __init__(self):
        self.stdout: List[str] = []
        self.stderr: List[str] = []

    @property
    def stderr_text(self) -> str:
        return "".join(self.stderr)


class TestProcessRunner:
    """Tests for run() and events()."""

    @pytest.mark.asyncio
    async def test_stdout_lines_in_order(self, runner):
        recorder = Recorder()
        code = """
            import sys
            for i in range(500):
                print(i)
                if i % 50 == 0:
                    sys.stderr.write(f"err {i}\\n")
                    sys.stderr.flush()
        """

        exit_code = await runner.run(python_invocation(code), recorder.stdout.append, recorder.stderr.append)

        assert exit_code == 0
        assert recorder.stdout == [str(i) for i in range(500)]
        assert recorder.stderr_text.splitlines() == [f"err {i}" for i in range(0, 500, 50)]

    @pytest.mark.asyncio
    async def test_trailing_output_delivered_before_exit(self, runner):
        recorder = Recorder()
        code = """
            import sys
            sys.stdout.write("first\\r\\nsecond\\nno newline at end")
            sys.stdout.flush()
            sys.exit(7)
        """

        exit_code = await runner.run(python_invocation(code), recorder.stdout.append, recorder.stderr.append)

        assert exit_code == 7
        assert recorder.stdout == ["first", "second", "no newline at end"]

    @pytest.mark.asyncio
    async def test_exit_event_is_last(self, runner):
        code = """
            import sys
            print("out")
            sys.stderr.write("err")
        """

        async with aclosing(runner.events(python_invocation(code))) as events:
            collected = [event async for event in events]

        assert isinstance(collected[-1], ProcessExited)
        assert collected[-1].exit_code == 0
        assert StdoutLine("out") in collected
        assert "".join(e.text for e in collected if isinstance(e, StderrChunk)) == "err"
        assert sum(isinstance(e, ProcessExited) for e in collected) == 1

    @pytest.mark.asyncio
    async def test_environment_and_cwd(self, runner, temp_dir):
        recorder = Recorder()
        code = """
            import os
            print(os.environ["CARGOLAUNCH_TEST_VAR"])
            print(os.getcwd())
        """
        invocation = python_invocation(code, env={"CARGOLAUNCH_TEST_VAR": "hello"}, cwd=temp_dir)

        await runner.run(invocation, recorder.stdout.append, recorder.stderr.append)

        assert recorder.stdout[0] == "hello"
        assert recorder.stdout[1] == str(temp_dir.resolve())

    @pytest.mark.asyncio
    async def test_default_cwd(self, temp_dir):
        runner = ProcessRunner(executable=sys.executable, default_cwd=temp_dir)
        recorder = Recorder()

        await runner.run(python_invocation("import os; print(os.getcwd())"),
                         recorder.stdout.append, recorder.stderr.append)

        assert recorder.stdout == [str(temp_dir.resolve())]

    @pytest.mark.asyncio
    async def test_stdin_is_closed(self, runner):
        recorder = Recorder()

        await runner.run(python_invocation("import sys; print(repr(sys.stdin.read()))"),
                         recorder.stdout.append, recorder.stderr.append)

        assert recorder.stdout == ["''"]

    @pytest.mark.asyncio
    async def test_check_raises_process_error(self, runner):
        with pytest.raises(ProcessError) as exc_info:
            await runner.run(python_invocation("import sys; sys.exit(101)"),
                             lambda line: None, lambda chunk: None, check=True)

        assert exc_info.value.exit_code == 101

    @pytest.mark.asyncio
    async def test_executable_not_found(self):
        runner = ProcessRunner(executable="cargolaunch-no-such-executable")

        with pytest.raises(SpawnError) as exc_info:
            await runner.run(BuildInvocation(args=("build",)), lambda line: None, lambda chunk: None)

        assert exc_info.value.reason is SpawnFailure.NOT_FOUND
        assert exc_info.value.not_found

    @pytest.mark.asyncio
    async def test_missing_working_directory_is_not_not_found(self, runner, temp_dir):
        invocation = python_invocation("print(1)", cwd=temp_dir / "missing")

        with pytest.raises(SpawnError) as exc_info:
            await runner.run(invocation, lambda line: None, lambda chunk: None)

        assert exc_info.value.reason is SpawnFailure.OTHER

    @pytest.mark.asyncio
    async def test_not_executable_is_other_failure(self, temp_dir):
        script = temp_dir / "not-executable"
        script.write_text("#!/bin/sh\necho hi\n")
        script.chmod(0o644)
        runner = ProcessRunner(executable=str(script))

        with pytest.raises(SpawnError) as exc_info:
            await runner.run(BuildInvocation(args=()), lambda line: None, lambda chunk: None)

        assert exc_info.value.reason is SpawnFailure.OTHER

    @pytest.mark.asyncio
    async def test_cancellation_sends_interrupt(self, runner):
        token = CancellationToken()
        recorder = Recorder()
        code = """
            import signal, sys, time

            def on_interrupt(signum, frame):
                print("interrupted", flush=True)
                sys.exit(3)

            signal.signal(signal.SIGINT, on_interrupt)
            print("ready", flush=True)
            time.sleep(30)
        """

        def on_line(line):
            recorder.stdout.append(line)
            if line == "ready":
                token.cancel()

        exit_code = await runner.run(python_invocation(code), on_line, recorder.stderr.append, token)

        assert exit_code == 3
        assert recorder.stdout == ["ready", "interrupted"]

    @pytest.mark.asyncio
    async def test_cancellation_with_default_handler(self, runner):
        token = CancellationToken()
        code = """
            import time
            print("ready", flush=True)
            time.sleep(30)
        """

        def on_line(line):
            if line == "ready":
                token.cancel()

        exit_code = await runner.run(python_invocation(code), on_line, lambda chunk: None, token)

        assert exit_code in (-signal.SIGINT, 1, 130)

    @pytest.mark.asyncio
    async def test_line_over_limit_is_process_error(self):
        runner = ProcessRunner(executable=sys.executable, stream_limit=1024)

        with pytest.raises(ProcessError):
            await runner.run(python_invocation("print('x' * 10000)"), lambda line: None, lambda chunk: None)

    @pytest.mark.asyncio
    async def test_invalid_utf8_replaced(self, runner):
        recorder = Recorder()
        code = """
            import sys
            sys.stdout.buffer.write(b"caf\\xe9\\n")
        """

        await runner.run(python_invocation(code), recorder.stdout.append, recorder.stderr.append)

        assert recorder.stdout == ["caf�"]
