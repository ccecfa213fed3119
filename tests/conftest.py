"""
Pytest configuration and shared fixtures for the cargolaunch test suite.

This module provides common fixtures, a fake cargo executable and sample
cargo messages shared by the test modules.
"""

import json
import os
import shutil
import stat
import sys
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest

# Add src to Python path for testing
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))


# ============================================================================
# Test Configuration
# ============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "integration: mark test as an integration test")


# ============================================================================
# Core Fixtures
# ============================================================================


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    temp_path = tempfile.mkdtemp()
    yield Path(temp_path)
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture(autouse=True)
def clear_config_after_test():
    """Automatically reset the configuration singleton after each test."""
    yield

    from cargolaunch.config import manager

    manager.clear_config_cache()
    manager._CONFIG_FILE_PATH = manager._DEFAULT_CONFIG_FILE_PATH


# ============================================================================
# Sample cargo messages
# ============================================================================


def artifact_message(
    name: str,
    kinds: List[str],
    executable: Any = "__missing__",
    filenames: Optional[List[Optional[str]]] = None,
    test: bool = False,
) -> Dict[str, Any]:
    """Build a compiler-artifact message in the new or old schema."""
    message: Dict[str, Any] = {
        "reason": "compiler-artifact",
        "package_id": f"{name} 0.1.0 (path+file:///p)",
        "target": {"name": name, "kind": kinds, "crate_types": kinds, "src_path": "/p/src/main.rs"},
        "profile": {"opt_level": "0", "debuginfo": 2, "test": test},
        "fresh": False,
    }
    if executable != "__missing__":
        message["executable"] = executable
    if filenames is not None:
        message["filenames"] = filenames
    return message


def diagnostic_message(rendered: str) -> Dict[str, Any]:
    return {
        "reason": "compiler-message",
        "package_id": "demo 0.1.0 (path+file:///p)",
        "message": {"rendered": rendered, "level": "warning", "message": rendered.strip()},
    }


def metadata_document(packages: List[Dict[str, Any]]) -> Dict[str, Any]:
    return {
        "packages": packages,
        "workspace_members": [],
        "target_directory": "/p/target",
        "version": 1,
        "workspace_root": "/p",
    }


class Messages:
    """Sample message builders exposed as a fixture."""
    artifact = staticmethod(artifact_message)
    diagnostic = staticmethod(diagnostic_message)
    metadata = staticmethod(metadata_document)


@pytest.fixture
def messages():
    return Messages


# ============================================================================
# Fake cargo executable
# ============================================================================


FAKE_CARGO_SOURCE = '''#!{python}
import json
import os
import signal
import sys
import time

SCENARIO = json.loads({scenario!r})

if SCENARIO["interrupt_exit_code"] is not None:
    signal.signal(signal.SIGINT, lambda signum, frame: sys.exit(SCENARIO["interrupt_exit_code"]))

with open(SCENARIO["record_file"], "a") as record:
    record.write(json.dumps({{
        "argv": sys.argv[1:],
        "cwd": os.getcwd(),
        "env": {{key: os.environ.get(key) for key in SCENARIO["env_keys"]}},
    }}) + "\\n")

for line in SCENARIO["stdout"]:
    sys.stdout.write(line + "\\n")
    sys.stdout.flush()
if SCENARIO["stderr"]:
    sys.stderr.write(SCENARIO["stderr"])
    sys.stderr.flush()
if SCENARIO["interrupt_exit_code"] is not None:
    time.sleep(30)
sys.exit(SCENARIO["exit_code"])
'''


class FakeCargo:
    """A script standing in for cargo, replaying a fixed scenario."""

    def __init__(self, directory: Path):
        self.directory = directory
        self.path = directory / "fake-cargo"
        self.record_file = directory / "invocations.jsonl"

    def configure(
        self,
        stdout: Optional[List[Any]] = None,
        stderr: str = "",
        exit_code: int = 0,
        env_keys: Optional[List[str]] = None,
        interrupt_exit_code: Optional[int] = None,
    ) -> str:
        """
        Write the script; JSON-able stdout entries are serialized to lines.

        With ``interrupt_exit_code`` set the script keeps running after its
        output until SIGINT arrives, then exits with that code.
        """
        lines = [line if isinstance(line, str) else json.dumps(line) for line in (stdout or [])]
        scenario = json.dumps({
            "stdout": lines,
            "stderr": stderr,
            "exit_code": exit_code,
            "record_file": str(self.record_file),
            "env_keys": env_keys or [],
            "interrupt_exit_code": interrupt_exit_code,
        })
        self.path.write_text(FAKE_CARGO_SOURCE.format(python=sys.executable, scenario=scenario))
        self.path.chmod(self.path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return str(self.path)

    def invocations(self) -> List[Dict[str, Any]]:
        if not self.record_file.exists():
            return []
        return [json.loads(line) for line in self.record_file.read_text().splitlines()]


@pytest.fixture
def fake_cargo(temp_dir):
    """Provide a configurable fake cargo executable (POSIX only)."""
    if os.name != "posix":
        pytest.skip("fake cargo script requires a POSIX shebang")
    return FakeCargo(temp_dir)


@pytest.fixture
def project_dir(temp_dir):
    """An empty project directory separate from the fake cargo location."""
    path = temp_dir / "project"
    path.mkdir()
    return path


@pytest.fixture
def config_file(temp_dir):
    """Write a config.toml and return its path."""
    import toml

    def write(data: Dict[str, Any]) -> Path:
        path = temp_dir / "config.toml"
        with open(path, "w") as f:
            toml.dump(data, f)
        return path

    return write
