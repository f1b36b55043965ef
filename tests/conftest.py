"""
Pytest configuration and shared fixtures.

Provides fixtures for launch requests, output capture, a fake unpacked
VS Code build, and isolation of the configuration cache.
"""

import asyncio
import os
import sys
import time
from pathlib import Path

import pytest

from vscode_test.core.config import clear_cache
from vscode_test.core.launch import ExplicitTestOptions, TestOptions

# ==============================================================================
# Isolation
# ==============================================================================


@pytest.fixture(autouse=True)
def _reset_config_cache():
    """Make every test load configuration from scratch."""
    clear_cache()
    yield
    clear_cache()


# ==============================================================================
# Launch Request Fixtures
# ==============================================================================


@pytest.fixture
def implicit_options():
    """Provide an implicit launch request with an explicit executable."""
    return TestOptions(
        vscode_executable_path="/opt/vscode/code",
        extension_path="/work/ext",
        test_runner_path="/work/ext/out/test/suite/index",
    )


@pytest.fixture
def python_launch():
    """
    Build an explicit launch request that runs a Python snippet.

    The Python interpreter stands in for the VS Code executable so the child
    process behaviour (output, exit code) is fully controlled by the test.
    """

    def _make(script: str, env: dict[str, str | None] | None = None) -> ExplicitTestOptions:
        return ExplicitTestOptions(
            vscode_executable_path=sys.executable,
            launch_args=["-c", script],
            test_runner_env=env,
        )

    return _make


@pytest.fixture
def helper_spawning_script(tmp_path):
    """
    Provide a script that starts a long-running helper process, like Electron does.

    The helper's pid is written to the returned pid file before the script
    prints "ready" and sleeps.
    """
    pid_file = tmp_path / "helper.pid"
    script = (
        "import subprocess, sys, time\n"
        "helper = subprocess.Popen([sys.executable, '-c', 'import time; time.sleep(60)'])\n"
        f"open({str(pid_file)!r}, 'w').write(str(helper.pid))\n"
        "print('ready', flush=True)\n"
        "time.sleep(60)\n"
    )
    return script, pid_file


@pytest.fixture
def wait_for_exit():
    """
    Return an async check that a pid is gone within a timeout.

    Zombies count as gone: they are dead and only wait to be reaped by
    their new parent.
    """

    async def _wait(pid: int, timeout: float = 5.0) -> bool:
        deadline = time.monotonic() + timeout
        while time.monotonic() < deadline:
            try:
                os.kill(pid, 0)
            except ProcessLookupError:
                return True
            try:
                state = Path(f"/proc/{pid}/stat").read_text().rsplit(")", 1)[-1].split()[0]
            except OSError:
                state = None
            if state == "Z":
                return True
            await asyncio.sleep(0.05)
        return False

    return _wait


# ==============================================================================
# Output Fixtures
# ==============================================================================


@pytest.fixture
def output_lines():
    """Collect everything written to the output sink."""
    return []


@pytest.fixture
def sink(output_lines):
    """Output sink appending to output_lines."""
    return output_lines.append


# ==============================================================================
# Build Cache Fixtures
# ==============================================================================


@pytest.fixture
def cache_dir(tmp_path):
    """Provide an empty build cache directory."""
    path = tmp_path / ".vscode-test"
    path.mkdir()
    return path


@pytest.fixture
def cached_build(cache_dir):
    """
    Create a fake unpacked build in the cache.

    Returns a function taking (version, relative executable path) and
    returning the created executable path.
    """

    def _make(version: str, executable: Path) -> Path:
        path = cache_dir / f"vscode-{version}" / executable
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("")
        return path

    return _make
