"""
Tests for run_tests, the end-to-end launch flow.

A Python interpreter (or a small Python script marked executable) plays the
part of the VS Code executable.
"""

from __future__ import annotations

import asyncio
import json
import os
import stat
import sys
from unittest.mock import MagicMock, patch

import pytest

from vscode_test import TestRunFailedError, run_tests
from vscode_test.core.launch import AcquisitionError, TestOptions

IS_WINDOWS = sys.platform == "win32"


@pytest.fixture
def fake_code(tmp_path):
    """
    Create an executable that records its arguments and selected env vars.

    It writes {"argv": [...], "env": {...}} to stdout as JSON and exits with
    the code given in FAKE_CODE_EXIT (default 0).
    """
    script = tmp_path / "code"
    script.write_text(
        f"#!{sys.executable}\n"
        "import json, os, sys\n"
        "print(json.dumps({'argv': sys.argv[1:], 'env': {\n"
        "    k: os.environ.get(k) for k in ('RUNNER_FLAG', 'AMBIENT_FLAG')\n"
        "}}))\n"
        "sys.exit(int(os.environ.get('FAKE_CODE_EXIT', '0')))\n"
    )
    script.chmod(script.stat().st_mode | stat.S_IXUSR)
    return script


def _recorded(output_lines: list[str]) -> dict:
    return json.loads(output_lines[0])


# ============================================================================
# Explicit Configuration
# ============================================================================


class TestRunTestsExplicit:
    """Tests for run_tests with explicit launch args."""

    @pytest.mark.asyncio
    async def test_exit_zero_resolves_zero(self, python_launch, sink, output_lines):
        """Test a passing run resolves with 0."""
        result = await run_tests(python_launch("print('1 passing')"), sink=sink)

        assert result == 0
        assert output_lines[0].strip() == "1 passing"
        assert output_lines[-2:] == ["Exit code:   0", "Done\n"]

    @pytest.mark.asyncio
    async def test_exit_one_rejects(self, python_launch, sink, output_lines):
        """Test a failing run rejects."""
        with pytest.raises(TestRunFailedError):
            await run_tests(
                python_launch("import sys; print('1 failing'); sys.exit(1)"), sink=sink
            )
        assert output_lines[-1] == "Exit code:   1"
        assert "Done\n" not in output_lines

    @pytest.mark.asyncio
    async def test_stderr_forwarded_with_marker(self, python_launch, sink, output_lines):
        """Test stderr output is marked as an error line."""
        await run_tests(python_launch("import sys; sys.stderr.write('deprecated API')"), sink=sink)
        assert "Spawn Error: deprecated API" in output_lines

    @pytest.mark.asyncio
    async def test_test_runner_env_overrides_ambient(self, python_launch, sink, output_lines):
        """Test caller env wins over the ambient environment."""
        base_env = {**os.environ, "RUNNER_FLAG": "ambient", "AMBIENT_FLAG": "kept"}
        await run_tests(
            python_launch(
                "import os; print(os.environ['RUNNER_FLAG'], os.environ['AMBIENT_FLAG'])",
                env={"RUNNER_FLAG": "caller"},
            ),
            sink=sink,
            base_env=base_env,
        )
        assert output_lines[0].strip() == "caller kept"

    @pytest.mark.asyncio
    async def test_mapping_request_accepted(self, sink, output_lines):
        """Test a plain mapping with launchArgs runs the explicit shape."""
        result = await run_tests(
            {"vscodeExecutablePath": sys.executable, "launchArgs": ["-c", "print('ok')"]},
            sink=sink,
        )
        assert result == 0
        assert output_lines[0].strip() == "ok"

    @pytest.mark.asyncio
    async def test_spawn_failure_stays_pending(self, tmp_path, sink, output_lines):
        """Test a spawn error is logged but does not complete the run."""
        options = {"vscodeExecutablePath": str(tmp_path / "missing"), "launchArgs": []}

        with pytest.raises(asyncio.TimeoutError):
            await asyncio.wait_for(run_tests(options, sink=sink), timeout=0.2)

        assert len(output_lines) == 1
        assert output_lines[0].startswith("Test error: ")

    @pytest.mark.asyncio
    @pytest.mark.skipif(IS_WINDOWS, reason="Process groups are Unix-specific")
    async def test_cancellation_stops_helper_processes(
        self, python_launch, helper_spawning_script, wait_for_exit, sink, output_lines
    ):
        """Test a cancelled run leaves no processes started by the test host behind."""
        script, pid_file = helper_spawning_script

        with pytest.raises(asyncio.TimeoutError):
            await asyncio.wait_for(run_tests(python_launch(script), sink=sink), timeout=1.5)

        assert output_lines[0].strip() == "ready"
        assert await wait_for_exit(int(pid_file.read_text()))


# ============================================================================
# Implicit Configuration
# ============================================================================


@pytest.mark.skipif(IS_WINDOWS, reason="Requires an executable script")
class TestRunTestsImplicit:
    """Tests for run_tests with derived launch args."""

    @pytest.mark.asyncio
    async def test_arguments_built(self, fake_code, sink, output_lines):
        """Test the executable receives the derived arguments."""
        options = TestOptions(
            vscode_executable_path=str(fake_code),
            extension_path="/work/ext",
            test_runner_path="/work/ext/out/test/suite",
            test_workspace="/work/ext/fixtures",
            additional_launch_args=["--disable-extensions"],
        )
        result = await run_tests(options, sink=sink, base_env=os.environ)

        assert result == 0
        assert _recorded(output_lines)["argv"] == [
            "/work/ext/fixtures",
            "--extensionDevelopmentPath=/work/ext",
            "--extensionTestsPath=/work/ext/out/test/suite",
            "--locale=en",
            "--disable-extensions",
        ]

    @pytest.mark.asyncio
    async def test_env_merge(self, fake_code, sink, output_lines):
        """Test unset overrides leave ambient values in place."""
        options = TestOptions(
            vscode_executable_path=str(fake_code),
            extension_path="/ext",
            test_runner_path="/ext/test",
            test_runner_env={"RUNNER_FLAG": "1", "AMBIENT_FLAG": None},
        )
        await run_tests(
            options, sink=sink, base_env={**os.environ, "AMBIENT_FLAG": "ambient"}
        )
        assert _recorded(output_lines)["env"] == {"RUNNER_FLAG": "1", "AMBIENT_FLAG": "ambient"}

    @pytest.mark.asyncio
    async def test_failing_exit_rejects(self, fake_code, sink):
        """Test a non-zero exit from the test host rejects."""
        options = TestOptions(
            vscode_executable_path=str(fake_code),
            extension_path="/ext",
            test_runner_path="/ext/test",
            test_runner_env={"FAKE_CODE_EXIT": "1"},
        )
        with pytest.raises(TestRunFailedError):
            await run_tests(options, sink=sink)

    @pytest.mark.asyncio
    async def test_acquired_executable_used(self, fake_code, sink, output_lines):
        """Test the collaborator's path is launched when none is given."""
        acquire = MagicMock(return_value=str(fake_code))
        options = TestOptions(extension_path="/ext", test_runner_path="/ext/test")

        result = await run_tests(options, acquire=acquire, sink=sink)

        assert result == 0
        acquire.assert_called_once_with(None)
        assert options.vscode_executable_path is None


# ============================================================================
# Acquisition
# ============================================================================


class TestRunTestsAcquisition:
    """Tests for acquisition failures and the default collaborator."""

    @pytest.mark.asyncio
    async def test_acquisition_failure_propagates(self, sink, output_lines):
        """Test acquisition errors fail the run before spawning."""
        acquire = MagicMock(side_effect=AcquisitionError("1.32.0", "download failed"))
        options = TestOptions(
            version="1.32.0", extension_path="/ext", test_runner_path="/ext/test"
        )

        with patch("vscode_test.core.launch.runner.ProcessSupervisor") as mock_supervisor:
            with pytest.raises(AcquisitionError, match="download failed"):
                await run_tests(options, acquire=acquire, sink=sink)

        mock_supervisor.assert_not_called()
        assert output_lines == []

    @pytest.mark.asyncio
    async def test_default_collaborator_uses_cache(self, tmp_path, sink):
        """Test the build cache is consulted when no collaborator is given."""
        options = TestOptions(extension_path="/ext", test_runner_path="/ext/test")

        with patch.dict(
            os.environ,
            {"VSCODE_TEST_CACHE_DIR": str(tmp_path / "empty-cache"), "XDG_CONFIG_HOME": str(tmp_path)},
        ):
            with pytest.raises(AcquisitionError, match="stable"):
                await run_tests(options, sink=sink)
