"""
Run extension tests in a VS Code extension test host.

Example:
    >>> import asyncio
    >>> from vscode_test import run_tests
    >>> exit_code = asyncio.run(
    ...     run_tests(
    ...         {
    ...             "extensionPath": "/work/my-ext",
    ...             "testRunnerPath": "/work/my-ext/out/test/suite/index",
    ...         }
    ...     )
    ... )
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from typing import Any

from vscode_test.core.launch.launcher import build_resolved_launch
from vscode_test.core.launch.models import ExplicitTestOptions, TestOptions, parse_launch_request
from vscode_test.core.launch.output_filter import OutputSink, console_sink
from vscode_test.core.launch.reporter import ResultReporter
from vscode_test.core.launch.resolver import Acquirer, resolve_executable
from vscode_test.core.launch.supervisor import ProcessSupervisor

logger = logging.getLogger(__name__)


def acquire_from_cache(version: str | None) -> str:
    """Default acquisition collaborator: look the build up in the configured cache."""
    # Imported here so the launch package does not depend on config loading
    from vscode_test.core.config import load_config
    from vscode_test.core.download import CachedBuildAcquirer

    return CachedBuildAcquirer.from_config(load_config())(version)


async def run_tests(
    options: TestOptions | ExplicitTestOptions | Mapping[str, Any],
    *,
    acquire: Acquirer | None = None,
    sink: OutputSink | None = None,
    base_env: Mapping[str, str] | None = None,
) -> int:
    """
    Launch the extension test host and wait for it to finish.

    Args:
        options: Launch request, or a mapping accepted by parse_launch_request()
        acquire: Acquisition collaborator used when no executable path is given
            (defaults to the local build cache)
        sink: Receives filtered test host output (defaults to the console)
        base_env: Ambient environment (defaults to a snapshot of os.environ)

    Returns:
        0 when the test host exits cleanly

    Raises:
        AcquisitionError: If the executable could not be obtained
        TestRunFailedError: If the test host exits non-zero or is killed
        pydantic.ValidationError: If ``options`` is not a valid launch request
    """
    if not isinstance(options, (TestOptions, ExplicitTestOptions)):
        options = parse_launch_request(options)

    env_snapshot = dict(os.environ if base_env is None else base_env)

    resolved = await resolve_executable(options, acquire or acquire_from_cache)
    launch = build_resolved_launch(resolved, env_snapshot)
    logger.debug("Launching test host %s with args %s", launch.executable, launch.args)

    reporter = ResultReporter(sink or console_sink())
    supervisor = ProcessSupervisor(launch)
    try:
        await supervisor.start()
        return await reporter.consume(supervisor.events())
    finally:
        await supervisor.aclose()


__all__ = ["acquire_from_cache", "run_tests"]
