"""
Launch orchestration for the VS Code extension test host.

This package resolves a launch request, assembles the test host's arguments
and environment, supervises the spawned process, and reports its result.

Modules:
    models: Launch requests, resolved launch, process events
    resolver: Executable resolution through the acquisition collaborator
    launcher: Argument and environment assembly
    supervisor: Process spawning and event streaming
    output_filter: Suppression of known-benign output
    reporter: Exit code to result translation
    runner: run_tests(), the entry point tying it together

Example Usage:
    >>> from vscode_test.core.launch import TestOptions, run_tests
    >>>
    >>> options = TestOptions(
    ...     vscode_executable_path="/opt/vscode/code",
    ...     extension_path="/work/my-ext",
    ...     test_runner_path="/work/my-ext/out/test/suite/index",
    ... )
    >>> exit_code = await run_tests(options)
"""

from vscode_test.core.launch.exceptions import (
    AcquisitionError,
    BuildNotCachedError,
    LaunchError,
    TestRunFailedError,
)
from vscode_test.core.launch.launcher import (
    build_launch_args,
    build_launch_env,
    build_resolved_launch,
)
from vscode_test.core.launch.models import (
    DEFAULT_LOCALE,
    ExplicitTestOptions,
    LaunchRequest,
    ProcessError,
    ProcessEvent,
    ProcessExited,
    ProcessState,
    ResolvedLaunch,
    StderrData,
    StdoutData,
    TestOptions,
    parse_launch_request,
)
from vscode_test.core.launch.output_filter import OutputFilter, OutputSink, console_sink
from vscode_test.core.launch.reporter import ResultReporter
from vscode_test.core.launch.resolver import Acquirer, resolve_executable
from vscode_test.core.launch.runner import run_tests
from vscode_test.core.launch.supervisor import ProcessSupervisor

__all__ = [
    # Runner
    "run_tests",
    # Resolver
    "Acquirer",
    "resolve_executable",
    # Launcher
    "build_launch_args",
    "build_launch_env",
    "build_resolved_launch",
    # Supervisor / reporting
    "ProcessSupervisor",
    "ResultReporter",
    "OutputFilter",
    "OutputSink",
    "console_sink",
    # Models
    "DEFAULT_LOCALE",
    "TestOptions",
    "ExplicitTestOptions",
    "LaunchRequest",
    "parse_launch_request",
    "ResolvedLaunch",
    "ProcessState",
    "ProcessEvent",
    "StdoutData",
    "StderrData",
    "ProcessError",
    "ProcessExited",
    # Exceptions
    "LaunchError",
    "AcquisitionError",
    "BuildNotCachedError",
    "TestRunFailedError",
]
