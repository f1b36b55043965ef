"""
Argument and environment assembly for the extension test host.

Turns a resolved launch request into the argument list and environment the
test host is spawned with.
"""

from __future__ import annotations

from collections.abc import Mapping

from vscode_test.core.launch.models import (
    DEFAULT_LOCALE,
    ExplicitTestOptions,
    ResolvedLaunch,
    TestOptions,
)


def build_launch_args(options: TestOptions) -> list[str]:
    """
    Build command-line arguments for an implicit launch request.

    Order: workspace (if any), --extensionDevelopmentPath,
    --extensionTestsPath, --locale, then any additional launch arguments.

    Args:
        options: Implicit launch request

    Returns:
        List of command-line arguments

    Examples:
        >>> options = TestOptions(
        ...     extension_path="/ext",
        ...     test_runner_path="/ext/out/test",
        ...     test_workspace="/fixture",
        ... )
        >>> build_launch_args(options)
        ['/fixture', '--extensionDevelopmentPath=/ext', '--extensionTestsPath=/ext/out/test', '--locale=en']
    """
    args = [
        f"--extensionDevelopmentPath={options.extension_path}",
        f"--extensionTestsPath={options.test_runner_path}",
        f"--locale={options.locale or DEFAULT_LOCALE}",
    ]

    # The workspace is opened by the application on start
    if options.test_workspace:
        args.insert(0, options.test_workspace)

    if options.additional_launch_args:
        args.extend(options.additional_launch_args)

    return args


def build_launch_env(
    base_env: Mapping[str, str],
    test_runner_env: Mapping[str, str | None] | None = None,
) -> dict[str, str]:
    """
    Build the environment for the test host.

    Starts from a copy of ``base_env`` and applies every caller override
    whose value is set. ``base_env`` is not modified.

    Args:
        base_env: Ambient environment captured at call time
        test_runner_env: Caller overrides; None values are ignored

    Returns:
        Fresh environment mapping

    Examples:
        >>> build_launch_env({"PATH": "/bin", "HOME": "/root"}, {"HOME": "/tmp", "X": None})
        {'PATH': '/bin', 'HOME': '/tmp'}
    """
    env = dict(base_env)
    if test_runner_env:
        env.update({k: v for k, v in test_runner_env.items() if v is not None})
    return env


def build_resolved_launch(
    options: TestOptions | ExplicitTestOptions,
    base_env: Mapping[str, str],
) -> ResolvedLaunch:
    """
    Assemble executable, arguments and environment for a resolved request.

    Explicit requests use their argument list verbatim; implicit requests go
    through build_launch_args().

    Raises:
        TypeError: If ``options`` is neither request shape
        pydantic.ValidationError: If the executable path is still empty
    """
    if isinstance(options, ExplicitTestOptions):
        args = list(options.launch_args)
    elif isinstance(options, TestOptions):
        args = build_launch_args(options)
    else:
        raise TypeError(f"Unsupported launch request: {type(options).__name__}")

    return ResolvedLaunch(
        executable=options.vscode_executable_path or "",
        args=args,
        env=build_launch_env(base_env, options.test_runner_env),
    )


__all__ = [
    "build_launch_args",
    "build_launch_env",
    "build_resolved_launch",
]
