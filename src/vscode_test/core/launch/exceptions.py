"""
Exceptions for launching the extension test host.

Exception Hierarchy:
    LaunchError (base)
    ├── AcquisitionError (executable could not be obtained)
    │   └── BuildNotCachedError (no unpacked build in the local cache)
    └── TestRunFailedError (test host exited non-zero)

Example:
    >>> from vscode_test.core.launch.exceptions import TestRunFailedError
    >>> try:
    ...     await run_tests(options)
    ... except TestRunFailedError:
    ...     sys.exit(1)
"""

from __future__ import annotations

from pathlib import Path


class LaunchError(Exception):
    """
    Base exception for all launch errors.

    Attributes:
        message: Human-readable error message
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class AcquisitionError(LaunchError):
    """
    The application executable could not be obtained.

    Raised by acquisition collaborators. Never retried: the whole launch
    fails with this error.

    Attributes:
        version: Requested version selector (None means latest stable)
    """

    def __init__(self, version: str | None, message: str) -> None:
        self.version = version
        super().__init__(message)


class BuildNotCachedError(AcquisitionError):
    """No unpacked build for the requested version exists in the cache directory."""

    def __init__(self, version: str, cache_dir: Path, executable: Path) -> None:
        self.cache_dir = cache_dir
        self.executable = executable
        super().__init__(
            version,
            f"VS Code '{version}' not found in cache: expected executable at {executable}",
        )


class TestRunFailedError(LaunchError):
    """
    The test host process exited with a non-zero or unknown exit code.

    The exit code itself is not carried; it is only written to the output sink.
    """

    __test__ = False

    def __init__(self) -> None:
        super().__init__("Failed")


__all__ = [
    "LaunchError",
    "AcquisitionError",
    "BuildNotCachedError",
    "TestRunFailedError",
]
