"""
vscode-test - run VS Code extension tests

Launches VS Code in extension test host mode and reports the test result
as an exit code.
"""

__version__ = "0.1.0"

# Re-export the public API for convenience
from vscode_test.core.launch import (
    AcquisitionError,
    ExplicitTestOptions,
    TestOptions,
    TestRunFailedError,
    run_tests,
)

__all__ = [
    "AcquisitionError",
    "ExplicitTestOptions",
    "TestOptions",
    "TestRunFailedError",
    "run_tests",
    "__version__",
]
