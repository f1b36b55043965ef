"""
Acquisition of VS Code builds for testing.

Only the local cache lookup lives here; unpacked builds are expected under
the configured cache directory.
"""

from vscode_test.core.download.cache import (
    INSIDERS,
    STABLE,
    CachedBuildAcquirer,
    build_dir_name,
    executable_path_for,
)

__all__ = [
    "INSIDERS",
    "STABLE",
    "CachedBuildAcquirer",
    "build_dir_name",
    "executable_path_for",
]
