"""
Local build cache lookup.

Resolves the executable of an already-unpacked VS Code build. Builds live in
``<cache_dir>/vscode-<version>/`` using the archive layout of each platform.
Nothing is downloaded here: a missing build is an acquisition error.
"""

from __future__ import annotations

import logging
from pathlib import Path

from vscode_test.core.config.models import Platform, VscodeTestConfig
from vscode_test.core.launch.exceptions import BuildNotCachedError

logger = logging.getLogger(__name__)

STABLE = "stable"
INSIDERS = "insiders"

# Executable path inside an unpacked build, per platform
_STABLE_EXECUTABLES: dict[str, Path] = {
    "linux": Path("VSCode-linux-x64", "code"),
    "darwin": Path("Visual Studio Code.app", "Contents", "MacOS", "Electron"),
    "win32": Path("Code.exe"),
}
_INSIDERS_EXECUTABLES: dict[str, Path] = {
    "linux": Path("VSCode-linux-x64", "code-insiders"),
    "darwin": Path("Visual Studio Code - Insiders.app", "Contents", "MacOS", "Electron"),
    "win32": Path("Code - Insiders.exe"),
}


def build_dir_name(version: str) -> str:
    """
    Return the cache directory name for a version.

    Examples:
        >>> build_dir_name("1.32.0")
        'vscode-1.32.0'
        >>> build_dir_name("insiders")
        'vscode-insiders'
    """
    return f"vscode-{version}"


def executable_path_for(build_dir: Path, platform: Platform, version: str) -> Path:
    """
    Return the executable path inside an unpacked build.

    Args:
        build_dir: Directory the build was unpacked into
        platform: Platform layout of the build
        version: Version the build was acquired for

    Returns:
        Path to the executable (not checked for existence)
    """
    executables = _INSIDERS_EXECUTABLES if version == INSIDERS else _STABLE_EXECUTABLES
    return build_dir / executables[platform]


class CachedBuildAcquirer:
    """
    Acquisition collaborator backed by the local build cache.

    Instances are callable with a version selector and return the local
    executable path, so they can be passed directly as ``acquire``.

    Example:
        >>> acquire = CachedBuildAcquirer(Path(".vscode-test"), "linux")
        >>> acquire("1.32.0")
        '.vscode-test/vscode-1.32.0/VSCode-linux-x64/code'
    """

    def __init__(
        self,
        cache_dir: Path,
        platform: Platform,
        default_version: str | None = None,
    ) -> None:
        self.cache_dir = Path(cache_dir)
        self.platform = platform
        self.default_version = default_version

    @classmethod
    def from_config(cls, config: VscodeTestConfig) -> CachedBuildAcquirer:
        """Create an acquirer for the configured cache directory and platform."""
        return cls(config.cache_dir, config.platform, config.default_version)

    def __call__(self, version: str | None) -> str:
        """
        Return the executable for ``version`` (None means the default, then stable).

        Raises:
            BuildNotCachedError: If the build is not present in the cache
        """
        selected = version or self.default_version or STABLE
        build_dir = self.cache_dir / build_dir_name(selected)
        executable = executable_path_for(build_dir, self.platform, selected)

        if not executable.is_file():
            raise BuildNotCachedError(selected, self.cache_dir, executable)

        logger.debug("Found cached VS Code %s at %s", selected, executable)
        return str(executable)


__all__ = [
    "STABLE",
    "INSIDERS",
    "build_dir_name",
    "executable_path_for",
    "CachedBuildAcquirer",
]
