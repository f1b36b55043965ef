"""
Configuration data models for vscode-test.

These models define the structure of .vscode-test.json and
~/.config/vscode-test/config.json files, with validation via Pydantic.
"""

import sys
from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

Platform = Literal["linux", "darwin", "win32"]


def detect_platform() -> Platform:
    """Return the VS Code platform name for the running interpreter."""
    if sys.platform == "win32":
        return "win32"
    if sys.platform == "darwin":
        return "darwin"
    return "linux"


class VscodeTestConfig(BaseModel):
    """
    Top-level vscode-test configuration.

    Only consulted by the default acquisition collaborator; launch requests
    themselves are never altered by configuration.

    Example:
        >>> config = VscodeTestConfig(cache_dir=Path("/tmp/.vscode-test"))
        >>> config.platform in ("linux", "darwin", "win32")
        True
    """
    cache_dir: Path = Field(
        default=Path(".vscode-test"),
        description="Directory holding unpacked VS Code builds (vscode-<version>/)"
    )
    default_version: Optional[str] = Field(
        default=None,
        description="Version used when a launch request names none (None means 'stable')"
    )
    platform: Platform = Field(
        default_factory=detect_platform,
        description="Build layout to expect: 'linux', 'darwin' or 'win32'"
    )

    model_config = ConfigDict(
        extra="allow",  # Allow extra fields for forward compatibility
        validate_assignment=True,  # Validate on field assignment
    )
