"""
Configuration loading with multi-layer merging.

Implements the configuration precedence chain:
    defaults < user config < project config < env vars
"""

import json
import logging
import os
from pathlib import Path
from typing import Any

from .models import VscodeTestConfig

logger = logging.getLogger(__name__)

PROJECT_CONFIG_FILENAME = ".vscode-test.json"

# Env var -> config field; env vars win over every file layer
ENV_OVERRIDES = {
    "VSCODE_TEST_CACHE_DIR": "cache_dir",
    "VSCODE_TEST_VERSION": "default_version",
    "VSCODE_TEST_PLATFORM": "platform",
}

_config_cache: VscodeTestConfig | None = None


def config_layer_paths(project_dir: Path) -> list[Path]:
    """
    Config files in increasing precedence: the user file, then the project file.

    The user file lives under ``$XDG_CONFIG_HOME`` (``~/.config`` when unset).
    """
    config_home = Path(os.environ.get("XDG_CONFIG_HOME") or Path.home() / ".config")
    return [
        config_home / "vscode-test" / "config.json",
        project_dir / PROJECT_CONFIG_FILENAME,
    ]


def read_config_layer(path: Path) -> dict[str, Any]:
    """Read one config file. Missing, unreadable or non-object files contribute nothing."""
    try:
        data = json.loads(path.read_text())
    except FileNotFoundError:
        return {}
    except (json.JSONDecodeError, OSError) as e:
        logger.warning("Failed to parse config at %s: %s", path, e)
        return {}

    if not isinstance(data, dict):
        logger.warning("Ignoring config at %s: expected a JSON object", path)
        return {}
    return data


def apply_env_overrides(config_dict: dict[str, Any]) -> dict[str, Any]:
    """Return a copy of ``config_dict`` with the non-empty ENV_OVERRIDES vars applied."""
    result = config_dict.copy()
    for env_var, field in ENV_OVERRIDES.items():
        if value := os.environ.get(env_var):
            result[field] = value
    return result


def load_config(project_dir: Path | None = None, use_cache: bool = True) -> VscodeTestConfig:
    """
    Load configuration with multi-layer merging.

    Configuration precedence (highest to lowest):
        1. Environment variables (VSCODE_TEST_*)
        2. Project config (.vscode-test.json)
        3. User config (~/.config/vscode-test/config.json)
        4. Model defaults

    A relative cache_dir is resolved against the project directory.

    Args:
        project_dir: Project directory to load .vscode-test.json from (defaults to cwd)
        use_cache: If True, return cached config from previous load

    Returns:
        Validated VscodeTestConfig instance

    Raises:
        ValidationError: If the merged config fails Pydantic validation

    Example:
        >>> config = load_config()
        >>> config.cache_dir.name
        '.vscode-test'
    """
    global _config_cache

    if use_cache and _config_cache is not None:
        return _config_cache

    if project_dir is None:
        project_dir = Path.cwd()

    merged: dict[str, Any] = {}
    for path in config_layer_paths(project_dir):
        merged.update(read_config_layer(path))

    config = VscodeTestConfig(**apply_env_overrides(merged))
    if not config.cache_dir.is_absolute():
        config.cache_dir = project_dir / config.cache_dir

    _config_cache = config
    return config


def clear_cache() -> None:
    """Forget the cached configuration so the next load_config reads from disk."""
    global _config_cache
    _config_cache = None
