"""
Configuration models and loading.

This module provides Pydantic models for vscode-test configuration
with multi-layer merging: defaults < user < project < env vars.
"""

from .loader import clear_cache, config_layer_paths, load_config
from .models import Platform, VscodeTestConfig, detect_platform

__all__ = [
    # Models
    "Platform",
    "VscodeTestConfig",
    "detect_platform",
    # Loader functions
    "clear_cache",
    "config_layer_paths",
    "load_config",
]
