"""
Executable resolution for launch requests.

Ensures a launch request names an executable, asking the acquisition
collaborator for one when the caller did not supply it.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar, Union

from vscode_test.core.launch.exceptions import AcquisitionError
from vscode_test.core.launch.models import ExplicitTestOptions, TestOptions

logger = logging.getLogger(__name__)

# Given a version selector (None for latest stable), return a local executable path.
Acquirer = Callable[[Union[str, None]], Union[str, Awaitable[str]]]

RequestT = TypeVar("RequestT", TestOptions, ExplicitTestOptions)


async def resolve_executable(options: RequestT, acquire: Acquirer) -> RequestT:
    """
    Return the request with ``vscode_executable_path`` guaranteed non-empty.

    The caller's request is never modified; a copy carrying the acquired path
    is returned instead.

    Args:
        options: Launch request (either shape)
        acquire: Acquisition collaborator, sync or async

    Returns:
        The same request, or a copy with the acquired executable path

    Raises:
        AcquisitionError: Propagated from the collaborator, or raised when it
            returns an empty path
    """
    if options.vscode_executable_path:
        return options

    logger.debug("Acquiring VS Code for version %s", options.version or "stable")
    result = acquire(options.version)
    if inspect.isawaitable(result):
        result = await result
    if not result:
        raise AcquisitionError(options.version, "acquisition returned no executable path")

    logger.debug("Using acquired executable %s", result)
    return options.model_copy(update={"vscode_executable_path": result})


__all__ = ["Acquirer", "resolve_executable"]
