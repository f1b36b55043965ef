"""
Data models for launching the extension test host.

Defines the two launch request shapes, the resolved launch, and the events
published by the process supervisor.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

DEFAULT_LOCALE = "en"


class _LaunchRequestBase(BaseModel):
    """Fields shared by both launch request shapes."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)

    vscode_executable_path: str | None = Field(
        default=None,
        alias="vscodeExecutablePath",
        description="Executable to launch; acquired for `version` when omitted",
    )
    version: str | None = Field(
        default=None,
        description="Version to acquire: 'stable', 'insiders' or e.g. '1.32.0'",
    )
    test_runner_env: dict[str, str | None] | None = Field(
        default=None,
        alias="testRunnerEnv",
        description="Environment overrides passed to the test runner",
    )


class TestOptions(_LaunchRequestBase):
    """
    Implicit launch request.

    Launch arguments are derived from the extension path, test runner path,
    workspace and locale.

    Example:
        >>> options = TestOptions(
        ...     extension_path="/work/my-ext",
        ...     test_runner_path="/work/my-ext/out/test/suite/index",
        ...     test_workspace="/work/my-ext/test-fixtures",
        ... )
    """

    __test__ = False

    kind: Literal["implicit"] = "implicit"
    extension_path: str = Field(
        alias="extensionPath",
        description="Extension root, passed to --extensionDevelopmentPath",
    )
    test_runner_path: str = Field(
        alias="testRunnerPath",
        description="Test runner entry, passed to --extensionTestsPath",
    )
    test_workspace: str | None = Field(
        default=None,
        alias="testWorkspace",
        description="File, folder or workspace file opened on start",
    )
    additional_launch_args: list[str] | None = Field(
        default=None,
        alias="additionalLaunchArgs",
        description="Arguments appended after the default launch arguments",
    )
    locale: str | None = Field(default=None, description="UI locale, defaults to 'en'")


class ExplicitTestOptions(_LaunchRequestBase):
    """
    Explicit launch request.

    The caller supplies the complete argument list, including
    --extensionDevelopmentPath and --extensionTestsPath. A workspace to open
    must be the first item.
    """

    kind: Literal["explicit"] = "explicit"
    launch_args: list[str] = Field(
        alias="launchArgs",
        description="Complete ordered argument list for the executable",
    )


LaunchRequest = Annotated[
    Union[TestOptions, ExplicitTestOptions],
    Field(discriminator="kind"),
]

_launch_request_adapter: TypeAdapter[TestOptions | ExplicitTestOptions] = TypeAdapter(
    LaunchRequest
)


def parse_launch_request(data: Mapping[str, Any]) -> TestOptions | ExplicitTestOptions:
    """
    Build a launch request from a plain mapping.

    The explicit shape is selected when the mapping carries a launch argument
    list (``launch_args`` or ``launchArgs``); otherwise the implicit shape is
    used. Both snake_case and camelCase keys are accepted.

    Raises:
        pydantic.ValidationError: If the mapping does not fit the selected shape
    """
    payload = dict(data)
    if "kind" not in payload:
        explicit = "launch_args" in payload or "launchArgs" in payload
        payload["kind"] = "explicit" if explicit else "implicit"
    return _launch_request_adapter.validate_python(payload)


class ResolvedLaunch(BaseModel):
    """Everything needed to spawn the test host."""

    model_config = ConfigDict(frozen=True)

    executable: str = Field(min_length=1)
    args: list[str]
    env: dict[str, str]


class ProcessState(str, Enum):
    """Lifecycle of a supervised process."""

    CREATED = "created"
    SPAWNED = "spawned"
    RUNNING = "running"
    ERRORED = "errored"
    EXITED = "exited"


@dataclass(frozen=True)
class StdoutData:
    """A chunk read from the child's standard output."""

    chunk: str


@dataclass(frozen=True)
class StderrData:
    """A chunk read from the child's standard error."""

    chunk: str


@dataclass(frozen=True)
class ProcessError:
    """The child could not be spawned or failed asynchronously."""

    error: BaseException


@dataclass(frozen=True)
class ProcessExited:
    """
    The child terminated and its output streams are closed.

    Attributes:
        code: Exit code, or None when the process was killed by a signal
    """

    code: int | None


ProcessEvent = Union[StdoutData, StderrData, ProcessError, ProcessExited]


__all__ = [
    "DEFAULT_LOCALE",
    "TestOptions",
    "ExplicitTestOptions",
    "LaunchRequest",
    "parse_launch_request",
    "ResolvedLaunch",
    "ProcessState",
    "StdoutData",
    "StderrData",
    "ProcessError",
    "ProcessExited",
    "ProcessEvent",
]
