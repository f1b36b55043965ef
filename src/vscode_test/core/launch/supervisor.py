"""
Process supervision for the extension test host.

Spawns the test host (never through a shell) and publishes everything that
happens to it as ProcessEvent items on a single asyncio queue:

- stdout chunks (StdoutData)
- stderr chunks (StderrData)
- spawn or runtime errors (ProcessError)
- termination (ProcessExited), published after both streams are closed

Lifecycle: CREATED -> SPAWNED -> RUNNING -> {ERRORED | EXITED}. A process
that errors and later terminates still publishes ProcessExited; a process
that fails to spawn publishes only ProcessError.
"""

from __future__ import annotations

import asyncio
import codecs
import logging
import os
import signal
import sys
from collections.abc import AsyncIterator, Callable
from typing import Any

from vscode_test.core.launch.models import (
    ProcessError,
    ProcessEvent,
    ProcessExited,
    ProcessState,
    ResolvedLaunch,
    StderrData,
    StdoutData,
)

logger = logging.getLogger(__name__)

IS_UNIX = sys.platform != "win32"

READ_CHUNK_SIZE = 4096
TERMINATE_TIMEOUT_SECONDS = 2.0


def normalize_exit_code(returncode: int | None) -> int | None:
    """
    Map an asyncio return code to the reported exit code.

    asyncio reports a process killed by signal N as -N; such a process has
    no exit code, so None is returned.
    """
    if returncode is None or returncode < 0:
        return None
    return returncode


class ProcessSupervisor:
    """
    Spawns one test host process and streams its events.

    Example:
        >>> supervisor = ProcessSupervisor(launch)
        >>> await supervisor.start()
        >>> async for event in supervisor.events():
        ...     print(event)
        >>> await supervisor.aclose()
    """

    def __init__(self, launch: ResolvedLaunch) -> None:
        self.launch = launch
        self.state = ProcessState.CREATED
        self.process: asyncio.subprocess.Process | None = None
        self._queue: asyncio.Queue[ProcessEvent] = asyncio.Queue()
        self._tasks: list[asyncio.Task[None]] = []

    def _transition(self, state: ProcessState) -> None:
        logger.debug("Test host %s -> %s", self.state.value, state.value)
        self.state = state

    def _publish(self, event: ProcessEvent) -> None:
        if isinstance(event, ProcessError):
            self._transition(ProcessState.ERRORED)
        elif isinstance(event, ProcessExited):
            self._transition(ProcessState.EXITED)
        self._queue.put_nowait(event)

    async def start(self) -> None:
        """
        Spawn the process and start reading its output.

        Spawn failures (missing executable, permission denied, ...) do not
        raise; they are published as a ProcessError event.
        """
        if self.state is not ProcessState.CREATED:
            raise RuntimeError(f"Supervisor already started (state: {self.state.value})")

        logger.debug(
            "Spawning test host: %s %s", self.launch.executable, " ".join(self.launch.args)
        )
        kwargs: dict[str, Any] = {
            "stdin": asyncio.subprocess.DEVNULL,
            "stdout": asyncio.subprocess.PIPE,
            "stderr": asyncio.subprocess.PIPE,
            "env": self.launch.env,
        }
        # Own process group, so helpers the test host starts can be signalled with it
        if IS_UNIX:
            kwargs["start_new_session"] = True

        try:
            self.process = await asyncio.create_subprocess_exec(
                self.launch.executable, *self.launch.args, **kwargs
            )
        except OSError as e:
            logger.warning("Failed to spawn %s: %s", self.launch.executable, e)
            self._publish(ProcessError(e))
            return

        self._transition(ProcessState.SPAWNED)

        assert self.process.stdout is not None
        assert self.process.stderr is not None
        readers = [
            asyncio.create_task(self._pump(self.process.stdout, StdoutData)),
            asyncio.create_task(self._pump(self.process.stderr, StderrData)),
        ]
        self._tasks = [*readers, asyncio.create_task(self._wait_for_exit(readers))]
        self._transition(ProcessState.RUNNING)

    async def _pump(
        self,
        stream: asyncio.StreamReader,
        make_event: Callable[[str], StdoutData | StderrData],
    ) -> None:
        # Incremental decoding keeps multi-byte characters split across reads intact
        decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        try:
            while True:
                data = await stream.read(READ_CHUNK_SIZE)
                if not data:
                    break
                text = decoder.decode(data)
                if text:
                    self._publish(make_event(text))
            tail = decoder.decode(b"", final=True)
            if tail:
                self._publish(make_event(tail))
        except (OSError, ValueError) as e:
            logger.warning("Error reading test host output: %s", e)
            self._publish(ProcessError(e))

    async def _wait_for_exit(self, readers: list[asyncio.Task[None]]) -> None:
        assert self.process is not None
        await asyncio.gather(*readers)
        returncode = await self.process.wait()
        self._publish(ProcessExited(normalize_exit_code(returncode)))

    async def events(self) -> AsyncIterator[ProcessEvent]:
        """
        Yield events in arrival order, ending after ProcessExited.

        If the process never terminates (or never spawned) this keeps waiting.
        """
        while True:
            event = await self._queue.get()
            yield event
            if isinstance(event, ProcessExited):
                return

    async def aclose(self) -> None:
        """
        Stop reading and make sure the test host and its helpers are gone.

        The whole process group is sent SIGTERM, then SIGKILL if the test
        host is still running after TERMINATE_TIMEOUT_SECONDS. On Windows only
        the test host itself can be stopped. Helpers left behind by a test
        host that already exited are terminated as well.
        """
        process = self.process
        if process is not None:
            if process.returncode is None:
                logger.debug("Terminating test host %s", process.pid)
                signal_process_group(process)
                try:
                    await asyncio.wait_for(process.wait(), timeout=TERMINATE_TIMEOUT_SECONDS)
                except asyncio.TimeoutError:
                    logger.debug("Test host %s did not terminate, killing", process.pid)
                    signal_process_group(process, force=True)
                    await process.wait()
            elif IS_UNIX:
                signal_process_group(process)

        for task in self._tasks:
            if not task.done():
                task.cancel()
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)
        self._tasks = []


def signal_process_group(process: asyncio.subprocess.Process, force: bool = False) -> None:
    """
    Send SIGTERM (or SIGKILL with ``force``) to the process and its group.

    Processes are spawned with start_new_session on Unix, so the process
    group id equals the test host's pid. Windows falls back to signalling
    the test host directly.
    """
    try:
        if IS_UNIX:
            os.killpg(process.pid, signal.SIGKILL if force else signal.SIGTERM)
        elif force:
            process.kill()
        else:
            process.terminate()
    except (ProcessLookupError, PermissionError) as e:
        # Nothing left to signal
        logger.debug("Process group %s not signalled: %s", process.pid, e)


__all__ = [
    "READ_CHUNK_SIZE",
    "normalize_exit_code",
    "signal_process_group",
    "ProcessSupervisor",
]
