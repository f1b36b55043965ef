"""
Result reporting for a test host run.

Consumes supervisor events, forwards filtered output to the sink, and turns
the termination event into the run result.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterable

from vscode_test.core.launch.exceptions import TestRunFailedError
from vscode_test.core.launch.models import (
    ProcessError,
    ProcessEvent,
    ProcessExited,
    StderrData,
    StdoutData,
)
from vscode_test.core.launch.output_filter import OutputFilter, OutputSink

logger = logging.getLogger(__name__)


class ResultReporter:
    """
    Turns a stream of process events into a single result.

    Only ProcessExited completes the result. ProcessError events are written
    to the sink and otherwise ignored, so a process that fails to spawn and
    never terminates leaves consume() waiting.
    """

    def __init__(self, sink: OutputSink) -> None:
        self.sink = sink
        self.output = OutputFilter(sink)

    async def consume(self, events: AsyncIterable[ProcessEvent]) -> int:
        """
        Process events until the test host terminates.

        Returns:
            0 when the test host exited cleanly

        Raises:
            TestRunFailedError: If the exit code is non-zero or unknown
        """
        async for event in events:
            if isinstance(event, StdoutData):
                self.output.on_stdout(event.chunk)
            elif isinstance(event, StderrData):
                self.output.on_stderr(event.chunk)
            elif isinstance(event, ProcessError):
                self.sink(f"Test error: {event.error}")
            elif isinstance(event, ProcessExited):
                return self.report_exit(event.code)
            else:
                raise TypeError(f"Unsupported process event: {type(event).__name__}")

        # The supervisor always ends its stream with ProcessExited
        raise RuntimeError("Process event stream ended without a termination event")

    def report_exit(self, code: int | None) -> int:
        """Report the exit code and return 0, or raise TestRunFailedError."""
        self.sink(f"Exit code:   {code}")
        if code != 0:
            logger.debug("Test host exited with code %s", code)
            raise TestRunFailedError()

        self.sink("Done\n")
        return 0


__all__ = ["ResultReporter"]
