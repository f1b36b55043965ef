"""
Noise filtering for test host output.

The test host prints an idle heartbeat on stdout and a terminal
compatibility warning on stderr that carry no signal. Everything else is
forwarded to the output sink.
"""

from __future__ import annotations

from collections.abc import Callable

from rich.console import Console

OutputSink = Callable[[str], None]

IDLE_HEARTBEAT_MARKER = "update#setState idle"
TERMINAL_WARNING_MARKER = "stty: stdin"
STDERR_PREFIX = "Spawn Error: "


def filter_stdout(chunk: str) -> str | None:
    """Return the chunk to forward, or None if it is an idle heartbeat."""
    if IDLE_HEARTBEAT_MARKER in chunk:
        return None
    return chunk


def filter_stderr(chunk: str) -> str | None:
    """Return the chunk prefixed as an error line, or None if it is benign."""
    if TERMINAL_WARNING_MARKER in chunk:
        return None
    return f"{STDERR_PREFIX}{chunk}"


class OutputFilter:
    """
    Forwards filtered child output to a sink.

    Example:
        >>> lines = []
        >>> output = OutputFilter(lines.append)
        >>> output.on_stdout("update#setState idle\\n")
        >>> output.on_stderr("boom")
        >>> lines
        ['Spawn Error: boom']
    """

    def __init__(self, sink: OutputSink) -> None:
        self.sink = sink

    def on_stdout(self, chunk: str) -> None:
        forwarded = filter_stdout(chunk)
        if forwarded is not None:
            self.sink(forwarded)

    def on_stderr(self, chunk: str) -> None:
        forwarded = filter_stderr(chunk)
        if forwarded is not None:
            self.sink(forwarded)


def console_sink(console: Console | None = None) -> OutputSink:
    """
    Return a sink that writes child output verbatim to a rich console.

    Markup and highlighting are disabled so output is shown exactly as the
    test host printed it. A trailing newline is not doubled.
    """
    console = console or Console()

    def _write(message: str) -> None:
        console.out(message, end="" if message.endswith("\n") else "\n", highlight=False)

    return _write


__all__ = [
    "OutputSink",
    "console_sink",
    "IDLE_HEARTBEAT_MARKER",
    "TERMINAL_WARNING_MARKER",
    "STDERR_PREFIX",
    "filter_stdout",
    "filter_stderr",
    "OutputFilter",
]
