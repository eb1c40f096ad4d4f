"""
Default hooks and output sinks.

The default hooks render each traced call and return as one line (see
calltrace.formatting) and hand the line to a sink: a text stream, or a
calltrace logger at TRACE level.
"""

import sys
from collections.abc import Callable
from contextvars import ContextVar
from typing import IO, Any

from .formatting import TraceFormatter
from .log import Logger
from .registry import noop

__all__ = [
    "DefaultHooks",
    "LoggerSink",
    "StreamSink",
    "default_after",
    "default_before",
    "noop",
]

_emitting: ContextVar[bool] = ContextVar("calltrace_emitting", default=False)


class StreamSink:
    """
    Writes lines to a text stream.

    With no explicit stream the sink looks up sys.stdout (or sys.stderr) at
    write time, so redirections made after the sink was created still apply.
    """

    def __init__(self, stream: IO[str] | None = None, stderr: bool = False) -> None:
        self._stream = stream
        self._stderr = stderr

    @property
    def stream(self) -> IO[str]:
        if self._stream is not None:
            return self._stream
        return sys.stderr if self._stderr else sys.stdout

    def __call__(self, line: str) -> None:
        stream = self.stream
        stream.write(line + "\n")
        stream.flush()


class LoggerSink:
    """Writes lines to a logger at TRACE level."""

    def __init__(self, lg: Logger) -> None:
        self._lg = lg

    def __call__(self, line: str) -> None:
        self._lg.trace(line)


class DefaultHooks:
    """
    The before/after hook pair installed when no hooks are given.

    Example:
        hooks = DefaultHooks(TraceFormatter(indent="    "), StreamSink(stderr=True))
        tracer.instrument("math.add", hooks.before, hooks.after)
    """

    def __init__(
        self, formatter: TraceFormatter | None = None, sink: Any = None
    ) -> None:
        """
        Initialize the hook pair.

        Args:
            formatter: Line formatter (default TraceFormatter())
            sink: Callable receiving each line (default StreamSink() on stdout)
        """
        self.formatter = formatter if formatter is not None else TraceFormatter()
        self.sink = sink if sink is not None else StreamSink()

    def _emit(self, render: Callable[[], str]) -> None:
        # Traced callables used while rendering or writing (repr methods,
        # stream writes) would re-enter the hooks; those inner calls are
        # not reported.
        if _emitting.get():
            return
        token = _emitting.set(True)
        try:
            self.sink(render())
        finally:
            _emitting.reset(token)

    def before(self, name: str, args: Any, depth: int) -> None:
        """Emit the function name and the arguments passed to it."""
        self._emit(lambda: self.formatter.format_call(name, args, depth))

    def after(self, name: str, value: Any, depth: int) -> None:
        """Emit the function name and its return value."""
        self._emit(lambda: self.formatter.format_return(name, value, depth))


_default_hooks = DefaultHooks()


def default_before(name: str, args: Any, depth: int) -> None:
    """Print the traced name and its arguments to stdout."""
    _default_hooks.before(name, args, depth)


def default_after(name: str, value: Any, depth: int) -> None:
    """Print the traced name and its return value to stdout."""
    _default_hooks.after(name, value, depth)
