"""
Call depth tracking.

Depth is a context value rather than a shared counter: each thread and each
asyncio task sees its own depth, and leaving a call restores the previous
value through a context token, whether the call returned or raised.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar

_depth: ContextVar[int] = ContextVar("calltrace_depth", default=0)


def current_depth() -> int:
    """Get the nesting depth of traced calls in the current context."""
    return _depth.get()


@contextmanager
def nested() -> Iterator[int]:
    """
    Enter one level of traced call nesting.

    Yields:
        The depth inside the call (always >= 1)
    """
    token = _depth.set(_depth.get() + 1)
    try:
        yield _depth.get()
    finally:
        _depth.reset(token)
