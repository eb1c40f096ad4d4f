"""
Exception hierarchy for calltrace.

Every error raised by the tracing machinery derives from TraceError, so
callers can catch all library failures with a single except clause while
still distinguishing the specific cause.
"""

from typing import Any


class TraceError(Exception):
    """
    Base exception for all calltrace errors.

    Example:
        try:
            tracer.trace("math.add")
        except TraceError as e:
            lg.error(f"cannot trace: {e}")
    """

    def __init__(self, message: str, **context: Any) -> None:
        """
        Initialize the exception with a message and optional context.

        Args:
            message: Human-readable error message
            **context: Additional context information (stored in self.context)
        """
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self) -> str:
        """String representation with context if available."""
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} ({context_str})"
        return self.message


class InvalidNameError(TraceError):
    """
    Raised when a name is not a usable dotted path.

    Examples:
        - Name is not a string
        - Name is empty
        - Name contains an empty segment ("a..b", ".a", "a.")
    """

    def __init__(self, name: Any) -> None:
        super().__init__("Invalid dotted name", name=repr(name))
        self.name = name


class PathNotFoundError(TraceError):
    """
    Raised when a segment of a dotted path does not exist.

    Attributes:
        path: Full path that was being resolved
        missing: Partial path up to and including the missing segment
    """

    def __init__(self, path: str, missing: str) -> None:
        super().__init__(f"Property {missing} not found", path=path)
        self.path = path
        self.missing = missing


class InvalidTargetError(TraceError):
    """Raised when the resolved value is not callable."""

    def __init__(self, name: str, target: Any) -> None:
        super().__init__(
            "Not a valid function to trace", name=name, type=type(target).__name__
        )
        self.name = name
        self.target = target


class AlreadyInstrumentedError(TraceError):
    """Raised when instrumenting a name that is already being traced."""

    def __init__(self, name: str) -> None:
        super().__init__("This function is already being traced", name=name)
        self.name = name


class NotInstrumentedError(TraceError):
    """Raised when reverting or looking up a name that is not being traced."""

    def __init__(self, name: str) -> None:
        super().__init__("This function is not being traced", name=name)
        self.name = name


class ConfigError(TraceError):
    """
    Configuration-related errors.

    Examples:
        - Config file not found
        - Invalid YAML syntax
        - Invalid setting value
    """

    pass
