"""
Exceptions for the logging system.
"""

from typing import Any

from ..exceptions import TraceError


class LogError(TraceError):
    """Base exception for logging-related errors."""

    pass


class InvalidLogLevelError(LogError):
    """Raised when an invalid log level is specified."""

    def __init__(self, level: Any) -> None:
        super().__init__(f"Invalid log level: {level}")
        self.level = level
