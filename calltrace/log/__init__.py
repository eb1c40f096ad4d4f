"""
Logging for calltrace.

Extends Python's standard logging with:
- Custom TRACE and TRACE2 levels
- Structured extra fields rendered as [key:value]
- Optional ANSI colors and caller locations
- Path-named loggers ("/calltrace/tracer") derived from a root logger

Log Level Control:
- Standard levels: debug, info, warning, error, critical
- Custom levels: trace, trace2
- Disable logging completely: False or "false"
"""

import logging
from typing import IO, Any

from .colors import ColorManager
from .config import LogConfig, resolve_level
from .constants import LogConstants
from .exceptions import InvalidLogLevelError, LogError
from .factory import LoggerFactory
from .formatters import LogFormatter
from .logger import Logger

logging.addLevelName(LogConstants.CUSTOM_LEVELS["TRACE"], "TRACE")
logging.addLevelName(LogConstants.CUSTOM_LEVELS["TRACE2"], "TRACE2")

ROOT_LOGGER_NAME = "/calltrace"


def create_lg(
    name: str = ROOT_LOGGER_NAME,
    level: str | int | bool = "warning",
    location: bool | int = 0,
    micros: bool = False,
    colors: bool = False,
    stream: IO[str] | None = None,
    extra: dict[str, Any] | None = None,
) -> Logger:
    """
    Create a logger with the specified configuration.

    Convenience wrapper around LoggerFactory.create().

    Example:
        >>> lg = create_lg(level="debug")
    """
    config = LogConfig.from_params(level, location, micros, colors)
    return LoggerFactory.create(name, config, stream=stream, extra=extra)


def derive_lg(lg: Logger, tags: str | list[str]) -> Logger:
    """
    Derive a view logger from a parent logger.

    Example:
        >>> child = derive_lg(create_lg(), "tracer")
        >>> child.name
        '/calltrace/tracer'
    """
    return LoggerFactory.derive(lg, tags)


__all__ = [
    "Logger",
    "LoggerFactory",
    "LogConfig",
    "LogConstants",
    "LogFormatter",
    "ColorManager",
    "LogError",
    "InvalidLogLevelError",
    "ROOT_LOGGER_NAME",
    "resolve_level",
    "create_lg",
    "derive_lg",
]
