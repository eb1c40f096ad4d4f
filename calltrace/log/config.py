"""
Configuration for the logging system.

LogConfig is immutable: loggers and formatters share one instance and a new
configuration means a new instance.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from .constants import LogConstants
from .exceptions import InvalidLogLevelError


def resolve_level(level: str | int | bool) -> int | bool:
    """
    Resolve a log level from a name, a number or a boolean.

    Args:
        level: Level name ("debug", "trace", ...), numeric level, numeric
               string, or False / "false" to disable logging. True means info.

    Returns:
        Numeric log level, or False to disable logging

    Raises:
        InvalidLogLevelError: If the level is not recognized
    """
    if isinstance(level, bool):
        return logging.INFO if level else False
    if isinstance(level, int):
        return level
    if isinstance(level, str):
        if level.isnumeric():
            return int(level)
        name = level.lower()
        if name in LogConstants.LEVEL_NAMES:
            return LogConstants.LEVEL_NAMES[name]
    raise InvalidLogLevelError(level)


@dataclass(frozen=True)
class LogConfig:
    """
    Immutable logger configuration.

    Attributes:
        level: Numeric level, or False to disable logging
        location: Number of caller frames to show (0 = none)
        micros: Whether timestamps carry sub-millisecond digits
        colors: Whether output uses ANSI colors
    """

    level: int | bool = logging.WARNING
    location: int = 0
    micros: bool = False
    colors: bool = False

    @classmethod
    def from_params(
        cls,
        level: str | int | bool = "warning",
        location: bool | int = 0,
        micros: bool = False,
        colors: bool = False,
    ) -> LogConfig:
        """
        Create LogConfig from individual parameters.

        Args:
            level: Log level (name, number, or False to disable logging)
            location: Location display level (bool or int)
            micros: Whether to show microsecond precision
            colors: Whether to enable colored output
        """
        return cls(
            level=resolve_level(level),
            location=1 if location is True else int(location or 0),
            micros=micros,
            colors=colors,
        )

    @classmethod
    def from_config(cls, config_dict: dict[str, Any], section: str = "logging") -> LogConfig:
        """
        Create LogConfig from a configuration dictionary.

        Args:
            config_dict: Configuration dictionary
            section: Dotted path of the logging section; a missing section
                     yields the defaults

        Example:
            LogConfig.from_config({"calltrace": {"logging": {"level": "debug"}}},
                                  "calltrace.logging")
        """
        current: Any = config_dict
        for part in section.split("."):
            if isinstance(current, dict) and part in current:
                current = current[part]
            else:
                current = {}
                break

        return cls.from_params(
            level=current.get("level", "warning"),
            location=current.get("location", 0),
            micros=current.get("micros", current.get("microseconds", False)),
            colors=current.get("colors", False),
        )
