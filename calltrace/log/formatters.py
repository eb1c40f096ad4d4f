"""
Log formatter for the logging system.

Renders records as

    [12:34:56,789] [D] instrumented          [name:math.add] [/calltrace]

with extra fields in brackets after the message, padded to a fixed rule
width, and optional ANSI colors and caller locations.
"""

import collections
import logging
import os
from typing import Any

from .colors import ColorManager
from .config import LogConfig
from .constants import LogConstants

EXTRA_ATTR = "__calltrace__extra"
PATHNAMES_ATTR = "__calltrace__pathnames"
LINENOS_ATTR = "__calltrace__linenos"


def _field_value(key: str, value: Any) -> str:
    if key == "exception" and isinstance(value, BaseException):
        return f"{value.__class__.__name__}: {value}"
    if isinstance(value, (list, tuple)):
        return ",".join(str(v) for v in value)
    return str(value)


class LogFormatter(logging.Formatter):
    """
    Formatter with structured extra fields, colors and location display.

    The line is assembled directly rather than through a %-style format
    string, so field values may contain '%'.
    """

    def __init__(self, config: LogConfig) -> None:
        self._config = config
        super().__init__(LogConstants.DEFAULT_FORMAT)

    @property
    def config(self) -> LogConfig:
        return self._config

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:
        """Format timestamp, with microsecond digits when configured."""
        s = super().formatTime(record, datefmt)
        if self._config.micros:
            micros = int((record.created % 1) * 1000000) % 1000
            s += f".{micros:03d}"
        return s

    def format(self, record: logging.LogRecord) -> str:
        message = record.getMessage()
        head = f"[{self.formatTime(record)}] [{record.levelname[:1]}] {message}"

        rule = (
            LogConstants.MICRO_RULE_WIDTH
            if self._config.micros
            else LogConstants.DEFAULT_RULE_WIDTH
        )
        tail = self._render_fields(record)
        tail.append(f"[{record.name}]")
        tail += self._render_location(record)

        line = head + " " * max(1, rule - len(head)) + " ".join(tail)
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)

        if not self._config.colors:
            return line
        col = ColorManager.get_color_for_level(record.levelno)
        return ColorManager.create_bold_color(col) + line + ColorManager.RESET

    def _render_fields(self, record: logging.LogRecord) -> list[str]:
        extra = getattr(record, EXTRA_ATTR, None)
        if not extra:
            return []

        keys = list(extra.keys())
        if not isinstance(extra, collections.OrderedDict):
            keys = sorted(keys)
        return [f"[{key}:{_field_value(key, extra[key])}]" for key in keys]

    def _render_location(self, record: logging.LogRecord) -> list[str]:
        if not self._config.location:
            return []

        pathnames = getattr(record, PATHNAMES_ATTR, None) or [record.pathname]
        linenos = getattr(record, LINENOS_ATTR, None) or [record.lineno]
        return [
            f"[./{os.path.relpath(path, os.getcwd())}:{lineno}]"
            for path, lineno in zip(pathnames, linenos)
        ]
