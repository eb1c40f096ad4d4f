"""
Logger class for the logging system.

Extends logging.Logger with TRACE/TRACE2 levels, pre-populated extra fields
attached to every record, multi-frame caller locations and "view" loggers
that share the handlers of the logger they were derived from.
"""

import collections
import logging
import threading
from typing import Any

from .config import LogConfig
from .constants import LogConstants
from .formatters import EXTRA_ATTR, LINENOS_ATTR, PATHNAMES_ATTR, LogFormatter

# Frames in these files belong to the logging machinery, not the caller
_SKIPPED_FILES = (logging.__file__, __file__)


def _numeric_level(config: LogConfig) -> int:
    # A disabled logger sits above CRITICAL so stdlib checks reject everything
    if config.level is False:
        return logging.CRITICAL + 1
    return int(config.level)


class Logger(logging.Logger):
    """
    Enhanced logger.

    Extra fields are stored on the record under a private attribute instead of
    being spread over the record, so field names never collide with
    LogRecord attributes ("name", "args", ...).
    """

    def __init__(
        self,
        name: str,
        config: LogConfig | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize the logger.

        Args:
            name: Logger name
            config: Logger configuration (default LogConfig if None)
            extra: Fields included in every record of this logger
        """
        config = config if config is not None else LogConfig()
        super().__init__(name, _numeric_level(config))

        self._config = config
        self._logging_disabled = config.level is False
        self._extra: dict[str, Any] = dict(extra or {})
        self._root_logger: Logger | None = None
        # Frames recorded by findCaller, consumed by makeRecord; per thread
        self._pending_traces: dict[int, tuple[list[str], list[int]]] = {}

    @property
    def config(self) -> LogConfig:
        return self._config

    @property
    def root_logger(self) -> "Logger":
        """Logger whose handlers this logger writes to."""
        return self._root_logger if self._root_logger is not None else self

    @property
    def is_disabled(self) -> bool:
        return self._logging_disabled

    def apply_config(self, config: LogConfig) -> None:
        """
        Switch this logger to a new configuration.

        Updates the level and, for a logger that owns handlers, their level
        and formatter. View loggers are updated by LoggerFactory.reconfigure.
        """
        self._config = config
        self._logging_disabled = config.level is False
        self.setLevel(_numeric_level(config))
        for handler in self.handlers:
            handler.setLevel(_numeric_level(config))
            handler.setFormatter(LogFormatter(config))

    def makeRecord(  # type: ignore[override]
        self,
        name: str,
        level: int,
        fn: str,
        lno: int,
        msg: object,
        args: Any,
        exc_info: Any,
        func: str | None = None,
        extra: dict[str, Any] | None = None,
        sinfo: str | None = None,
    ) -> logging.LogRecord:
        """Create a record carrying merged extra fields and the caller trace."""
        record = super().makeRecord(
            name, level, fn, lno, msg, args, exc_info, func=func, sinfo=sinfo
        )

        merged: dict[str, Any]
        if isinstance(extra, collections.OrderedDict):
            merged = collections.OrderedDict(self._extra)
        else:
            merged = dict(self._extra)
        merged.update(extra or {})
        setattr(record, EXTRA_ATTR, merged)

        pending = self._pending_traces.pop(threading.get_ident(), None)
        if pending is not None:
            setattr(record, PATHNAMES_ATTR, pending[0])
            setattr(record, LINENOS_ATTR, pending[1])
        return record

    def trace(self, msg: str, *args: Any, **kwargs: Any) -> None:
        """Log a TRACE level message."""
        level = LogConstants.CUSTOM_LEVELS["TRACE"]
        if not self._logging_disabled and self.isEnabledFor(level):
            self._log(level, msg, args, **kwargs)

    def trace2(self, msg: str, *args: Any, **kwargs: Any) -> None:
        """Log a TRACE2 level message (most verbose level)."""
        level = LogConstants.CUSTOM_LEVELS["TRACE2"]
        if not self._logging_disabled and self.isEnabledFor(level):
            self._log(level, msg, args, **kwargs)

    def isEnabledFor(self, level: int) -> bool:
        if self._logging_disabled:
            return False
        return super().isEnabledFor(level)

    def setLevel(self, level: int | str) -> None:
        super().setLevel(level)
        # Derived loggers may not be in loggerDict, so the manager never
        # clears their cache for us.
        self._cache.clear()  # type: ignore[attr-defined]

    def callHandlers(self, record: logging.LogRecord) -> None:
        """Derived loggers write through the handlers of their root."""
        if self._root_logger is None:
            super().callHandlers(record)
            return

        for handler in self._root_logger.handlers:
            if record.levelno >= handler.level:
                handler.handle(record)

    def findCaller(
        self, stack_info: bool = False, stacklevel: int = 1
    ) -> tuple[str, int, str, str | None]:
        """
        Find the calling frame, recording up to config.location frames.

        The full trace is kept per thread and attached to the record in
        makeRecord; the standard tuple describes the first frame only.
        """
        frame = logging.currentframe()
        while frame is not None and frame.f_code.co_filename in _SKIPPED_FILES:
            frame = frame.f_back
        if frame is None:
            return "(unknown file)", 0, "(unknown function)", None

        pathnames: list[str] = []
        linenos: list[int] = []
        depth = max(1, self._config.location)
        walker = frame
        while walker is not None and len(pathnames) < depth:
            pathnames.append(walker.f_code.co_filename)
            linenos.append(walker.f_lineno)
            walker = walker.f_back

        self._pending_traces[threading.get_ident()] = (pathnames, linenos)
        return pathnames[0], linenos[0], frame.f_code.co_name, None
