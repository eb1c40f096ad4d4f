"""
Factory for creating and configuring loggers.

Loggers are named like paths ("/calltrace", "/calltrace/tracer"). A logger
created with LoggerFactory.create owns a stream handler; loggers derived from
it are lightweight views that write through that handler.
"""

import logging
import sys
from typing import IO, Any, cast

from .config import LogConfig
from .formatters import LogFormatter
from .logger import Logger


class LoggerFactory:
    """Factory for creating and configuring loggers."""

    @staticmethod
    def _existing(name: str) -> Logger | None:
        found = logging.root.manager.loggerDict.get(name)
        if isinstance(found, Logger):
            found.trace2("logger already exists", extra={"logger": name})
            return found
        return None

    @staticmethod
    def _register(lg: Logger) -> None:
        lg.propagate = False
        # Registered so repeated create/derive calls return the same logger
        logging.root.manager.loggerDict[lg.name] = lg

    @staticmethod
    def create(
        name: str,
        config: LogConfig,
        stream: IO[str] | None = None,
        extra: dict[str, Any] | None = None,
    ) -> Logger:
        """
        Create a logger with its own stream handler.

        Returns the existing logger if one with this name was created before.

        Args:
            name: Logger name
            config: Logger configuration
            stream: Output stream (default: sys.stderr, looked up now)
            extra: Fields included in every record

        Example:
            >>> lg = LoggerFactory.create("/calltrace", LogConfig.from_params("debug"))
            >>> lg.debug("instrumented", extra={"name": "math.add"})
            [12:34:56,789] [D] instrumented          [name:math.add] [/calltrace]
        """
        existing = LoggerFactory._existing(name)
        if existing is not None:
            return existing

        lg = Logger(name, config, extra)
        handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
        handler.setFormatter(LogFormatter(config))
        if config.level is not False:
            handler.setLevel(cast(int, config.level))
        lg.addHandler(handler)
        LoggerFactory._register(lg)

        lg.trace2(
            "created logger",
            extra={"level": logging.getLevelName(lg.level), "location": config.location},
        )
        return lg

    @staticmethod
    def reconfigure(root: Logger, config: LogConfig) -> Logger:
        """
        Apply a new configuration to a root logger and every view derived from it.

        create() hands back an existing logger untouched, so a caller that
        needs its own settings applied reconfigures the result.

        Example:
            >>> lg = LoggerFactory.create("/calltrace", config)
            >>> LoggerFactory.reconfigure(lg, LogConfig.from_params("trace"))
        """
        if root.config == config:
            return root

        old_level = logging.getLevelName(root.level)
        root.apply_config(config)
        for lg in list(logging.root.manager.loggerDict.values()):
            if isinstance(lg, Logger) and lg is not root and lg.root_logger is root:
                lg.apply_config(config)

        root.debug(
            "logger reconfigured",
            extra={"level": f"{old_level} -> {logging.getLevelName(root.level)}"},
        )
        return root

    @staticmethod
    def derive(parent: Logger, tags: str | list[str]) -> Logger:
        """
        Derive a "view" logger that writes through the parent's root handlers.

        Args:
            parent: Parent logger
            tags: Single tag or list of tags, joined with "/"

        Example:
            >>> root = LoggerFactory.create("/calltrace", config)
            >>> LoggerFactory.derive(root, ["tracer", "cli"]).name
            '/calltrace/tracer/cli'
        """
        if isinstance(tags, str):
            tags = [tags]

        prefix = parent.name if parent.name.endswith("/") else parent.name + "/"
        name = prefix + "/".join(tags)

        existing = LoggerFactory._existing(name)
        if existing is not None:
            return existing

        lg = Logger(name, parent.config, parent._extra)
        lg._root_logger = parent.root_logger
        lg.parent = parent
        LoggerFactory._register(lg)

        lg.trace2("derived logger", extra={"root": lg.root_logger.name})
        return lg
