"""
Constants for the logging system.

Format strings, custom level numbers and ANSI sequences shared by the
logger, formatter and color modules.
"""

import logging


class LogConstants:
    """Constants for the logging system."""

    DEFAULT_FORMAT: str = "[%(asctime)s] [%(levelname).1s] %(message)s"

    # Messages are padded to this width before extra fields are appended
    DEFAULT_RULE_WIDTH: int = 70
    MICRO_RULE_WIDTH: int = 74

    # TRACE carries traced-call lines routed through a logger; TRACE2 carries
    # the library's most verbose internals.
    CUSTOM_LEVELS: dict[str, int] = {"TRACE": 5, "TRACE2": 4}

    LEVEL_NAMES: dict[str, int | bool] = {
        "critical": logging.CRITICAL,
        "error": logging.ERROR,
        "warning": logging.WARNING,
        "info": logging.INFO,
        "debug": logging.DEBUG,
        "trace": 5,
        "trace2": 4,
        "false": False,  # Disables all logging
    }

    RESET: str = "\x1b[0m"

    GRAY_BASE: int = 232
    GRAY_MAX_LEVELS: int = 24
