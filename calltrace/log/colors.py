"""
ANSI color codes for log output.
"""

import logging

from .constants import LogConstants


class ColorManager:
    """Centralized ANSI color code management."""

    RED = "\x1b[31"
    YELLOW = "\x1b[33"
    MAGENTA = "\x1b[35"
    CYAN = "\x1b[36"
    DEFAULT = "\x1b[38"

    RESET = LogConstants.RESET

    COLORS: dict[int, str] = {
        LogConstants.CUSTOM_LEVELS["TRACE2"]: f"\x1b[38;5;{LogConstants.GRAY_BASE + 7}",
        LogConstants.CUSTOM_LEVELS["TRACE"]: "\x1b[38;5;24",
        logging.DEBUG: "\x1b[38;5;32",
        logging.INFO: CYAN,
        logging.WARNING: YELLOW,
        logging.ERROR: RED,
        logging.CRITICAL: MAGENTA,
    }

    @staticmethod
    def get_color_for_level(level: int) -> str:
        """Get the color escape sequence (without terminator) for a level."""
        return ColorManager.COLORS.get(level, ColorManager.DEFAULT)

    @staticmethod
    def create_gray_level(level: int) -> str:
        """
        Create a gray color escape sequence.

        Args:
            level: Gray level, clamped to 0-23
        """
        level = max(0, min(level, LogConstants.GRAY_MAX_LEVELS - 1))
        return f"\x1b[38;5;{LogConstants.GRAY_BASE + level}"

    @staticmethod
    def create_bold_color(base_color: str) -> str:
        return f"{base_color};1m"
