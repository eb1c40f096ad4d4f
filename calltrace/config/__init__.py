"""
Settings for trace output and diagnostics logging.
"""

from .constants import ENV_PREFIX, MAX_CONFIG_SIZE_BYTES, SECTION
from .loader import collect_env_overrides, convert_env_value, load_settings
from .schemas import LoggingSettings, TraceSettings

__all__ = [
    "ENV_PREFIX",
    "MAX_CONFIG_SIZE_BYTES",
    "SECTION",
    "LoggingSettings",
    "TraceSettings",
    "collect_env_overrides",
    "convert_env_value",
    "load_settings",
]
