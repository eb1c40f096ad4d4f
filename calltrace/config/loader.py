"""
Loading of trace settings from YAML files and environment variables.

Environment Variable Override Format:
    CALLTRACE_<KEY>=value
    CALLTRACE_LOGGING_<KEY>=value

Examples:
    CALLTRACE_SERIALIZER=repr
    CALLTRACE_MAX_LENGTH=80
    CALLTRACE_LOGGING_LEVEL=debug
"""

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]
from pydantic import ValidationError

from ..exceptions import ConfigError
from .constants import ENV_PREFIX, MAX_CONFIG_SIZE_BYTES, SECTION
from .schemas import TraceSettings

# Top-level settings whose names contain underscores; env keys are matched
# against these before being split into nested sections.
_FLAT_KEYS = ("max_length",)


def _read_yaml(path: Path) -> dict[str, Any]:
    """Read a YAML settings file, returning the calltrace section if present."""
    if not path.is_file():
        raise ConfigError("Configuration file not found", path=str(path))

    size = path.stat().st_size
    if size > MAX_CONFIG_SIZE_BYTES:
        raise ConfigError(
            "Configuration file too large", path=str(path), size=size
        )

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError("Invalid YAML", path=str(path), error=str(e)) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError("Configuration must be a mapping", path=str(path))
    section = data.get(SECTION, data)
    if not isinstance(section, dict):
        raise ConfigError(f"'{SECTION}' section must be a mapping", path=str(path))
    return section


def convert_env_value(value: str) -> bool | int | float | str | None:
    """
    Convert an environment variable string to an appropriate type.

    Args:
        value: Environment variable value as string

    Returns:
        None for "null"/"none", booleans for "true"/"false", numbers where
        the text parses, the string otherwise
    """
    lowered = value.lower()
    if lowered in ("null", "none"):
        return None
    if lowered in ("true", "false"):
        return lowered == "true"

    try:
        return float(value) if "." in value else int(value)
    except ValueError:
        return value


def env_key_to_path(env_key: str, prefix: str = ENV_PREFIX) -> list[str]:
    """
    Convert an environment variable key to a settings path.

    Example:
        env_key_to_path("CALLTRACE_LOGGING_LEVEL")  # ["logging", "level"]
        env_key_to_path("CALLTRACE_MAX_LENGTH")     # ["max_length"]
    """
    key = env_key[len(prefix) :].lower()
    if key in _FLAT_KEYS:
        return [key]
    return key.split("_", 1)


def collect_env_overrides(
    environ: Mapping[str, str] | None = None, prefix: str = ENV_PREFIX
) -> dict[str, Any]:
    """
    Collect overrides from environment variables with the prefix.

    Returns:
        Nested dictionary of overrides
    """
    environ = os.environ if environ is None else environ
    overrides: dict[str, Any] = {}
    for env_key, env_value in environ.items():
        if not env_key.startswith(prefix) or env_key == prefix:
            continue

        path = env_key_to_path(env_key, prefix)
        current = overrides
        for part in path[:-1]:
            current = current.setdefault(part, {})
        current[path[-1]] = convert_env_value(env_value)
    return overrides


def _merge(base: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, val in overrides.items():
        if isinstance(val, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], val)
        else:
            merged[key] = val
    return merged


def load_settings(
    path: str | Path | None = None,
    enable_env_overrides: bool = True,
    env_prefix: str = ENV_PREFIX,
    environ: Mapping[str, str] | None = None,
    **overrides: Any,
) -> TraceSettings:
    """
    Load and validate trace settings.

    Precedence, lowest first: defaults, YAML file, environment variables,
    keyword overrides.

    Args:
        path: YAML file (optional); a top-level "calltrace" section is used
              when present, otherwise the whole document
        enable_env_overrides: Whether to apply environment overrides
        env_prefix: Prefix of environment override variables
        environ: Environment mapping (default os.environ)
        **overrides: Explicit settings, e.g. serializer="repr"; None values
                     are ignored

    Raises:
        ConfigError: If the file cannot be read or the settings are invalid
    """
    data: dict[str, Any] = {}
    if path is not None:
        data = _read_yaml(Path(path).expanduser())

    if enable_env_overrides:
        data = _merge(data, collect_env_overrides(environ, env_prefix))

    data = _merge(data, {k: v for k, v in overrides.items() if v is not None})

    try:
        return TraceSettings.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid trace settings: {e}") from e
