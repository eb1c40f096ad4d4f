"""
Settings schemas using Pydantic for validation.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..formatting import DEFAULT_INDENT, DEFAULT_MARKER
from ..log.constants import LogConstants


class LoggingSettings(BaseModel):
    """Settings for calltrace's own diagnostics logger."""

    level: str | int | bool = Field(default="warning", description="Log level")
    location: bool | int = Field(default=0, description="Caller frames to show")
    micros: bool = Field(default=False, description="Show microsecond timestamps")
    colors: bool = Field(default=False, description="Use ANSI colors")

    @field_validator("level")
    @classmethod
    def validate_log_level(cls, v: Any) -> Any:
        """Validate level is a recognized level name."""
        if isinstance(v, str) and not v.isnumeric():
            if v.lower() not in LogConstants.LEVEL_NAMES:
                valid = ", ".join(LogConstants.LEVEL_NAMES)
                raise ValueError(f"Invalid log level '{v}'. Must be one of: {valid}")
        return v

    model_config = ConfigDict(extra="forbid")


class TraceSettings(BaseModel):
    """
    Settings for trace output.

    Example YAML:
        calltrace:
          marker: ">"
          indent: 4
          serializer: repr
          max_length: 80
          output: stderr
          logging:
            level: debug
    """

    marker: str = Field(default=DEFAULT_MARKER, description="Prefix of each line")
    indent: str = Field(
        default=DEFAULT_INDENT,
        description="Indent unit per depth level, or a number of spaces",
    )
    serializer: Literal["json", "repr"] = Field(
        default="json", description="How arguments and return values are rendered"
    )
    max_length: int = Field(
        default=0, ge=0, description="Max characters per value (0 = unlimited)"
    )
    output: Literal["stdout", "stderr", "log"] = Field(
        default="stdout", description="Where default hook lines are written"
    )
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @field_validator("indent", mode="before")
    @classmethod
    def validate_indent(cls, v: Any) -> Any:
        """Accept a width in spaces as well as the unit itself."""
        if isinstance(v, bool):
            raise ValueError("indent must be a string or a number of spaces")
        if isinstance(v, int):
            if v < 0:
                raise ValueError("indent width must be >= 0")
            return " " * v
        return v

    model_config = ConfigDict(extra="forbid")
