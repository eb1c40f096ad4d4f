"""
Rendering of traced calls as text lines.

The default line format is:

    >  math.add called with arguments: (2, 3)
    >  math.add returned: 5

A marker, then the indent unit repeated once per level of call depth, then
the traced name. Values are serialized independently; the JSON serializer
matches what a reader expects for primitives and simple containers and falls
back to repr() for anything JSON cannot encode.
"""

import json
from collections.abc import Callable
from typing import Any

SERIALIZERS = ("json", "repr")

DEFAULT_MARKER = ">"
DEFAULT_INDENT = "  "
ELLIPSIS = "..."

# Bound at import so tracing json.dumps itself does not feed back into the
# formatter.
_json_dumps = json.dumps


def to_json(value: Any) -> str:
    """Serialize a value as JSON, falling back to repr()."""
    try:
        return _json_dumps(value)
    except (TypeError, ValueError):
        # Unencodable objects and circular containers
        return repr(value)


def to_repr(value: Any) -> str:
    return repr(value)


def get_serializer(name: str) -> Callable[[Any], str]:
    """
    Get a serializer function by name.

    Raises:
        ValueError: If the name is not one of SERIALIZERS
    """
    if name == "json":
        return to_json
    if name == "repr":
        return to_repr
    raise ValueError(
        f"Unknown serializer '{name}'. Must be one of: {', '.join(SERIALIZERS)}"
    )


def truncate(text: str, max_length: int) -> str:
    """Cut text to max_length characters plus an ellipsis; 0 disables."""
    if max_length <= 0 or len(text) <= max_length:
        return text
    return text[:max_length] + ELLIPSIS


class TraceFormatter:
    """
    Formats before/after hook events as single lines.

    Example:
        fmt = TraceFormatter()
        fmt.format_call("math.add", (2, 3), 1)
        # '>  math.add called with arguments: (2, 3)'
        fmt.format_return("math.add", 5, 1)
        # '>  math.add returned: 5'
    """

    def __init__(
        self,
        marker: str = DEFAULT_MARKER,
        indent: str = DEFAULT_INDENT,
        serializer: str = "json",
        max_length: int = 0,
    ) -> None:
        """
        Initialize the formatter.

        Args:
            marker: Prefix of every line
            indent: Unit repeated once per depth level
            serializer: "json" or "repr"
            max_length: Maximum characters per serialized value (0 = unlimited)
        """
        self.marker = marker
        self.indent = indent
        self.max_length = max_length
        self._serialize = get_serializer(serializer)

    def serialize(self, value: Any) -> str:
        return truncate(self._serialize(value), self.max_length)

    def prefix(self, name: str, depth: int) -> str:
        return self.marker + self.indent * depth + name

    def format_args(self, args: Any) -> str:
        """Render positional and (if present) keyword arguments."""
        parts = [self.serialize(a) for a in args]
        kwargs = getattr(args, "kwargs", None) or {}
        parts += [f"{key}={self.serialize(val)}" for key, val in kwargs.items()]
        return ", ".join(parts)

    def format_call(self, name: str, args: Any, depth: int) -> str:
        return (
            f"{self.prefix(name, depth)} called with arguments: "
            f"({self.format_args(args)})"
        )

    def format_return(self, name: str, value: Any, depth: int) -> str:
        return f"{self.prefix(name, depth)} returned: {self.serialize(value)}"
