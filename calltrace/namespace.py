"""
Explicit binding tables for tracing.

This module provides Namespace, an object that holds named values with both
attribute-style and item-style access. Nested dictionaries are converted to
nested Namespace instances, so a dotted path such as "math.add" can be
resolved and rebound by DottedPathResolver without touching any process-wide
state.
"""

from collections.abc import ItemsView, Iterator, KeysView, ValuesView
from typing import Any


class Namespace:
    """
    Attribute-accessible binding table with nested structure support.

    Example:
        ns = Namespace(math={"add": lambda a, b: a + b})
        ns.math.add(2, 3)       # 5
        ns["math"]["add"](2, 3)  # 5
    """

    # Keys that would shadow methods used by the resolver or by callers.
    _RESERVED_KEYS = frozenset({"set", "keys", "values", "items", "to_dict"})

    def __init__(self, /, **kwargs: Any) -> None:
        self.set(**kwargs)

    def set(self, /, **kwargs: Any) -> "Namespace":
        """
        Bind multiple names, converting nested dicts to Namespace instances.

        Args:
            **kwargs: Name-value pairs to bind

        Returns:
            self: For method chaining
        """
        for key, val in kwargs.items():
            self._bind(key, val)
        return self

    def _bind(self, key: Any, val: Any) -> None:
        if not isinstance(key, str):
            key = str(key)

        if key in self._RESERVED_KEYS:
            raise ValueError(
                f"Key '{key}' is reserved and cannot be used (would shadow method)"
            )

        if isinstance(val, dict):
            val = Namespace(**val)
        setattr(self, key, val)

    def to_dict(self) -> dict[str, Any]:
        """
        Recursively convert to plain nested dicts.

        Returns:
            dict: Plain dictionary with no Namespace instances
        """
        return {
            key: val.to_dict() if isinstance(val, Namespace) else val
            for key, val in self.__dict__.items()
        }

    def keys(self) -> KeysView[str]:
        return self.__dict__.keys()

    def values(self) -> ValuesView[Any]:
        return self.__dict__.values()

    def items(self) -> ItemsView[str, Any]:
        return self.__dict__.items()

    def __contains__(self, key: Any) -> bool:
        return key in self.__dict__

    def __iter__(self) -> Iterator[str]:
        return iter(self.__dict__)

    def __getitem__(self, key: str) -> Any:
        """
        Get a bound value by name.

        Raises:
            KeyError: If the name is not bound
        """
        if key not in self.__dict__:
            raise KeyError(key)
        return self.__dict__[key]

    def __setitem__(self, key: str, val: Any) -> None:
        self._bind(key, val)

    def __len__(self) -> int:
        return len(self.__dict__)

    def __repr__(self) -> str:
        inner = ", ".join(f"{k}={v!r}" for k, v in self.__dict__.items())
        return f"Namespace({inner})"
