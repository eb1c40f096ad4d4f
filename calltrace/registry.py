"""
Registry of active traces.

Maps each instrumented name to a TraceEntry holding the original callable and
the current hook pair. A name has at most one entry; the entry lives from a
successful instrumentation to a successful revert.
"""

from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from typing import Any

from .exceptions import AlreadyInstrumentedError, NotInstrumentedError

# Hook signatures: before(name, args, depth) / after(name, value, depth)
HookFn = Callable[[str, Any, int], Any]


def noop(name: str, value: Any, depth: int) -> None:
    """Hook that does nothing."""
    return None


@dataclass
class TraceEntry:
    """
    State of one active trace.

    Attributes:
        original: Callable that was bound at the name before tracing
        before: Hook called before the original
        after: Hook called after the original returns
        wrapper: Callable installed in place of the original
        raw: Value to bind back on revert when it differs from original
             (a staticmethod or classmethod found in a class body)
        wrapper_props: Own attributes the wrapper had when it was built
        active: Cleared when the entry is unregistered
    """

    original: Callable[..., Any]
    before: HookFn = noop
    after: HookFn = noop
    wrapper: Any = None
    raw: Any = None
    wrapper_props: dict[str, Any] = field(default_factory=dict)
    active: bool = True

    @property
    def binding(self) -> Any:
        """Value to rebind at the name on revert."""
        return self.raw if self.raw is not None else self.original


class TraceRegistry:
    """
    In-memory mapping from instrumented names to their TraceEntry.

    Example:
        registry = TraceRegistry()
        registry.register("math.add", TraceEntry(original=add))
        registry.lookup("math.add").before = my_hook
        registry.unregister("math.add")
    """

    def __init__(self) -> None:
        self._entries: dict[str, TraceEntry] = {}

    def is_instrumented(self, name: str) -> bool:
        """Check if a name has an active entry."""
        return name in self._entries

    def register(self, name: str, entry: TraceEntry) -> TraceEntry:
        """
        Register an entry for a name.

        Raises:
            AlreadyInstrumentedError: If the name already has an entry
        """
        if name in self._entries:
            raise AlreadyInstrumentedError(name)
        self._entries[name] = entry
        return entry

    def lookup(self, name: str) -> TraceEntry:
        """
        Get the entry for a name.

        Raises:
            NotInstrumentedError: If the name has no entry
        """
        if name not in self._entries:
            raise NotInstrumentedError(name)
        return self._entries[name]

    def unregister(self, name: str) -> TraceEntry:
        """
        Remove and deactivate the entry for a name.

        Returns:
            The removed entry

        Raises:
            NotInstrumentedError: If the name has no entry
        """
        entry = self.lookup(name)
        del self._entries[name]
        entry.active = False
        return entry

    def names(self) -> tuple[str, ...]:
        """Snapshot of registered names in insertion order."""
        return tuple(self._entries)

    def for_each(self, fn: Callable[[str, TraceEntry], Any]) -> None:
        """
        Apply fn to every entry.

        Iterates over a snapshot, so fn may unregister entries (including the
        one it was called with) without skipping any.
        """
        for name, entry in list(self._entries.items()):
            fn(name, entry)

    def clear(self) -> None:
        """Drop all entries without reverting them."""
        for entry in self._entries.values():
            entry.active = False
        self._entries.clear()

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())

    def __len__(self) -> int:
        return len(self._entries)
