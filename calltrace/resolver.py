"""
Path resolution strategies.

A resolver turns a name into the value currently bound to it and, when given
a replacement, rebinds that name. Resolvers are the only place where the
tracing machinery mutates a namespace.

Three strategies are provided:
- DottedPathResolver: walks "a.b.c" from an explicit root object or mapping
- ModuleResolver: walks from sys.modules, importing modules on demand
- SlotResolver: looks names up in a table of Instrumentable slots
"""

import importlib
import sys
from abc import ABC, abstractmethod
from collections.abc import Mapping, MutableMapping
from dataclasses import dataclass, field
from typing import Any

from .exceptions import InvalidNameError, PathNotFoundError
from .namespace import Namespace

# Marks an omitted replacement value, so None can be rebound
_UNSET: Any = object()
_MISSING: Any = object()


def split_path(path: Any) -> list[str]:
    """
    Split a dotted path into segments.

    Args:
        path: Dotted path such as "math.add"

    Returns:
        List of non-empty segments

    Raises:
        InvalidNameError: If path is not a non-empty string of non-empty segments
    """
    if not isinstance(path, str) or not path:
        raise InvalidNameError(path)
    segments = path.split(".")
    if not all(segments):
        raise InvalidNameError(path)
    return segments


class PathResolver(ABC):
    """Strategy interface for locating and rebinding named callables."""

    @abstractmethod
    def resolve(self, path: str, value: Any = _UNSET) -> Any:
        """
        Resolve a name, optionally rebinding it first.

        Args:
            path: Name to resolve
            value: Replacement value to bind at the name (optional)

        Returns:
            The live value bound at the name (after rebinding, if requested)

        Raises:
            PathNotFoundError: If the name does not exist
            InvalidNameError: If the name is malformed
        """
        pass  # pragma: no cover

    def raw(self, path: str) -> Any:
        """
        Get the value stored at the name without descriptor binding.

        Strategies without descriptor semantics return resolve(path).
        """
        return self.resolve(path)

    def exists(self, path: str) -> bool:
        """Check whether a name resolves."""
        try:
            self.resolve(path)
            return True
        except PathNotFoundError:
            return False


class DottedPathResolver(PathResolver):
    """
    Resolve dotted paths against an explicit root.

    Mapping and Namespace containers are traversed by key, everything else by
    attribute. Only plain dot-separated segments are supported; there is no
    index or computed-key traversal.

    Example:
        ns = Namespace(math={"add": add})
        resolver = DottedPathResolver(ns)
        resolver.resolve("math.add")            # add
        resolver.resolve("math.add", traced)    # rebinds, returns traced
    """

    def __init__(self, root: Any) -> None:
        """
        Initialize the resolver.

        Args:
            root: Binding table the paths start from (mapping, Namespace,
                  module or any object with attributes)
        """
        self._root = root

    @property
    def root(self) -> Any:
        return self._root

    @staticmethod
    def _is_table(obj: Any) -> bool:
        return isinstance(obj, (Mapping, Namespace))

    def _lookup(self, container: Any, segment: str) -> Any:
        if self._is_table(container):
            return container[segment] if segment in container else _MISSING
        return getattr(container, segment, _MISSING)

    def _assign(self, container: Any, segment: str, value: Any) -> None:
        if isinstance(container, (MutableMapping, Namespace)):
            container[segment] = value
        else:
            setattr(container, segment, value)

    def _root_for(self, segments: list[str]) -> Any:
        """Root to start traversal from; hook for subclasses."""
        return self._root

    def _walk(self, path: str) -> tuple[Any, str]:
        """Walk to the container holding the last segment of path."""
        segments = split_path(path)
        current = self._root_for(segments)

        for i, segment in enumerate(segments):
            found = self._lookup(current, segment)
            if found is _MISSING:
                raise PathNotFoundError(path, ".".join(segments[: i + 1]))
            if i == len(segments) - 1:
                return current, segment
            current = found

        # split_path guarantees at least one segment
        raise AssertionError("unreachable")  # pragma: no cover

    def resolve(self, path: str, value: Any = _UNSET) -> Any:
        container, leaf = self._walk(path)
        if value is not _UNSET:
            self._assign(container, leaf, value)
        return self._lookup(container, leaf)

    def raw(self, path: str) -> Any:
        """
        Get the leaf value, bypassing descriptors when the container is a class.

        For "Klass.method" this returns the staticmethod or classmethod object
        stored in the class body rather than the function it binds to.
        """
        container, leaf = self._walk(path)
        if isinstance(container, type):
            for klass in container.__mro__:
                if leaf in vars(klass):
                    return vars(klass)[leaf]
        return self._lookup(container, leaf)

    def container(self, path: str) -> Any:
        """Get the object that holds the last segment of path."""
        return self._walk(path)[0]


class ModuleResolver(DottedPathResolver):
    """
    Resolve dotted paths against the process-wide module table.

    The first segments of a path name a module; the longest importable
    prefix is imported on demand, so "json.decoder.JSONDecoder.decode" works
    before anything imported json.decoder.
    """

    def __init__(self, modules: MutableMapping[str, Any] | None = None) -> None:
        super().__init__(sys.modules if modules is None else modules)

    def _root_for(self, segments: list[str]) -> Any:
        self._ensure_imported(segments)
        return self._root

    def _ensure_imported(self, segments: list[str]) -> None:
        """Import the longest module prefix of segments that exists."""
        for end in range(len(segments) - 1, 0, -1):
            candidate = ".".join(segments[:end])
            if candidate in self._root:
                return
            try:
                importlib.import_module(candidate)
                return
            except ModuleNotFoundError as e:
                # Only the candidate itself (or a parent package) may be missing;
                # a module that exists but fails its own imports propagates.
                if e.name != candidate and not candidate.startswith(f"{e.name}."):
                    raise


@dataclass
class Instrumentable:
    """
    A named slot holding a callable.

    Calling code holds the slot and calls through it, so tracing the slot
    only swaps `target` and never mutates foreign objects.

    Example:
        add = Instrumentable("add", lambda a, b: a + b)
        resolver = SlotResolver([add])
        add(2, 3)  # calls the current target
    """

    name: str
    target: Any
    metadata: dict[str, Any] = field(default_factory=dict)

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        return self.target(*args, **kwargs)


class SlotResolver(PathResolver):
    """Resolve names to Instrumentable slots; names are not traversed."""

    def __init__(self, slots: list[Instrumentable] | None = None) -> None:
        self._slots: dict[str, Instrumentable] = {}
        for slot in slots or []:
            self.add(slot)

    def add(self, slot: Instrumentable) -> Instrumentable:
        """
        Register a slot.

        Raises:
            InvalidNameError: If the slot name is not a non-empty string
        """
        if not isinstance(slot.name, str) or not slot.name:
            raise InvalidNameError(slot.name)
        self._slots[slot.name] = slot
        return slot

    def slot(self, name: str) -> Instrumentable:
        """
        Get a registered slot.

        Raises:
            PathNotFoundError: If no slot has this name
        """
        if not isinstance(name, str) or not name:
            raise InvalidNameError(name)
        if name not in self._slots:
            raise PathNotFoundError(name, name)
        return self._slots[name]

    def resolve(self, path: str, value: Any = _UNSET) -> Any:
        slot = self.slot(path)
        if value is not _UNSET:
            slot.target = value
        return slot.target
