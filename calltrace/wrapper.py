"""
Interception wrappers.

Builds the callable that replaces a traced original. The wrapper enters one
level of call depth, runs the entry's before hook, calls the original with the
same arguments, runs the after hook and returns the original's result. The
wrapper mirrors the original's own attributes, and for classes it stays in
the original's isinstance/issubclass relationships.
"""

import functools
import inspect
import types
from contextvars import ContextVar
from typing import Any

from .depth import nested
from .registry import TraceEntry

_MISSING: Any = object()

# Traced classes whose isinstance/issubclass check is running in this context
_checking: ContextVar[frozenset[int]] = ContextVar(
    "calltrace_class_checks", default=frozenset()
)


class CallArgs(tuple):
    """
    Positional arguments of a traced call.

    Behaves as the plain sequence of positional arguments and carries the
    keyword arguments as `kwargs`, so before hooks see the whole call.
    """

    kwargs: dict[str, Any]

    def __new__(cls, args: tuple = (), kwargs: dict[str, Any] | None = None):
        obj = super().__new__(cls, args)
        obj.kwargs = dict(kwargs or {})
        return obj

    def __repr__(self) -> str:
        parts = [repr(a) for a in self]
        parts += [f"{k}={v!r}" for k, v in self.kwargs.items()]
        return f"CallArgs({', '.join(parts)})"


def _is_dunder(key: str) -> bool:
    return key.startswith("__") and key.endswith("__")


def own_properties(obj: Any) -> dict[str, Any]:
    """
    Get the attributes stored directly on obj.

    Dunder entries are skipped: they belong to the object's machinery
    (__wrapped__, __module__, __dict__ descriptors), not to calling code.

    Returns:
        Mapping of attribute name to value; empty for objects without __dict__
    """
    try:
        attrs = vars(obj)
    except TypeError:
        return {}
    return {k: v for k, v in attrs.items() if not _is_dunder(k)}


def copy_own_properties(
    src: Any, dst: Any, since: dict[str, Any] | None = None
) -> list[str]:
    """
    Copy own attributes from src onto dst.

    Attributes whose value is already the very same object on dst are left
    alone, so read-only members (enum members, slots) that did not change
    never need to be reassigned.

    Args:
        src: Object to copy from
        dst: Object to copy onto
        since: Earlier own_properties() snapshot of src; only attributes
               added or rebound after it are copied

    Returns:
        Names that could not be set on dst
    """
    failed = []
    current = own_properties(dst)
    baseline = since or {}
    for key, val in own_properties(src).items():
        if current.get(key, _MISSING) is val or baseline.get(key, _MISSING) is val:
            continue
        try:
            setattr(dst, key, val)
        except (AttributeError, TypeError):
            failed.append(key)
    return failed


def _invoke(name: str, entry: TraceEntry, args: tuple, kwargs: dict) -> Any:
    if not entry.active:
        return entry.original(*args, **kwargs)

    # Hooks are captured at call entry; swapping them mid-call affects only
    # later calls.
    before, after = entry.before, entry.after
    with nested() as depth:
        before(name, CallArgs(args, kwargs), depth)
        value = entry.original(*args, **kwargs)
        after(name, value, depth)
    return value


def _function_wrapper(name: str, entry: TraceEntry) -> Any:
    def traced(*args: Any, **kwargs: Any) -> Any:
        return _invoke(name, entry, args, kwargs)

    # Identity attributes and __wrapped__ only; own attributes are copied
    # separately so dunder machinery of classes is never dumped onto a function.
    functools.update_wrapper(traced, entry.original, updated=())
    copy_own_properties(entry.original, traced)
    return traced


def _checked_against(traced: type, check: Any, obj: Any, original: type) -> bool:
    """
    Answer an isinstance/issubclass check on a traced class as the original.

    ABCMeta answers by also asking each of the original's subclasses, the
    traced class among them, which would ask the original again. A traced
    class already being checked in this context answers False to the nested
    question and the original's own answer stands.
    """
    active = _checking.get()
    if id(traced) in active:
        return False
    token = _checking.set(active | {id(traced)})
    try:
        return check(obj, original)
    finally:
        _checking.reset(token)


def _class_wrapper(name: str, entry: TraceEntry) -> type:
    """
    Build a subclass of the original whose calls run through the hooks.

    Calling the subclass constructs instances of the original class, and
    isinstance/issubclass checks against the subclass answer as the original
    would. Subclasses of the wrapper behave like ordinary subclasses.
    """
    original = entry.original
    meta = type(original)

    def __call__(cls, *args, **kwargs):  # noqa: N807
        if cls is traced:
            return _invoke(name, entry, args, kwargs)
        return super(traced_meta, cls).__call__(*args, **kwargs)

    def __instancecheck__(cls, instance):  # noqa: N807
        if cls is traced:
            return _checked_against(traced, isinstance, instance, original)
        return super(traced_meta, cls).__instancecheck__(instance)

    def __subclasscheck__(cls, subclass):  # noqa: N807
        if cls is traced:
            return _checked_against(traced, issubclass, subclass, original)
        return super(traced_meta, cls).__subclasscheck__(subclass)

    traced_meta = type(meta)(
        f"Traced{meta.__name__}",
        (meta,),
        {
            "__call__": __call__,
            "__instancecheck__": __instancecheck__,
            "__subclasscheck__": __subclasscheck__,
        },
    )

    def body(ns: dict[str, Any]) -> None:
        ns.update(
            __module__=original.__module__,
            __qualname__=original.__qualname__,
            __doc__=original.__doc__,
            __wrapped__=original,
        )

    # new_class goes through __prepare__, which is where metaclasses such as
    # EnumType reject subclassing.
    traced = types.new_class(
        original.__name__, (original,), {"metaclass": traced_meta}, body
    )
    return traced


def _hooks_subclassing(cls: type) -> bool:
    """Check whether creating a subclass of cls runs code of its hierarchy."""
    return any("__init_subclass__" in vars(k) for k in cls.__mro__ if k is not object)


def build_wrapper(name: str, entry: TraceEntry, lg: Any = None) -> Any:
    """
    Build the wrapper for an entry and store it on the entry.

    Classes get a traced subclass. Everything else gets a function, and so do
    classes that refuse to be subclassed (enums with members, final builtins)
    or whose hierarchy defines __init_subclass__, since a subclass would be
    announced to registries and hooks of the traced code.

    Args:
        name: Traced name passed to the hooks
        entry: Registry entry holding the original and the hooks
        lg: Logger for diagnostics (optional)

    Returns:
        The wrapper callable
    """
    wrapper: Any = None
    if inspect.isclass(entry.original):
        reason: Any = None
        if _hooks_subclassing(entry.original):
            reason = "class defines __init_subclass__"
        else:
            try:
                wrapper = _class_wrapper(name, entry)
            except TypeError as e:
                reason = e
        if reason is not None and lg is not None:
            lg.warning(
                "class not subclassed, tracing with a function wrapper",
                extra={"name": name, "reason": reason},
            )

    if wrapper is None:
        wrapper = _function_wrapper(name, entry)

    entry.wrapper = wrapper
    # Attributes the wrapper starts with (including those a metaclass sets on
    # the new subclass, like ABCMeta's _abc_impl) never travel back on revert.
    entry.wrapper_props = own_properties(wrapper)
    return wrapper


def unwrap_descriptor(raw: Any, resolved: Any) -> Any:
    """
    Get the callable to trace for a value found in a class body.

    staticmethod and classmethod objects are traced through their underlying
    function; anything else is traced as resolved.
    """
    if isinstance(raw, (staticmethod, classmethod)):
        return raw.__func__
    return resolved


def as_binding(wrapper: Any, raw: Any) -> Any:
    """Wrap the wrapper in the same descriptor type the original used."""
    if isinstance(raw, classmethod):
        return classmethod(wrapper)
    if isinstance(raw, staticmethod):
        return staticmethod(wrapper)
    return wrapper


def is_wrapper_of(live: Any, entry: TraceEntry) -> bool:
    """Check whether a live binding is the wrapper installed for entry."""
    return getattr(live, "__func__", live) is entry.wrapper


def restore_target(entry: TraceEntry) -> Any:
    """Object that should receive attributes added to the wrapper on revert."""
    return getattr(entry.original, "__func__", entry.original)
