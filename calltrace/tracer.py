"""
Tracer: instrument named callables with before/after hooks.

The Tracer ties a resolver (where names live), a registry (what is traced)
and the wrapper builder together. Every mutating method returns the tracer,
so calls chain:

    Tracer(ns).trace("math.add", "math.mul").after("math.div", my_hook)

Module-level functions operate on a default tracer over sys.modules.
"""

from typing import Any

from .config import TraceSettings, load_settings
from .exceptions import InvalidTargetError
from .formatting import TraceFormatter
from .hooks import DefaultHooks, LoggerSink, StreamSink
from .log import ROOT_LOGGER_NAME, LogConfig, Logger, LoggerFactory, derive_lg
from .registry import HookFn, TraceEntry, TraceRegistry, noop
from .resolver import DottedPathResolver, ModuleResolver, PathResolver
from .wrapper import (
    as_binding,
    build_wrapper,
    copy_own_properties,
    is_wrapper_of,
    restore_target,
    unwrap_descriptor,
)


def _root_lg(settings: TraceSettings) -> Logger:
    """Get the shared diagnostics root logger, switched to these settings."""
    cfg = settings.logging
    config = LogConfig.from_params(cfg.level, cfg.location, cfg.micros, cfg.colors)
    lg = LoggerFactory.create(ROOT_LOGGER_NAME, config)
    return LoggerFactory.reconfigure(lg, config)


class Tracer:
    """
    Instruments callables so every invocation runs through hooks.

    Names are resolved through a PathResolver. By default the resolver walks
    sys.modules (importing modules on demand); pass `namespace` to trace
    inside an explicit binding table instead.

    Example:
        ns = Namespace(math={"add": lambda a, b: a + b})
        tracer = Tracer(ns).trace("math.add")
        ns.math.add(2, 3)
        # >  math.add called with arguments: (2, 3)
        # >  math.add returned: 5
        tracer.untrace()
    """

    def __init__(
        self,
        namespace: Any = None,
        resolver: PathResolver | None = None,
        settings: TraceSettings | None = None,
        lg: Logger | None = None,
        sink: Any = None,
        registry: TraceRegistry | None = None,
    ) -> None:
        """
        Initialize the tracer.

        Args:
            namespace: Root binding table for dotted names (ignored when a
                       resolver is given)
            resolver: Path resolution strategy (default: DottedPathResolver
                      over namespace, or ModuleResolver when no namespace)
            settings: Output and logging settings (default TraceSettings())
            lg: Logger for diagnostics (default: derived from "/calltrace")
            sink: Callable receiving default hook lines (default chosen by
                  settings.output)
            registry: Registry of active traces (default: a new one)
        """
        if resolver is None:
            resolver = (
                ModuleResolver() if namespace is None else DottedPathResolver(namespace)
            )
        self._resolver = resolver
        self._settings = settings if settings is not None else TraceSettings()
        self._registry = registry if registry is not None else TraceRegistry()
        self._lg = lg if lg is not None else derive_lg(_root_lg(self._settings), "tracer")

        formatter = TraceFormatter(
            marker=self._settings.marker,
            indent=self._settings.indent,
            serializer=self._settings.serializer,
            max_length=self._settings.max_length,
        )
        self.default_hooks = DefaultHooks(formatter, sink or self._make_sink())

    def _make_sink(self) -> Any:
        output = self._settings.output
        if output == "log":
            return LoggerSink(derive_lg(self._lg, "calls"))
        return StreamSink(stderr=output == "stderr")

    @property
    def resolver(self) -> PathResolver:
        return self._resolver

    @property
    def registry(self) -> TraceRegistry:
        return self._registry

    @property
    def settings(self) -> TraceSettings:
        return self._settings

    @property
    def lg(self) -> Logger:
        return self._lg

    @property
    def names(self) -> tuple[str, ...]:
        """Names currently being traced."""
        return self._registry.names()

    def is_instrumented(self, name: str) -> bool:
        return self._registry.is_instrumented(name)

    def lookup(self, name: str) -> TraceEntry:
        """
        Get the registry entry of a traced name.

        Raises:
            NotInstrumentedError: If the name is not being traced
        """
        return self._registry.lookup(name)

    def _install(self, name: str, before: HookFn, after: HookFn) -> TraceEntry:
        resolved = self._resolver.resolve(name)
        raw = self._resolver.raw(name)
        target = unwrap_descriptor(raw, resolved)
        if not callable(target):
            raise InvalidTargetError(name, target)

        descriptor = raw if isinstance(raw, (staticmethod, classmethod)) else None
        entry = self._registry.register(
            name, TraceEntry(original=target, before=before, after=after, raw=descriptor)
        )
        try:
            wrapper = build_wrapper(name, entry, self._lg)
            self._resolver.resolve(name, as_binding(wrapper, raw))
        except Exception:
            self._registry.unregister(name)
            raise

        self._lg.debug(
            "instrumented", extra={"name": name, "type": type(target).__name__}
        )
        return entry

    def _ensure(self, name: str) -> TraceEntry:
        """Get the entry for name, instrumenting with no-op hooks if needed."""
        if self._registry.is_instrumented(name):
            return self._registry.lookup(name)
        return self._install(name, noop, noop)

    def instrument(
        self, name: str, before: HookFn | None = None, after: HookFn | None = None
    ) -> "Tracer":
        """
        Begin tracing a name.

        Args:
            name: Dotted name of the callable
            before: Hook called as before(name, args, depth) (default: print)
            after: Hook called as after(name, value, depth) (default: print)

        Raises:
            PathNotFoundError: If the name does not resolve
            InvalidTargetError: If the resolved value is not callable
            AlreadyInstrumentedError: If the name is already being traced
        """
        self._install(
            name,
            before if before is not None else self.default_hooks.before,
            after if after is not None else self.default_hooks.after,
        )
        return self

    def trace(self, *names: str) -> "Tracer":
        """
        Trace names with the default hooks.

        Names that are already traced get their hooks reset to the defaults.
        """
        for name in names:
            entry = self._ensure(name)
            entry.before = self.default_hooks.before
            entry.after = self.default_hooks.after
        return self

    def before(self, name: str, fn: HookFn | None) -> "Tracer":
        """
        Set the before hook of a name, tracing it first if needed.

        A name that is not yet traced is instrumented with a no-op after
        hook. A non-callable fn installs the no-op.
        """
        self._ensure(name).before = fn if callable(fn) else noop
        return self

    def after(self, name: str, fn: HookFn | None) -> "Tracer":
        """
        Set the after hook of a name, tracing it first if needed.

        A name that is not yet traced is instrumented with a no-op before
        hook. A non-callable fn installs the no-op.
        """
        self._ensure(name).after = fn if callable(fn) else noop
        return self

    def _revert_one(self, name: str) -> None:
        entry = self._registry.lookup(name)
        live = self._resolver.resolve(name)

        if not is_wrapper_of(live, entry):
            self._lg.warning("name was rebound while traced", extra={"name": name})

        # Calling code may have attached attributes to the wrapper believing
        # it was the original.
        failed = copy_own_properties(
            getattr(live, "__func__", live),
            restore_target(entry),
            since=entry.wrapper_props,
        )
        if failed:
            self._lg.warning(
                "attributes could not be copied back to original",
                extra={"name": name, "attributes": failed},
            )

        self._resolver.resolve(name, entry.binding)
        self._registry.unregister(name)
        self._lg.debug("reverted", extra={"name": name})

    def revert(self, name: str | None = None) -> "Tracer":
        """
        Stop tracing a name, or every traced name when name is None.

        Raises:
            NotInstrumentedError: If the name is not being traced
        """
        if name is None:
            return self.untrace()
        self._revert_one(name)
        return self

    def untrace(self, *names: str) -> "Tracer":
        """
        Stop tracing the given names, or all names when none are given.

        Raises:
            NotInstrumentedError: If a given name is not being traced
        """
        for name in names or self._registry.names():
            self._revert_one(name)
        return self

    def __enter__(self) -> "Tracer":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.untrace()

    def __repr__(self) -> str:
        return f"Tracer(names={list(self.names)!r})"


_default_tracer: Tracer | None = None


def get_tracer() -> Tracer:
    """
    Get the default tracer, creating it on first use.

    The default tracer resolves names against sys.modules and reads its
    settings from CALLTRACE_* environment variables.
    """
    global _default_tracer
    if _default_tracer is None:
        _default_tracer = Tracer(settings=load_settings())
    return _default_tracer


def reset_tracer() -> None:
    """Revert everything the default tracer traces and discard it."""
    global _default_tracer
    if _default_tracer is not None:
        _default_tracer.untrace()
    _default_tracer = None


def instrument(
    name: str, before: HookFn | None = None, after: HookFn | None = None
) -> Tracer:
    """Begin tracing a name with the default tracer."""
    return get_tracer().instrument(name, before, after)


def trace(*names: str) -> Tracer:
    """Trace names with the default hooks of the default tracer."""
    return get_tracer().trace(*names)


def before(name: str, fn: HookFn | None) -> Tracer:
    """Set the before hook of a name on the default tracer."""
    return get_tracer().before(name, fn)


def after(name: str, fn: HookFn | None) -> Tracer:
    """Set the after hook of a name on the default tracer."""
    return get_tracer().after(name, fn)


def revert(name: str | None = None) -> Tracer:
    """Stop tracing a name (or all names) on the default tracer."""
    return get_tracer().revert(name)


def untrace(*names: str) -> Tracer:
    """Stop tracing names (or all names) on the default tracer."""
    return get_tracer().untrace(*names)


def is_instrumented(name: str) -> bool:
    return get_tracer().is_instrumented(name)
