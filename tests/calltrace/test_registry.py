"""
Tests for the trace registry.
"""

import pytest

from calltrace.exceptions import AlreadyInstrumentedError, NotInstrumentedError
from calltrace.registry import TraceEntry, TraceRegistry, noop


@pytest.fixture
def registry():
    return TraceRegistry()


@pytest.mark.unit
class TestTraceEntry:
    """Test TraceEntry defaults and bindings."""

    def test_defaults(self):
        entry = TraceEntry(original=len)
        assert entry.before is noop
        assert entry.after is noop
        assert entry.wrapper is None
        assert entry.active

    def test_binding_is_original(self):
        assert TraceEntry(original=len).binding is len

    def test_binding_prefers_raw(self):
        raw = staticmethod(len)
        assert TraceEntry(original=len, raw=raw).binding is raw

    def test_noop_returns_none(self):
        assert noop("name", (1,), 1) is None


@pytest.mark.unit
class TestTraceRegistry:
    """Test registration and lookup."""

    def test_register_and_lookup(self, registry):
        entry = registry.register("math.add", TraceEntry(original=len))
        assert registry.lookup("math.add") is entry
        assert registry.is_instrumented("math.add")
        assert "math.add" in registry
        assert len(registry) == 1

    def test_duplicate_register(self, registry):
        registry.register("math.add", TraceEntry(original=len))
        with pytest.raises(AlreadyInstrumentedError):
            registry.register("math.add", TraceEntry(original=abs))
        assert registry.lookup("math.add").original is len

    def test_lookup_missing(self, registry):
        with pytest.raises(NotInstrumentedError):
            registry.lookup("math.add")

    def test_unregister_deactivates(self, registry):
        entry = registry.register("math.add", TraceEntry(original=len))
        assert registry.unregister("math.add") is entry
        assert not entry.active
        assert not registry.is_instrumented("math.add")

    def test_unregister_missing(self, registry):
        with pytest.raises(NotInstrumentedError):
            registry.unregister("math.add")

    def test_names_in_insertion_order(self, registry):
        for name in ("b", "a", "c"):
            registry.register(name, TraceEntry(original=len))
        assert registry.names() == ("b", "a", "c")
        assert list(registry) == ["b", "a", "c"]

    def test_for_each_may_unregister(self, registry):
        """Removing entries while iterating visits every entry once."""
        for name in ("a", "b", "c"):
            registry.register(name, TraceEntry(original=len))

        seen = []

        def drop(name, entry):
            seen.append(name)
            registry.unregister(name)

        registry.for_each(drop)
        assert seen == ["a", "b", "c"]
        assert len(registry) == 0

    def test_clear(self, registry):
        entry = registry.register("a", TraceEntry(original=len))
        registry.clear()
        assert len(registry) == 0
        assert not entry.active
