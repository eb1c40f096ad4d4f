"""Property-based tests for tracing."""

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from calltrace import Namespace, Tracer, noop
from calltrace.depth import current_depth
from calltrace.formatting import TraceFormatter
from calltrace.resolver import DottedPathResolver

# Namespace keys must be valid attribute names and must not shadow its methods
RESERVED_KEYS = {"set", "keys", "values", "items", "to_dict"}
valid_key = st.text(
    alphabet="abcdefghijklmnopqrstuvwxyz",
    min_size=1,
    max_size=8,
).filter(lambda s: s not in RESERVED_KEYS)


def make_fn(tag):
    def fn(*args):
        return (tag, args)

    return fn


@pytest.mark.property
@pytest.mark.unit
class TestResolverProperties:
    """Property-based tests for dotted path resolution."""

    @given(keys=st.lists(valid_key, min_size=1, max_size=5, unique=True))
    def test_rebind_roundtrip(self, keys):
        """Rebinding a path and reading it back yields the new value."""
        nested: dict = {keys[-1]: len}
        for key in reversed(keys[:-1]):
            nested = {key: nested}
        ns = Namespace(**nested)
        path = ".".join(keys)

        resolver = DottedPathResolver(ns)
        assert resolver.resolve(path) is len
        assert resolver.resolve(path, abs) is abs
        assert resolver.resolve(path) is abs

    @given(
        present=st.lists(valid_key, min_size=1, max_size=4, unique=True),
        missing=valid_key,
    )
    def test_missing_leaf_never_mutates(self, present, missing):
        if missing in present:
            return
        ns = Namespace(**{k: len for k in present})
        before = ns.to_dict()
        assert not DottedPathResolver(ns).exists(missing)
        assert ns.to_dict() == before


@pytest.mark.property
@pytest.mark.unit
class TestTracerProperties:
    """Property-based tests for instrument/revert."""

    @given(
        names=st.lists(valid_key, min_size=1, max_size=6, unique=True),
        data=st.data(),
    )
    @settings(max_examples=50)
    def test_revert_restores_every_original(self, names, data):
        originals = {name: make_fn(name) for name in names}
        ns = Namespace(**originals)
        tracer = Tracer(ns, sink=lambda line: None)

        traced = data.draw(st.lists(st.sampled_from(names), unique=True))
        tracer.trace(*traced)
        for name in traced:
            assert ns[name] is not originals[name]
            assert ns[name](1) == (name, (1,))

        tracer.untrace()
        for name, fn in originals.items():
            assert ns[name] is fn
        assert len(tracer.registry) == 0

    @given(levels=st.integers(min_value=1, max_value=12))
    @settings(max_examples=25)
    def test_depth_strictly_increases(self, levels):
        seen = []

        def descend(n):
            return n if n == 0 else ns.descend(n - 1)

        ns = Namespace(descend=descend)
        tracer = Tracer(ns).instrument(
            "descend", lambda name, args, depth: seen.append(depth), noop
        )
        ns.descend(levels)
        tracer.untrace()

        assert seen == list(range(1, levels + 2))
        assert current_depth() == 0


@pytest.mark.property
@pytest.mark.unit
class TestFormatterProperties:
    """Property-based tests for trace lines."""

    @given(
        depth=st.integers(min_value=0, max_value=20),
        values=st.lists(st.integers() | st.text(max_size=10) | st.none(), max_size=5),
    )
    def test_call_line_shape(self, depth, values):
        line = TraceFormatter().format_call("f", tuple(values), depth)
        assert line.startswith(">" + "  " * depth + "f called with arguments: (")
        assert line.endswith(")")

    @given(
        text=st.text(max_size=50),
        max_length=st.integers(min_value=1, max_value=20),
    )
    def test_truncated_values_bounded(self, text, max_length):
        rendered = TraceFormatter(max_length=max_length).serialize(text)
        assert len(rendered) <= max_length + 3
