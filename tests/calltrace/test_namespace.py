"""
Tests for Namespace binding tables.
"""

import pytest

from calltrace.namespace import Namespace


@pytest.mark.unit
class TestNamespace:
    """Test attribute and item access."""

    def test_attribute_and_item_access(self):
        ns = Namespace(x=1)
        assert ns.x == 1
        assert ns["x"] == 1

    def test_nested_dicts_become_namespaces(self):
        ns = Namespace(math={"ops": {"add": 1}})
        assert isinstance(ns.math, Namespace)
        assert isinstance(ns.math.ops, Namespace)
        assert ns.math.ops.add == 1

    def test_set_chains(self):
        ns = Namespace().set(a=1).set(b=2)
        assert ns.to_dict() == {"a": 1, "b": 2}

    def test_self_is_an_ordinary_key(self):
        ns = Namespace(self=len)
        assert ns.self is len
        assert ns.set(self=abs).self is abs
        assert ns.to_dict() == {"self": abs}

    def test_setitem_rebinds(self):
        ns = Namespace(f=len)
        ns["f"] = abs
        assert ns.f is abs

    def test_missing_key_raises_key_error(self):
        with pytest.raises(KeyError):
            Namespace()["missing"]

    def test_reserved_keys_rejected(self):
        with pytest.raises(ValueError, match="reserved"):
            Namespace(keys=1)

    def test_to_dict_recursive(self):
        ns = Namespace(a={"b": {"c": 3}})
        assert ns.to_dict() == {"a": {"b": {"c": 3}}}

    def test_mapping_protocol(self):
        ns = Namespace(a=1, b=2)
        assert "a" in ns
        assert "z" not in ns
        assert list(ns) == ["a", "b"]
        assert len(ns) == 2
        assert list(ns.keys()) == ["a", "b"]
        assert list(ns.values()) == [1, 2]
        assert dict(ns.items()) == {"a": 1, "b": 2}

    def test_repr(self):
        assert repr(Namespace(a=1)) == "Namespace(a=1)"

    def test_non_string_keys_are_stringified(self):
        ns = Namespace()
        ns[1] = "one"
        assert ns["1"] == "one"
