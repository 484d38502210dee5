import pytest

from flowvault.runtime.context import ContextStore
from flowvault.utils.paths import get_property, set_property, split_path


def test_set_creates_intermediate_dicts():
    obj = {}
    set_property(obj, "a.b.c", 1)
    assert obj == {"a": {"b": {"c": 1}}}


def test_set_replaces_none_intermediate():
    obj = {"a": None}
    set_property(obj, "a.b", 1)
    assert obj == {"a": {"b": 1}}


def test_set_into_list_index():
    obj = {"items": [{"id": 1}]}
    set_property(obj, "items.0.name", "x")
    set_property(obj, "items.1", {"id": 2})
    assert obj["items"] == [{"id": 1, "name": "x"}, {"id": 2}]


def test_set_through_scalar_raises():
    with pytest.raises(TypeError):
        set_property({"a": 5}, "a.b", 1)
    with pytest.raises(IndexError):
        set_property({"a": []}, "a.3", 1)


def test_get_missing_returns_default():
    obj = {"a": {"b": 1}, "s": "str"}
    assert get_property(obj, "a.b") == 1
    assert get_property(obj, "a.x", "d") == "d"
    assert get_property(obj, "s.x") is None


def test_split_rejects_empty_segments():
    with pytest.raises(ValueError):
        split_path("a..b")
    with pytest.raises(ValueError):
        split_path("")


def test_context_store():
    store = ContextStore("flow:f1")
    store.set("api.url", "http://x")
    store.set("count", 1)

    assert store.get("api") == {"url": "http://x"}
    assert store.get("api.url") == "http://x"
    assert sorted(store.keys()) == ["api", "count"]

    store.delete("api.url")
    assert store.get("api") == {}
    store.delete("count")
    assert "count" not in store

    store.clear()
    assert store.keys() == []


def test_context_store_reserved_entry():
    store = ContextStore("global")
    lookup = object()
    store.publish("vault", lookup)
    store.set("count", 1)

    with pytest.raises(ValueError, match="reserved"):
        store.set("vault", 2)
    with pytest.raises(ValueError, match="reserved"):
        store.set("vault.x", 2)

    store.delete("vault")
    store.clear()
    assert store.get("vault") is lookup
    assert "vault" in store
    assert store.keys() == ["vault"]
