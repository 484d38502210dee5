import logging

import pytest

from flowvault.vault.errors import GroupNotFound, PropertyNotFound, VaultNotFound
from flowvault.vault.lookup import GroupHandle, VaultLookup


@pytest.fixture
def lookup(registry):
    return VaultLookup(registry)


def test_lookup_by_vault_name(make_vault, lookup):
    make_vault({"db": {"host": "x"}})

    group = lookup("Prod").get_group("db")
    assert isinstance(group, GroupHandle)
    assert group.get_property("host") == "x"
    assert group.host == "x"
    assert group["host"] == "x"


def test_camel_case_aliases(make_vault, lookup):
    make_vault({"db": {"host": {"value": "x", "type": "str"}}})

    group = lookup("Prod").getGroup("db")
    assert group.getProperty("host") == "x"
    assert group.getAll() == {"host": "x"}


def test_missing_vault_group_and_property(make_vault, lookup):
    make_vault({"db": {"host": "x"}})

    with pytest.raises(VaultNotFound):
        lookup("Missing")
    with pytest.raises(GroupNotFound):
        lookup("Prod").get_group("cache")

    group = lookup("Prod").get_group("db")
    with pytest.raises(PropertyNotFound):
        group.get_property("port")
    with pytest.raises(AttributeError):
        group.port
    with pytest.raises(KeyError):
        group["port"]


def test_get_all_holds_data_only(make_vault, lookup):
    make_vault({"db": {"host": "x", "port": {"value": 1, "type": "num"}}})

    data = lookup("Prod").get_group("db").get_all()
    assert data == {"host": "x", "port": 1}

    data["host"] = "changed"
    assert lookup("Prod").get_group("db").host == "x"


def test_properties_named_like_methods(make_vault, lookup):
    make_vault({"odd": {"get_all": 1, "getProperty": 2, "plain": 3}})

    group = lookup("Prod").get_group("odd")
    assert group.get_property("get_all") == 1
    assert group["getProperty"] == 2
    assert group.get_all() == {"get_all": 1, "getProperty": 2, "plain": 3}
    # Attribute access finds the method, not the data
    assert callable(group.get_all)


def test_handle_is_read_only(make_vault, lookup):
    make_vault({"db": {"host": "x"}})

    group = lookup("Prod").get_group("db")
    with pytest.raises(AttributeError):
        group.host = "y"
    assert set(group) == {"host"}
    assert len(group) == 1
    assert "host" in group


def test_handle_follows_redeploy(make_vault, lookup):
    old = make_vault({"db": {"host": "old"}}, node_id="v-old")
    vault = lookup("Prod")
    assert vault.get_group("db").host == "old"

    old.close()
    make_vault({"db": {"host": "new"}}, node_id="v-new")
    assert vault.get_group("db").host == "new"


def test_handle_after_teardown(make_vault, lookup):
    vault_node = make_vault({"db": {"host": "x"}})
    vault = lookup("Prod")

    vault_node.close()
    with pytest.raises(VaultNotFound):
        vault.get_group("db")


def test_duplicate_names_resolve_to_first_registered(make_vault, lookup, caplog):
    caplog.set_level(logging.WARNING, logger="flowvault")
    make_vault({"db": {"host": "first"}}, node_id="a")
    make_vault({"db": {"host": "second"}}, node_id="b")

    assert "ambiguous" in caplog.text
    assert lookup("Prod").get_group("db").host == "first"


def test_handle_reads_as_mapping(make_vault, lookup):
    make_vault({"db": {"host": "x", "port": {"value": 1, "type": "num"}, "keys": 3}})

    group = lookup("Prod").get_group("db")
    assert sorted(group.keys()) == ["host", "keys", "port"]
    assert dict(group) == {"host": "x", "port": 1, "keys": 3}
    assert group["keys"] == 3
