"""Tests for entity and accessor naming."""
from watcher_codegen.generators.watcher_gen.utils import capitalize_first, derive_entity_names


def test_eth_call_names():
    names = derive_entity_names("balanceOf")
    assert names.entity_name == "BalanceOf"
    assert names.get_query_name == "getBalanceOf"
    assert names.save_query_name == "saveBalanceOf"


def test_storage_names_keep_underscore():
    names = derive_entity_names("_balances")
    assert names.entity_name == "_Balances"
    assert names.get_query_name == "_getBalances"
    assert names.save_query_name == "_saveBalances"


def test_naming_is_pure():
    assert derive_entity_names("totalSupply") == derive_entity_names("totalSupply")
    assert derive_entity_names("_owner") == derive_entity_names("_owner")


def test_capitalize_first_keeps_rest():
    assert capitalize_first("getReserves") == "GetReserves"
    assert capitalize_first("") == ""
