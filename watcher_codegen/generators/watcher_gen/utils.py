"""Utility functions for watcher generation."""
from typing import NamedTuple


class EntityNames(NamedTuple):
    entity_name: str
    get_query_name: str
    save_query_name: str


def capitalize_first(name: str) -> str:
    """Upper-case the first character only (unlike str.capitalize)."""
    return name[:1].upper() + name[1:]


def derive_entity_names(name: str) -> EntityNames:
    """
    Derive entity class and accessor names from a query name.

    eth_call queries: capitalize the first letter (balanceOf -> BalanceOf).
    Storage queries: keep the leading underscore and capitalize the second
    letter (_balances -> _Balances, _getBalances, _saveBalances).
    """
    if name.startswith("_"):
        capitalized = capitalize_first(name[1:])
        return EntityNames(f"_{capitalized}", f"_get{capitalized}", f"_save{capitalized}")

    capitalized = capitalize_first(name)
    return EntityNames(capitalized, f"get{capitalized}", f"save{capitalized}")
