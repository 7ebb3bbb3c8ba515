"""Type mappings between Solidity, GraphQL, TypeScript and Postgres.

Each table is closed: a lookup that misses raises UnmappedTypeError and aborts
the run. Structural shape (arrays, mappings) is handled separately from the
tables so that only element types are ever looked up.
"""
from typing import Dict, NamedTuple, Optional

from watcher_codegen.core.errors import MissingTypeInfoError, UnmappedTypeError
from watcher_codegen.generators.watcher_gen.types import (
    ArrayTypeName,
    ElementaryTypeName,
    MappingTypeName,
    TypeName,
)


def _build_sol_to_gql() -> Dict[str, str]:
    mapping = {
        "bool": "Boolean",
        "address": "String",
        "string": "String",
        "bytes": "String",
        "int": "BigInt",
        "uint": "BigInt",
    }
    for bits in range(8, 257, 8):
        gql_type = "Int" if bits <= 32 else "BigInt"
        mapping[f"int{bits}"] = gql_type
        mapping[f"uint{bits}"] = gql_type
    for size in range(1, 33):
        mapping[f"bytes{size}"] = "String"
    return mapping


_SOL_TO_GQL: Dict[str, str] = _build_sol_to_gql()

_GQL_TO_TS: Dict[str, str] = {
    "String": "string",
    "ID": "string",
    "Bytes": "string",
    "Int": "number",
    "Float": "number",
    "BigInt": "bigint",
    "Boolean": "boolean",
    "BigDecimal": "Decimal",
}

_TS_TO_PG: Dict[str, str] = {
    "string": "varchar",
    "number": "integer",
    "bigint": "numeric",
    "boolean": "boolean",
    "Decimal": "numeric",
}

BIGINT_TS_TYPE = "bigint"
DECIMAL_TS_TYPE = "Decimal"
ADDRESS_SOL_TYPE = "address"
ADDRESS_LENGTH = 42
HASH_LENGTH = 66


class MappedType(NamedTuple):
    gql_type: str
    ts_type: str
    pg_type: str


def get_gql_for_sol(sol_type: str) -> str:
    try:
        return _SOL_TO_GQL[sol_type]
    except KeyError:
        raise UnmappedTypeError(sol_type, "Solidity to GraphQL") from None


def get_ts_for_gql(gql_type: str) -> str:
    try:
        return _GQL_TO_TS[gql_type]
    except KeyError:
        raise UnmappedTypeError(gql_type, "GraphQL to TypeScript") from None


def get_pg_for_ts(ts_type: str) -> str:
    try:
        return _TS_TO_PG[ts_type]
    except KeyError:
        raise UnmappedTypeError(ts_type, "TypeScript to Postgres") from None


def map_sol_type(sol_type: str) -> MappedType:
    """Run a Solidity elementary type through the whole chain."""
    gql_type = get_gql_for_sol(sol_type)
    ts_type = get_ts_for_gql(gql_type)
    return MappedType(gql_type, ts_type, get_pg_for_ts(ts_type))


def unwrap_mapping(type_name: Optional[TypeName], name: Optional[str] = None) -> TypeName:
    """Follow mapping value types down to the first non-mapping type."""
    if type_name is None:
        raise MissingTypeInfoError("type name", name)
    while isinstance(type_name, MappingTypeName):
        type_name = type_name.value_type
        if type_name is None:
            raise MissingTypeInfoError("mapping value type", name)
    return type_name


def get_base_type(type_name: TypeName) -> str:
    """Element type name, ignoring any array dimensions."""
    if isinstance(type_name, ElementaryTypeName):
        return type_name.name
    if isinstance(type_name, ArrayTypeName):
        if type_name.base_type_name is None:
            raise MissingTypeInfoError("array base type")
        return get_base_type(type_name.base_type_name)
    raise MissingTypeInfoError("elementary base type", repr(type_name))


def is_array_type(type_name: TypeName) -> bool:
    return isinstance(type_name, ArrayTypeName)


def array_suffix(ts_type: str, is_array: bool) -> str:
    return f"{ts_type}[]" if is_array else ts_type
