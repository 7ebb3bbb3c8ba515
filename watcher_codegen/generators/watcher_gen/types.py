"""Dataclasses for watcher generation."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Optional, Tuple, Union


class Mode(str, Enum):
    ETH_CALL = "eth_call"
    STORAGE = "storage"


class StateVariableKind(str, Enum):
    ELEMENTARY = "ElementaryTypeName"
    MAPPING = "Mapping"


# Source type names: a closed set of variants.

@dataclass(frozen=True)
class ElementaryTypeName:
    name: str


@dataclass(frozen=True)
class ArrayTypeName:
    base_type_name: "TypeName"
    length: Optional[int] = None


@dataclass(frozen=True)
class MappingTypeName:
    key_type: ElementaryTypeName
    value_type: "TypeName"


TypeName = Union[ElementaryTypeName, ArrayTypeName, MappingTypeName]


@dataclass(frozen=True)
class Param:
    """Query parameter. `type` is the source type on input, the TypeScript type on descriptors."""
    name: str
    type: str
    source_type: Optional[str] = None


@dataclass(frozen=True)
class ReturnDeclaration:
    name: str
    type_name: Optional[TypeName]


@dataclass(frozen=True)
class FunctionDescriptor:
    """A contract function or state variable exposed as a query."""
    name: str
    mode: Mode
    params: Tuple[Param, ...] = ()
    returns: Tuple[ReturnDeclaration, ...] = ()
    state_variable_kind: Optional[StateVariableKind] = None


@dataclass(frozen=True)
class ReturnType:
    type: str
    is_array: bool


@dataclass(frozen=True)
class QueryDescriptor:
    name: str
    entity_name: str
    get_query_name: str
    save_query_name: str
    params: Tuple[Param, ...]
    return_types: Tuple[ReturnType, ...]
    mode: Mode
    contract: str
    state_variable_kind: Optional[StateVariableKind] = None


class ColumnType(str, Enum):
    PRIMARY_GENERATED = "PrimaryGeneratedColumn"
    PRIMARY = "PrimaryColumn"
    COLUMN = "Column"
    CREATE_DATE = "CreateDateColumn"
    MANY_TO_ONE = "ManyToOne"


class Transformer(str, Enum):
    BIGINT = "bigintTransformer"
    BIGINT_ARRAY = "bigintArrayTransformer"
    DECIMAL = "decimalTransformer"
    DECIMAL_ARRAY = "decimalArrayTransformer"


class Capability(str, Enum):
    """Auxiliary support an entity needs from the rendering step."""
    BIGINT_TRANSFORMER = "bigint_transformer"
    BIGINT_ARRAY_TRANSFORMER = "bigint_array_transformer"
    DECIMAL_TRANSFORMER = "decimal_transformer"
    DECIMAL_ARRAY_TRANSFORMER = "decimal_array_transformer"
    DECIMAL_TYPE = "decimal_type"


TRANSFORMER_CAPABILITIES: Dict[Transformer, Capability] = {
    Transformer.BIGINT: Capability.BIGINT_TRANSFORMER,
    Transformer.BIGINT_ARRAY: Capability.BIGINT_ARRAY_TRANSFORMER,
    Transformer.DECIMAL: Capability.DECIMAL_TRANSFORMER,
    Transformer.DECIMAL_ARRAY: Capability.DECIMAL_ARRAY_TRANSFORMER,
}


@dataclass(frozen=True)
class ColumnDescriptor:
    name: str
    ts_type: str
    pg_type: Optional[str] = None  # None for enum columns
    column_type: ColumnType = ColumnType.COLUMN
    nullable: bool = False
    array: bool = False
    is_enum: bool = False
    length: Optional[int] = None
    default: Any = None
    transformer: Optional[Transformer] = None
    # ManyToOne columns only
    related_entity: Optional[str] = None
    on_delete: Optional[str] = None


@dataclass(frozen=True)
class IndexDescriptor:
    columns: Tuple[str, ...]
    unique: bool = False


class Cardinality(str, Enum):
    SINGLE = "single"
    ARRAY = "array"


class Derivation(str, Enum):
    STORED = "stored"
    COMPUTED = "computed"


@dataclass(frozen=True)
class RelationDescriptor:
    field: str
    related_entity: str
    cardinality: Cardinality = Cardinality.SINGLE
    derivation: Derivation = Derivation.STORED
    derived_from: Optional[str] = None

    @property
    def is_array(self) -> bool:
        return self.cardinality is Cardinality.ARRAY

    @property
    def is_derived(self) -> bool:
        return self.derivation is Derivation.COMPUTED


@dataclass(frozen=True)
class EntityDescriptor:
    class_name: str
    columns: Tuple[ColumnDescriptor, ...]
    indexes: Tuple[IndexDescriptor, ...] = ()
    relations: Tuple[RelationDescriptor, ...] = ()
    capabilities: FrozenSet[Capability] = frozenset()

    @property
    def enum_types(self) -> Tuple[str, ...]:
        """Enum type names referenced by the columns, in column order."""
        names: List[str] = []
        for column in self.columns:
            if column.is_enum:
                base = column.ts_type[:-2] if column.array else column.ts_type
                if base not in names:
                    names.append(base)
        return tuple(names)

    def column_names(self) -> List[str]:
        return [column.name for column in self.columns]


@dataclass(frozen=True)
class SubgraphField:
    """Field summary the generated indexer uses for its relation and entity-type maps."""
    name: str
    type: str
    is_array: bool
    is_relation: bool = False
    is_derived: bool = False
    derived_from: Optional[str] = None


@dataclass(frozen=True)
class SubgraphEntitySummary:
    class_name: str
    columns: Tuple[SubgraphField, ...]
    relations: Tuple[SubgraphField, ...]


@dataclass(frozen=True)
class IndexerDescriptor:
    """Everything the indexer template consumes."""
    contracts: Tuple[Any, ...]
    queries: Tuple[QueryDescriptor, ...]
    subgraph_entities: Tuple[SubgraphEntitySummary, ...]
    has_state_variable_elementary_type: bool
    has_state_variable_mapping_type: bool
    constants: Dict[str, str] = field(default_factory=lambda: {
        "MODE_ETH_CALL": Mode.ETH_CALL.value,
        "MODE_STORAGE": Mode.STORAGE.value,
    })


@dataclass
class GeneratedFile:
    """Represents a generated file."""
    path: str  # Relative path from output directory
    content: str  # File contents
