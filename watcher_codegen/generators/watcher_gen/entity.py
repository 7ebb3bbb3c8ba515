"""Entity descriptors for the generated watcher's database layer."""
import dataclasses
import logging
from typing import Callable, FrozenSet, Iterable, List, Optional, Sequence

from watcher_codegen.core.config import settings
from watcher_codegen.core.errors import EntityNameCollisionError
from watcher_codegen.generators.watcher_gen.fixed_tables import load_system_entities
from watcher_codegen.generators.watcher_gen.render_entity import render_entity
from watcher_codegen.generators.watcher_gen.schema import FieldDef, ObjectTypeDef, SubgraphSchema
from watcher_codegen.generators.watcher_gen.type_mappings import (
    ADDRESS_LENGTH,
    ADDRESS_SOL_TYPE,
    BIGINT_TS_TYPE,
    DECIMAL_TS_TYPE,
    HASH_LENGTH,
    array_suffix,
    get_base_type,
    get_gql_for_sol,
    get_pg_for_ts,
    get_ts_for_gql,
    is_array_type,
    unwrap_mapping,
)
from watcher_codegen.generators.watcher_gen.types import (
    TRANSFORMER_CAPABILITIES,
    Capability,
    ColumnDescriptor,
    ColumnType,
    EntityDescriptor,
    GeneratedFile,
    IndexDescriptor,
    Param,
    RelationDescriptor,
    ReturnDeclaration,
    Transformer,
)
from watcher_codegen.generators.watcher_gen.utils import derive_entity_names

log = logging.getLogger(__name__)

# Columns every schema entity already has; same-named schema fields get a leading underscore.
RESERVED_SUBGRAPH_COLUMNS = ("blockHash", "blockNumber")

BIGINT_TRANSFORMERS = {
    BIGINT_TS_TYPE: Transformer.BIGINT,
    f"{BIGINT_TS_TYPE}[]": Transformer.BIGINT_ARRAY,
}
DECIMAL_TRANSFORMERS = {
    DECIMAL_TS_TYPE: Transformer.DECIMAL,
    f"{DECIMAL_TS_TYPE}[]": Transformer.DECIMAL_ARRAY,
}


def add_transformers(columns: Sequence[ColumnDescriptor], transformers) -> List[ColumnDescriptor]:
    """Annotate non-enum columns whose TypeScript type has a transformer in `transformers`."""
    result = []
    for column in columns:
        transformer = None if column.is_enum else transformers.get(column.ts_type)
        if transformer is not None:
            column = dataclasses.replace(column, transformer=transformer)
        result.append(column)
    return result


def compute_capabilities(columns: Iterable[ColumnDescriptor]) -> FrozenSet[Capability]:
    capabilities = set()
    for column in columns:
        if column.transformer is not None:
            capabilities.add(TRANSFORMER_CAPABILITIES[column.transformer])
        if column.transformer in (Transformer.DECIMAL, Transformer.DECIMAL_ARRAY):
            capabilities.add(Capability.DECIMAL_TYPE)
    return frozenset(capabilities)


def _query_common_columns() -> List[ColumnDescriptor]:
    return [
        ColumnDescriptor(name="id", ts_type="number", column_type=ColumnType.PRIMARY_GENERATED),
        ColumnDescriptor(name="blockHash", ts_type="string", pg_type="varchar", length=HASH_LENGTH),
        ColumnDescriptor(name="blockNumber", ts_type="number", pg_type="integer"),
        ColumnDescriptor(name="contractAddress", ts_type="string", pg_type="varchar", length=ADDRESS_LENGTH),
    ]


def _subgraph_common_columns() -> List[ColumnDescriptor]:
    return [
        ColumnDescriptor(name="id", ts_type="string", pg_type="varchar", column_type=ColumnType.PRIMARY),
        ColumnDescriptor(
            name="blockHash", ts_type="string", pg_type="varchar",
            column_type=ColumnType.PRIMARY, length=HASH_LENGTH,
        ),
        ColumnDescriptor(name="blockNumber", ts_type="number", pg_type="integer"),
    ]


def param_column(param: Param) -> ColumnDescriptor:
    ts_type = get_ts_for_gql(get_gql_for_sol(param.type))
    return ColumnDescriptor(
        name=param.name,
        ts_type=ts_type,
        pg_type=get_pg_for_ts(ts_type),
        length=ADDRESS_LENGTH if param.type == ADDRESS_SOL_TYPE else None,
    )


def return_column(return_parameter: ReturnDeclaration, name: str) -> ColumnDescriptor:
    type_name = unwrap_mapping(return_parameter.type_name, return_parameter.name)
    ts_type = get_ts_for_gql(get_gql_for_sol(get_base_type(type_name)))
    pg_type = get_pg_for_ts(ts_type)
    is_array = is_array_type(type_name)
    return ColumnDescriptor(
        name=name,
        ts_type=array_suffix(ts_type, is_array),
        pg_type=pg_type,
        array=is_array,
    )


def subgraph_field_column(schema: SubgraphSchema, field: FieldDef) -> ColumnDescriptor:
    name = field.name
    if name in RESERVED_SUBGRAPH_COLUMNS:
        name = f"_{name}"

    type_name = field.type.type_name
    if schema.is_enum_type(type_name):
        return ColumnDescriptor(
            name=name,
            ts_type=array_suffix(type_name, field.type.array),
            is_enum=True,
            array=field.type.array,
            nullable=field.type.nullable,
        )

    if schema.is_object_type(type_name):
        # Stored relations hold the related entity's id.
        ts_type = "string"
    else:
        ts_type = get_ts_for_gql(type_name)

    return ColumnDescriptor(
        name=name,
        ts_type=array_suffix(ts_type, field.type.array),
        pg_type=get_pg_for_ts(ts_type),
        array=field.type.array,
        nullable=field.type.nullable,
    )


def build_subgraph_entity(schema: SubgraphSchema, def_: ObjectTypeDef) -> EntityDescriptor:
    columns = _subgraph_common_columns()
    relations: List[RelationDescriptor] = []

    for field in def_.fields:
        relation = schema.resolve_relation(field)
        if relation is not None:
            relations.append(relation)

        # Derived fields are resolved by reverse lookup and never persisted.
        if field.is_derived or field.name == "id":
            continue
        columns.append(subgraph_field_column(schema, field))

    columns.append(ColumnDescriptor(name="isPruned", ts_type="boolean", pg_type="boolean", default=False))

    columns = add_transformers(columns, DECIMAL_TRANSFORMERS)
    columns = add_transformers(columns, BIGINT_TRANSFORMERS)

    return EntityDescriptor(
        class_name=def_.name,
        columns=tuple(columns),
        indexes=(IndexDescriptor(columns=("blockNumber",)),),
        relations=tuple(relations),
        capabilities=compute_capabilities(columns),
    )


class Entity:
    """Accumulates entity descriptors for one generation run."""

    def __init__(self):
        self._entities: List[EntityDescriptor] = []
        self._query_names: List[str] = []
        self._has_subgraph_schema = False

    @property
    def entities(self) -> List[EntityDescriptor]:
        return list(self._entities)

    def add_query(self, name: str, params: Sequence[Param], return_parameters: Sequence[ReturnDeclaration]) -> None:
        """
        Create an entity from a query and store it to be passed to the template.

        Args:
            name: Name of the query
            params: Parameters to the query, typed with Solidity types
            return_parameters: Return declarations of the query
        """
        if name in self._query_names:
            return

        names = derive_entity_names(name)
        columns = _query_common_columns()
        columns.extend(param_column(param) for param in params)

        multiple = len(return_parameters) > 1
        columns.extend(
            return_column(return_parameter, f"value{index}" if multiple else "value")
            for index, return_parameter in enumerate(return_parameters)
        )

        columns.append(ColumnDescriptor(name="proof", ts_type="string", pg_type="text", nullable=True))
        columns = add_transformers(columns, BIGINT_TRANSFORMERS)

        index = IndexDescriptor(
            columns=("blockHash", "contractAddress", *(param.name for param in params)),
            unique=True,
        )
        self._entities.append(EntityDescriptor(
            class_name=names.entity_name,
            columns=tuple(columns),
            indexes=(index,),
            capabilities=compute_capabilities(columns),
        ))
        self._query_names.append(name)
        log.debug("Added query entity %s", names.entity_name, extra={"stage": "entities"})

    def add_subgraph_entities(self, schema: SubgraphSchema) -> None:
        self._has_subgraph_schema = True
        for def_ in schema.object_types:
            self._entities.append(build_subgraph_entity(schema, def_))
            log.debug("Added subgraph entity %s", def_.name, extra={"stage": "entities"})

    def all_entities(self, include_frothy: Optional[bool] = None) -> List[EntityDescriptor]:
        """Builder entities followed by the system tables, with class names checked for collisions."""
        if include_frothy is None:
            include_frothy = self._has_subgraph_schema

        entities = self._entities + load_system_entities(include_frothy)

        seen = set()
        for entity in entities:
            if entity.class_name in seen:
                raise EntityNameCollisionError(entity.class_name)
            seen.add(entity.class_name)
        return entities

    def export_entities(
        self,
        render: Optional[Callable[[EntityDescriptor], str]] = None,
        include_frothy: Optional[bool] = None,
    ) -> List[GeneratedFile]:
        """Render one file per entity. Paths are relative to the entity directory."""
        return render_entity_files(self.all_entities(include_frothy), render)


def render_entity_files(
    entities: Iterable[EntityDescriptor],
    render: Optional[Callable[[EntityDescriptor], str]] = None,
) -> List[GeneratedFile]:
    render = render or render_entity
    files = [
        GeneratedFile(path=f"{entity.class_name}{settings.entity_file_extension}", content=render(entity))
        for entity in entities
    ]
    log.info("Rendered %d entities", len(files), extra={"stage": "entities"})
    return files
