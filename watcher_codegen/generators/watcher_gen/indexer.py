"""Query descriptors for the generated indexer."""
import logging
from typing import Any, Iterable, List, Optional, Sequence

from watcher_codegen.generators.watcher_gen.schema import SubgraphSchema
from watcher_codegen.generators.watcher_gen.type_mappings import (
    array_suffix,
    get_base_type,
    get_gql_for_sol,
    get_ts_for_gql,
    is_array_type,
    unwrap_mapping,
)
from watcher_codegen.generators.watcher_gen.types import (
    FunctionDescriptor,
    IndexerDescriptor,
    Mode,
    Param,
    QueryDescriptor,
    ReturnDeclaration,
    ReturnType,
    StateVariableKind,
    SubgraphEntitySummary,
    SubgraphField,
)
from watcher_codegen.generators.watcher_gen.utils import derive_entity_names

log = logging.getLogger(__name__)


def map_return_type(return_parameter: ReturnDeclaration) -> ReturnType:
    """Map a return declaration to its TypeScript type, unwrapping mappings first."""
    type_name = unwrap_mapping(return_parameter.type_name, return_parameter.name)
    ts_type = get_ts_for_gql(get_gql_for_sol(get_base_type(type_name)))
    is_array = is_array_type(type_name)
    return ReturnType(type=array_suffix(ts_type, is_array), is_array=is_array)


def map_param(param: Param) -> Param:
    ts_type = get_ts_for_gql(get_gql_for_sol(param.type))
    return Param(name=param.name, type=ts_type, source_type=param.type)


class Indexer:
    """Accumulates query descriptors and run flags for one generation run."""

    def __init__(self):
        self._queries: List[QueryDescriptor] = []
        self._subgraph_entities: List[SubgraphEntitySummary] = []
        self.has_state_variable_elementary_type = False
        self.has_state_variable_mapping_type = False

    @property
    def queries(self) -> List[QueryDescriptor]:
        return list(self._queries)

    def has_query(self, name: str) -> bool:
        return any(query.name == name for query in self._queries)

    def add_query(
        self,
        contract: str,
        mode: Mode,
        name: str,
        params: Sequence[Param],
        return_parameters: Sequence[ReturnDeclaration],
        state_variable_kind: Optional[StateVariableKind] = None,
    ) -> None:
        """
        Store the query to be passed to the template.

        Args:
            contract: Contract the query belongs to
            mode: Code generation mode (eth_call or storage)
            name: Name of the query
            params: Parameters to the query, typed with Solidity types
            return_parameters: Return declarations of the query
            state_variable_kind: Kind of the state variable for storage queries
        """
        # First registration wins.
        if self.has_query(name):
            log.debug("Query %s already added, skipping", name, extra={"contract": contract, "stage": "queries"})
            return

        return_types = tuple(map_return_type(return_parameter) for return_parameter in return_parameters)
        mapped_params = tuple(map_param(param) for param in params)
        names = derive_entity_names(name)

        if state_variable_kind is not None:
            state_variable_kind = StateVariableKind(state_variable_kind)
            if state_variable_kind is StateVariableKind.ELEMENTARY:
                self.has_state_variable_elementary_type = True
            elif state_variable_kind is StateVariableKind.MAPPING:
                self.has_state_variable_mapping_type = True

        self._queries.append(QueryDescriptor(
            name=name,
            entity_name=names.entity_name,
            get_query_name=names.get_query_name,
            save_query_name=names.save_query_name,
            params=mapped_params,
            return_types=return_types,
            mode=Mode(mode),
            contract=contract,
            state_variable_kind=state_variable_kind,
        ))
        log.debug("Added query %s", name, extra={"contract": contract, "stage": "queries"})

    def add_function(self, contract: str, function: FunctionDescriptor) -> None:
        self.add_query(
            contract,
            function.mode,
            function.name,
            function.params,
            function.returns,
            function.state_variable_kind,
        )

    def add_functions(self, contract: str, functions: Iterable[FunctionDescriptor]) -> None:
        for function in functions:
            self.add_function(contract, function)

    def add_subgraph_entities(self, schema: SubgraphSchema) -> None:
        """Record relation and entity-type maps for every object type in the schema."""
        for def_ in schema.object_types:
            columns = []
            relations = []
            for field in def_.fields:
                relation = schema.resolve_relation(field)
                column = SubgraphField(
                    name=field.name,
                    type=field.type.type_name,
                    is_array=field.type.array,
                    is_relation=relation is not None,
                    is_derived=relation is not None and relation.is_derived,
                    derived_from=relation.derived_from if relation is not None else None,
                )
                if relation is not None:
                    relations.append(column)
                columns.append(column)

            self._subgraph_entities.append(SubgraphEntitySummary(
                class_name=def_.name,
                columns=tuple(columns),
                relations=tuple(relations),
            ))

    def export_indexer(self, contracts: Iterable[Any] = ()) -> IndexerDescriptor:
        return IndexerDescriptor(
            contracts=tuple(contracts),
            queries=tuple(self._queries),
            subgraph_entities=tuple(self._subgraph_entities),
            has_state_variable_elementary_type=self.has_state_variable_elementary_type,
            has_state_variable_mapping_type=self.has_state_variable_mapping_type,
        )
