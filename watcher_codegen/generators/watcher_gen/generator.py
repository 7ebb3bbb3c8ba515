"""Orchestrator for watcher code generation."""
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from watcher_codegen.core.config import settings
from watcher_codegen.generators.watcher_gen.abi import (
    functions_from_abi,
    load_contract_artifact,
    state_variables_from_layout,
)
from watcher_codegen.generators.watcher_gen.entity import Entity, render_entity_files
from watcher_codegen.generators.watcher_gen.indexer import Indexer
from watcher_codegen.generators.watcher_gen.schema import load_subgraph_schema
from watcher_codegen.generators.watcher_gen.types import (
    EntityDescriptor,
    FunctionDescriptor,
    GeneratedFile,
    IndexerDescriptor,
    QueryDescriptor,
)
from watcher_codegen.generators.watcher_gen.writer import write_files
from watcher_codegen.schemas.config import CodegenConfig, ContractConfig

log = logging.getLogger(__name__)


@dataclass
class GenerationResult:
    queries: List[QueryDescriptor]
    entities: List[EntityDescriptor]
    indexer: IndexerDescriptor
    files: List[GeneratedFile]
    has_state_variable_elementary_type: bool
    has_state_variable_mapping_type: bool


def collect_functions(contract: ContractConfig, config: CodegenConfig) -> List[FunctionDescriptor]:
    """Function descriptors for one contract according to the generation mode."""
    artifact = load_contract_artifact(contract.path, contract.storage_layout_path)
    extra = {"contract": contract.name, "stage": "abi"}

    functions = []
    if config.includes_eth_call:
        functions.extend(functions_from_abi(artifact.abi))
    if config.includes_storage:
        if artifact.storage_layout is None:
            log.warning("No storage layout, skipping state variable queries", extra=extra)
        else:
            functions.extend(state_variables_from_layout(artifact.storage_layout))

    log.info("Collected %d queries", len(functions), extra=extra)
    return functions


def generate_watcher(
    config: CodegenConfig,
    out_dir: Optional[Path] = None,
    write: bool = True,
) -> GenerationResult:
    """
    Generate the query and entity layer of a watcher.

    Every descriptor is built and every file rendered before anything is
    written; any CodegenError aborts the run with no output.

    Args:
        config: Validated run configuration
        out_dir: Output directory, defaults to config.output_folder
        write: Write the rendered files to disk

    Returns:
        GenerationResult with descriptors, rendered files and run flags
    """
    indexer = Indexer()
    entity = Entity()

    for contract in config.contracts:
        functions = collect_functions(contract, config)
        indexer.add_functions(contract.name, functions)
        for function in functions:
            entity.add_query(function.name, function.params, function.returns)

    if config.subgraph_path is not None:
        schema = load_subgraph_schema(config.subgraph_path)
        log.info(
            "Loaded subgraph schema: %d object types, %d enum types",
            len(schema.object_types), len(schema.enum_types),
            extra={"stage": "schema"},
        )
        indexer.add_subgraph_entities(schema)
        entity.add_subgraph_entities(schema)

    entities = entity.all_entities()
    files = [
        GeneratedFile(path=f"{settings.entity_dir_name}/{file.path}", content=file.content)
        for file in render_entity_files(entities)
    ]
    indexer_descriptor = indexer.export_indexer(config.contracts)

    if write:
        write_files(files, out_dir or config.output_folder)

    return GenerationResult(
        queries=indexer.queries,
        entities=entities,
        indexer=indexer_descriptor,
        files=files,
        has_state_variable_elementary_type=indexer.has_state_variable_elementary_type,
        has_state_variable_mapping_type=indexer.has_state_variable_mapping_type,
    )
