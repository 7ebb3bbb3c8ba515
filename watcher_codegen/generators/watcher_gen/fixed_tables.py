"""System tables every generated watcher carries."""
from pathlib import Path
from typing import List

import yaml
from pydantic import ValidationError

from watcher_codegen.core.errors import ConfigError
from watcher_codegen.generators.watcher_gen.types import (
    ColumnDescriptor,
    ColumnType,
    EntityDescriptor,
    IndexDescriptor,
)
from watcher_codegen.schemas.tables import FixedTable

TABLES_DIR = Path(__file__).parent / "data" / "entities"

SYSTEM_TABLES = [
    "Event",
    "SyncStatus",
    "Contract",
    "BlockProgress",
    "State",
    "StateSyncStatus",
]
FROTHY_TABLE = "FrothyEntity"


def _to_descriptor(table: FixedTable) -> EntityDescriptor:
    columns = tuple(
        ColumnDescriptor(
            name=column.name,
            ts_type=column.ts_type,
            pg_type=column.pg_type,
            column_type=ColumnType(column.column_type),
            nullable=column.nullable,
            array=column.array,
            length=column.length,
            default=column.default,
            related_entity=column.related_entity,
            on_delete=column.on_delete,
        )
        for column in table.columns
    )
    indexes = tuple(IndexDescriptor(columns=tuple(index.columns), unique=index.unique) for index in table.index_on)
    return EntityDescriptor(class_name=table.class_name, columns=columns, indexes=indexes)


def load_fixed_table(name: str, tables_dir: Path = TABLES_DIR) -> EntityDescriptor:
    path = tables_dir / f"{name}.yaml"
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    try:
        table = FixedTable.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid fixed table definition {path}: {e}") from e
    return _to_descriptor(table)


def load_system_entities(include_frothy: bool, tables_dir: Path = TABLES_DIR) -> List[EntityDescriptor]:
    """Load the system tables; FrothyEntity only applies to subgraph watchers."""
    names = list(SYSTEM_TABLES)
    if include_frothy:
        names.append(FROTHY_TABLE)
    return [load_fixed_table(name, tables_dir) for name in names]
