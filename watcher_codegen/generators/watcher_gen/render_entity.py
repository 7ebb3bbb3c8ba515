"""TypeORM entity rendering (Jinja2-free)."""
from typing import List

from watcher_codegen.core.config import settings
from watcher_codegen.generators.watcher_gen.types import (
    Capability,
    ColumnDescriptor,
    ColumnType,
    EntityDescriptor,
    IndexDescriptor,
    Transformer,
)

TRANSFORMER_IMPORT_ORDER = [
    (Capability.BIGINT_TRANSFORMER, Transformer.BIGINT),
    (Capability.BIGINT_ARRAY_TRANSFORMER, Transformer.BIGINT_ARRAY),
    (Capability.DECIMAL_TRANSFORMER, Transformer.DECIMAL),
    (Capability.DECIMAL_ARRAY_TRANSFORMER, Transformer.DECIMAL_ARRAY),
]


def _ts_literal(value) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    return f"'{value}'"


def _column_options(column: ColumnDescriptor) -> List[str]:
    options = []
    if column.is_enum:
        enum_name = column.ts_type[:-2] if column.array else column.ts_type
        options.append("type: 'enum'")
        options.append(f"enum: {enum_name}")
    if column.length is not None:
        options.append(f"length: {column.length}")
    if column.array:
        options.append("array: true")
    if column.nullable:
        options.append("nullable: true")
    if column.default is not None:
        options.append(f"default: {_ts_literal(column.default)}")
    if column.transformer is not None:
        options.append(f"transformer: {column.transformer.value}")
    return options


def render_column_decorator(column: ColumnDescriptor) -> str:
    """Render the decorator line for one column."""
    if column.column_type is ColumnType.MANY_TO_ONE:
        args = f"() => {column.related_entity}"
        if column.on_delete:
            args += f", {{ onDelete: {_ts_literal(column.on_delete)} }}"
        return f"@ManyToOne({args})"

    args = []
    if column.pg_type is not None and column.column_type is not ColumnType.PRIMARY_GENERATED:
        args.append(_ts_literal(column.pg_type))
    options = _column_options(column)
    if options:
        args.append("{ " + ", ".join(options) + " }")
    return f"@{column.column_type.value}({', '.join(args)})"


def render_index_decorator(index: IndexDescriptor) -> str:
    columns = ", ".join(_ts_literal(name) for name in index.columns)
    if index.unique:
        return f"@Index([{columns}], {{ unique: true }})"
    return f"@Index([{columns}])"


def render_imports(entity: EntityDescriptor) -> List[str]:
    typeorm_imports = ["Entity"]
    for column in entity.columns:
        if column.column_type.value not in typeorm_imports:
            typeorm_imports.append(column.column_type.value)
    if entity.indexes:
        typeorm_imports.append("Index")

    lines = [f"import {{ {', '.join(typeorm_imports)} }} from 'typeorm';"]

    if Capability.DECIMAL_TYPE in entity.capabilities:
        lines.append("import { Decimal } from 'decimal.js';")

    transformers = [
        transformer.value
        for capability, transformer in TRANSFORMER_IMPORT_ORDER
        if capability in entity.capabilities
    ]
    if transformers:
        lines.append(f"import {{ {', '.join(transformers)} }} from '{settings.util_package}';")

    if entity.enum_types:
        lines.append(f"import {{ {', '.join(entity.enum_types)} }} from '../types';")

    related = []
    for column in entity.columns:
        if column.related_entity and column.related_entity not in related:
            related.append(column.related_entity)
    for name in related:
        lines.append(f"import {{ {name} }} from './{name}';")

    return lines


def render_entity(entity: EntityDescriptor) -> str:
    """Generate a TypeORM entity class for an entity descriptor."""
    lines = render_imports(entity)
    lines.append("")
    lines.append("@Entity()")
    for index in entity.indexes:
        lines.append(render_index_decorator(index))
    lines.append(f"export class {entity.class_name} {{")

    for position, column in enumerate(entity.columns):
        if position:
            lines.append("")
        lines.append(f"  {render_column_decorator(column)}")
        lines.append(f"    {column.name}!: {column.ts_type};")

    lines.append("}")
    lines.append("")
    return "\n".join(lines)
