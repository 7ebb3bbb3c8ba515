"""Subgraph schema import.

Parses a subgraph GraphQL SDL document into object-type and enum-type
definitions and resolves relations between object types.
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Tuple

from graphql import GraphQLSyntaxError, parse
from graphql.language import (
    DirectiveNode,
    EnumTypeDefinitionNode,
    FieldDefinitionNode,
    ListTypeNode,
    NonNullTypeNode,
    ObjectTypeDefinitionNode,
    StringValueNode,
    TypeNode,
)

from watcher_codegen.core.errors import SchemaImportError
from watcher_codegen.generators.watcher_gen.types import (
    Cardinality,
    Derivation,
    RelationDescriptor,
)

DERIVED_FROM_DIRECTIVE = "derivedFrom"


@dataclass(frozen=True)
class FieldType:
    type_name: str
    array: bool
    nullable: bool


@dataclass(frozen=True)
class FieldDef:
    name: str
    type: FieldType
    derived_from: Optional[str] = None

    @property
    def is_derived(self) -> bool:
        return self.derived_from is not None


@dataclass(frozen=True)
class ObjectTypeDef:
    name: str
    fields: Tuple[FieldDef, ...]


@dataclass(frozen=True)
class EnumTypeDef:
    name: str
    values: Tuple[str, ...]


@dataclass(frozen=True)
class SubgraphSchema:
    object_types: Tuple[ObjectTypeDef, ...]
    enum_types: Tuple[EnumTypeDef, ...]

    def is_object_type(self, type_name: str) -> bool:
        return any(def_.name == type_name for def_ in self.object_types)

    def is_enum_type(self, type_name: str) -> bool:
        return any(def_.name == type_name for def_ in self.enum_types)

    def resolve_relation(self, field: FieldDef) -> Optional[RelationDescriptor]:
        """Relation for a field whose type is another object type, else None."""
        if not self.is_object_type(field.type.type_name):
            return None

        return RelationDescriptor(
            field=field.name,
            related_entity=field.type.type_name,
            cardinality=Cardinality.ARRAY if field.type.array else Cardinality.SINGLE,
            derivation=Derivation.COMPUTED if field.is_derived else Derivation.STORED,
            derived_from=field.derived_from,
        )


def get_field_type(type_node: TypeNode) -> FieldType:
    """
    Extract (base type name, array, nullable) from a field type node.

    Nullability and array-ness describe the outermost wrapper: `[Token!]!` is
    a non-nullable array of Token, `[Token!]` a nullable one.
    """
    if isinstance(type_node, ListTypeNode):
        return FieldType(get_field_type(type_node.type).type_name, array=True, nullable=True)

    if isinstance(type_node, NonNullTypeNode):
        inner = get_field_type(type_node.type)
        return FieldType(inner.type_name, array=inner.array, nullable=False)

    return FieldType(type_node.name.value, array=False, nullable=True)


def _get_derived_from(directives: Tuple[DirectiveNode, ...], field_name: str) -> Optional[str]:
    for directive in directives:
        if directive.name.value != DERIVED_FROM_DIRECTIVE:
            continue

        arguments = directive.arguments or ()
        argument = next((arg for arg in arguments if arg.name.value == "field"), None)
        if argument is None and arguments:
            argument = arguments[0]
        if argument is None or not isinstance(argument.value, StringValueNode):
            raise SchemaImportError(
                f"@{DERIVED_FROM_DIRECTIVE} on field {field_name!r} needs a string 'field' argument"
            )
        return argument.value.value
    return None


def _to_field_def(node: FieldDefinitionNode) -> FieldDef:
    name = node.name.value
    return FieldDef(
        name=name,
        type=get_field_type(node.type),
        derived_from=_get_derived_from(tuple(node.directives or ()), name),
    )


def parse_subgraph_schema(sdl: str) -> SubgraphSchema:
    """Parse SDL text into object and enum type definitions, in document order."""
    try:
        document = parse(sdl)
    except GraphQLSyntaxError as e:
        raise SchemaImportError(f"Invalid subgraph schema: {e.message}") from e

    object_types = []
    enum_types = []
    seen: Dict[str, str] = {}
    for definition in document.definitions:
        if isinstance(definition, ObjectTypeDefinitionNode):
            kind = "type"
            object_types.append(ObjectTypeDef(
                name=definition.name.value,
                fields=tuple(_to_field_def(field) for field in definition.fields or ()),
            ))
        elif isinstance(definition, EnumTypeDefinitionNode):
            kind = "enum"
            enum_types.append(EnumTypeDef(
                name=definition.name.value,
                values=tuple(value.name.value for value in definition.values or ()),
            ))
        else:
            continue

        name = definition.name.value
        if name in seen:
            raise SchemaImportError(f"Duplicate definition of {kind} {name!r}")
        seen[name] = kind

    return SubgraphSchema(object_types=tuple(object_types), enum_types=tuple(enum_types))


def load_subgraph_schema(path: Path) -> SubgraphSchema:
    with open(path, "r", encoding="utf-8") as f:
        return parse_subgraph_schema(f.read())
