"""Tests for subgraph schema import and relation resolution."""
from pathlib import Path

import pytest
from graphql import parse

from watcher_codegen.core.errors import SchemaImportError
from watcher_codegen.generators.watcher_gen.schema import (
    FieldType,
    get_field_type,
    load_subgraph_schema,
    parse_subgraph_schema,
)
from watcher_codegen.generators.watcher_gen.types import Cardinality, Derivation

FIXTURES = Path(__file__).parent / "fixtures" / "token"


def _field_type(sdl_type: str) -> FieldType:
    document = parse(f"type T {{ f: {sdl_type} }}")
    return get_field_type(document.definitions[0].fields[0].type)


@pytest.mark.parametrize("sdl_type, expected", [
    ("String", FieldType("String", array=False, nullable=True)),
    ("String!", FieldType("String", array=False, nullable=False)),
    ("[String]", FieldType("String", array=True, nullable=True)),
    ("[String!]", FieldType("String", array=True, nullable=True)),
    ("[String!]!", FieldType("String", array=True, nullable=False)),
])
def test_get_field_type(sdl_type, expected):
    assert _field_type(sdl_type) == expected


def test_parse_fixture_schema():
    schema = load_subgraph_schema(FIXTURES / "schema.graphql")

    assert [t.name for t in schema.object_types] == ["Token", "Account"]
    assert [t.name for t in schema.enum_types] == ["TokenKind"]
    assert schema.enum_types[0].values == ("FUNGIBLE", "NON_FUNGIBLE")
    assert schema.is_object_type("Account")
    assert not schema.is_object_type("TokenKind")
    assert schema.is_enum_type("TokenKind")

    token = schema.object_types[0]
    holders = next(f for f in token.fields if f.name == "holders")
    assert holders.derived_from == "tokens"
    assert holders.is_derived


class TestRelations:
    schema = parse_subgraph_schema("""
        type User @entity {
          id: ID!
          name: String
          profile: Profile
          posts: [Post!]! @derivedFrom(field: "author")
          pinned: Post! @derivedFrom(field: "pinnedBy")
        }
        type Profile @entity { id: ID! }
        type Post @entity { id: ID! author: User! pinnedBy: User }
        enum Role { ADMIN }
    """)

    def _field(self, type_name, field_name):
        def_ = next(t for t in self.schema.object_types if t.name == type_name)
        return next(f for f in def_.fields if f.name == field_name)

    def test_stored_relation(self):
        relation = self.schema.resolve_relation(self._field("User", "profile"))
        assert relation.field == "profile"
        assert relation.related_entity == "Profile"
        assert relation.cardinality is Cardinality.SINGLE
        assert relation.derivation is Derivation.STORED
        assert relation.derived_from is None

    def test_computed_array_relation(self):
        relation = self.schema.resolve_relation(self._field("User", "posts"))
        assert relation.related_entity == "Post"
        assert relation.is_array
        assert relation.is_derived
        assert relation.derived_from == "author"

    def test_computed_single_relation(self):
        relation = self.schema.resolve_relation(self._field("User", "pinned"))
        assert relation.cardinality is Cardinality.SINGLE
        assert relation.derivation is Derivation.COMPUTED
        assert relation.derived_from == "pinnedBy"

    def test_scalar_field_is_not_a_relation(self):
        assert self.schema.resolve_relation(self._field("User", "name")) is None


class TestErrors:
    def test_syntax_error(self):
        with pytest.raises(SchemaImportError):
            parse_subgraph_schema("type Broken {")

    def test_derived_from_without_field(self):
        with pytest.raises(SchemaImportError):
            parse_subgraph_schema("type A { id: ID! bs: [B!]! @derivedFrom } type B { id: ID! }")

    def test_derived_from_with_non_string_field(self):
        with pytest.raises(SchemaImportError):
            parse_subgraph_schema("type A { id: ID! bs: [B!]! @derivedFrom(field: 3) } type B { id: ID! }")

    def test_duplicate_type(self):
        with pytest.raises(SchemaImportError):
            parse_subgraph_schema("type A { id: ID! } enum A { X }")
