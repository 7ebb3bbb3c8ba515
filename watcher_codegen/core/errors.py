"""Error taxonomy for a generation run.

Every error here is fatal: it propagates to the top of the run and nothing is
written to disk.
"""
from typing import Optional


class CodegenError(Exception):
    """Base class for generation failures."""


class UnmappedTypeError(CodegenError):
    """A type has no entry in the relevant mapping table."""

    def __init__(self, type_name: str, table: str):
        self.type_name = type_name
        self.table = table
        super().__init__(f"No {table} mapping for type {type_name!r}")


class MissingTypeInfoError(CodegenError):
    """Structural type information is absent (e.g. a return without a type)."""

    def __init__(self, what: str, name: Optional[str] = None):
        self.what = what
        self.name = name
        target = f" for {name!r}" if name else ""
        super().__init__(f"Missing {what}{target}")


class EntityNameCollisionError(CodegenError):
    """Two entities would be emitted under the same class name."""

    def __init__(self, class_name: str):
        self.class_name = class_name
        super().__init__(f"Entity class name {class_name!r} is defined more than once")


class SchemaImportError(CodegenError):
    """The subgraph schema could not be parsed or is malformed."""


class ConfigError(CodegenError):
    """The run configuration or a contract artifact is invalid."""
