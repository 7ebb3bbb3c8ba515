from pydantic import BaseModel, ConfigDict, Field
from typing import Any, List, Literal, Optional


class FixedColumn(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    name: str
    ts_type: str = Field(..., alias="tsType")
    pg_type: Optional[str] = Field(None, alias="pgType")
    column_type: Literal[
        "PrimaryGeneratedColumn", "PrimaryColumn", "Column", "CreateDateColumn", "ManyToOne"
    ] = Field("Column", alias="columnType")
    nullable: bool = False
    array: bool = False
    length: Optional[int] = None
    default: Any = None
    related_entity: Optional[str] = Field(None, alias="relatedEntity")
    on_delete: Optional[str] = Field(None, alias="onDelete")


class FixedIndex(BaseModel):
    model_config = ConfigDict(extra="forbid")

    columns: List[str]
    unique: bool = False


class FixedTable(BaseModel):
    """A system table shipped with the generator, loaded verbatim from YAML."""
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    class_name: str = Field(..., alias="className")
    index_on: List[FixedIndex] = Field(default_factory=list, alias="indexOn")
    columns: List[FixedColumn]
