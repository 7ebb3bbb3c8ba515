from pathlib import Path
from typing import List, Literal, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from watcher_codegen.core.errors import ConfigError

GenerationMode = Literal["eth_call", "storage", "all", "none"]


class ContractConfig(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    name: str = Field(..., examples=["ERC20"])
    path: Path = Field(..., examples=["artifacts/ERC20.json"])
    kind: str = Field(..., examples=["ERC20"])
    storage_layout_path: Optional[Path] = Field(None, alias="storageLayoutPath")


class CodegenConfig(BaseModel):
    """Run configuration, usually read from codegen.yaml."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    contracts: List[ContractConfig] = Field(default_factory=list)
    mode: GenerationMode = "all"
    output_folder: Path = Field(Path("generated-watcher"), alias="outputFolder")
    subgraph_path: Optional[Path] = Field(None, alias="subgraphPath")

    @field_validator("contracts")
    @classmethod
    def unique_contract_names(cls, contracts: List[ContractConfig]) -> List[ContractConfig]:
        names = [contract.name for contract in contracts]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise ValueError(f"duplicate contract names: {', '.join(duplicates)}")
        return contracts

    @property
    def includes_eth_call(self) -> bool:
        return self.mode in ("eth_call", "all")

    @property
    def includes_storage(self) -> bool:
        return self.mode in ("storage", "all")

    def resolve_paths(self, base_dir: Path) -> "CodegenConfig":
        """Copy with relative paths made relative to base_dir."""
        def resolve(path: Optional[Path]) -> Optional[Path]:
            if path is None or path.is_absolute():
                return path
            return base_dir / path

        return self.model_copy(update={
            "contracts": [
                contract.model_copy(update={
                    "path": resolve(contract.path),
                    "storage_layout_path": resolve(contract.storage_layout_path),
                })
                for contract in self.contracts
            ],
            "output_folder": resolve(self.output_folder),
            "subgraph_path": resolve(self.subgraph_path),
        })


def load_config(path: Path) -> CodegenConfig:
    """Read and validate a YAML run configuration."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Could not read config {path}: {e}") from e

    try:
        config = CodegenConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config {path}: {e}") from e

    return config.resolve_paths(path.parent)
