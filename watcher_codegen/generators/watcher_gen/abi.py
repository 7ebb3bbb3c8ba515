"""Contract artifact loading.

Turns ABI functions and solc storage layouts into function descriptors for the
query and entity builders.
"""
import json
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

from watcher_codegen.core.errors import ConfigError
from watcher_codegen.generators.watcher_gen.types import (
    ArrayTypeName,
    ElementaryTypeName,
    FunctionDescriptor,
    MappingTypeName,
    Mode,
    Param,
    ReturnDeclaration,
    StateVariableKind,
    TypeName,
)

log = logging.getLogger(__name__)

READ_ONLY_MUTABILITY = {"view", "pure"}
USER_DEFINED_TYPE = re.compile(r"\b(struct|contract|enum)\s")
_ELEMENTARY = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
# solc labels `address payable` variables with the mutability suffix
_PAYABLE_SUFFIX = re.compile(r"\s+payable$")


@dataclass
class ContractArtifact:
    abi: List[Dict[str, Any]]
    storage_layout: Optional[Dict[str, Any]] = None


def parse_type_name(text: str) -> TypeName:
    """
    Parse a Solidity type string into a type-name variant.

    Examples: "uint256", "bytes32[]", "address[4]",
    "mapping(address => mapping(address => uint256))".
    """
    text = text.strip()

    if text.endswith("]"):
        open_at = text.rfind("[")
        if open_at <= 0:
            raise ConfigError(f"Invalid array type {text!r}")
        dimension = text[open_at + 1:-1].strip()
        if dimension and not dimension.isdigit():
            raise ConfigError(f"Invalid array length in {text!r}")
        return ArrayTypeName(
            base_type_name=parse_type_name(text[:open_at]),
            length=int(dimension) if dimension else None,
        )

    if text.startswith("mapping(") and text.endswith(")"):
        inner = text[len("mapping("):-1]
        key, sep, value = inner.partition("=>")
        if not sep:
            raise ConfigError(f"Invalid mapping type {text!r}")
        key_type = parse_type_name(key)
        if not isinstance(key_type, ElementaryTypeName):
            raise ConfigError(f"Mapping key must be an elementary type in {text!r}")
        return MappingTypeName(key_type=key_type, value_type=parse_type_name(value))

    text = _PAYABLE_SUFFIX.sub("", text)
    if not _ELEMENTARY.match(text):
        raise ConfigError(f"Invalid type name {text!r}")
    return ElementaryTypeName(text)


def _is_read_only(entry: Dict[str, Any]) -> bool:
    return entry.get("stateMutability") in READ_ONLY_MUTABILITY or entry.get("constant") is True


def _uses_tuple(entries: List[Dict[str, Any]]) -> bool:
    return any(entry.get("type", "").startswith("tuple") for entry in entries)


def functions_from_abi(abi: List[Dict[str, Any]]) -> List[FunctionDescriptor]:
    """Read-only ABI functions as eth_call function descriptors, in ABI order."""
    functions = []
    for entry in abi:
        if entry.get("type") != "function" or not _is_read_only(entry):
            continue

        name = entry.get("name")
        if not name:
            raise ConfigError("ABI function entry without a name")

        inputs = entry.get("inputs", [])
        outputs = entry.get("outputs", [])
        if _uses_tuple(inputs) or _uses_tuple(outputs):
            log.warning("Skipping function %s: tuple types are not supported", name, extra={"stage": "abi"})
            continue

        params = tuple(
            Param(name=arg.get("name") or f"arg{index}", type=arg["type"])
            for index, arg in enumerate(inputs)
        )
        returns = tuple(
            ReturnDeclaration(name=out.get("name") or f"value{index}", type_name=parse_type_name(out["type"]))
            for index, out in enumerate(outputs)
        )
        functions.append(FunctionDescriptor(name=name, mode=Mode.ETH_CALL, params=params, returns=returns))

    return functions


def state_variables_from_layout(storage_layout: Dict[str, Any]) -> List[FunctionDescriptor]:
    """
    Storage-mode function descriptors from a solc storageLayout.

    Elementary variables become parameterless queries; mappings take one
    `key<i>` parameter per mapping level and return the full mapping type,
    which the builders unwrap.
    """
    types = storage_layout.get("types") or {}
    functions = []
    for variable in storage_layout.get("storage", []):
        name = variable.get("label")
        type_id = variable.get("type")
        if not name or not type_id:
            raise ConfigError("storageLayout entry needs 'label' and 'type'")

        label = types.get(type_id, {}).get("label")
        if label is None:
            raise ConfigError(f"storageLayout has no type entry for {type_id!r}")

        if USER_DEFINED_TYPE.search(label):
            log.warning("Skipping state variable %s: user defined type %s", name, label, extra={"stage": "abi"})
            continue

        type_name = parse_type_name(label)
        if isinstance(type_name, ArrayTypeName):
            log.warning("Skipping state variable %s: array state variables are not supported", name,
                        extra={"stage": "abi"})
            continue

        params = []
        kind = StateVariableKind.ELEMENTARY
        value_type = type_name
        while isinstance(value_type, MappingTypeName):
            kind = StateVariableKind.MAPPING
            params.append(Param(name=f"key{len(params)}", type=value_type.key_type.name))
            value_type = value_type.value_type

        functions.append(FunctionDescriptor(
            name=name,
            mode=Mode.STORAGE,
            params=tuple(params),
            returns=(ReturnDeclaration(name="value", type_name=type_name),),
            state_variable_kind=kind,
        ))

    return functions


def load_contract_artifact(path: Path, storage_layout_path: Optional[Path] = None) -> ContractArtifact:
    """
    Load an ABI file.

    Accepts a bare ABI array or a compiler artifact object with an "abi" key
    and, optionally, a "storageLayout" key. A separate storage layout file
    takes precedence over one embedded in the artifact.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Could not read contract artifact {path}: {e}") from e

    if isinstance(data, list):
        artifact = ContractArtifact(abi=data)
    elif isinstance(data, dict) and isinstance(data.get("abi"), list):
        artifact = ContractArtifact(abi=data["abi"], storage_layout=data.get("storageLayout"))
    else:
        raise ConfigError(f"Contract artifact {path} has no ABI")

    if storage_layout_path is not None:
        try:
            with open(storage_layout_path, "r", encoding="utf-8") as f:
                artifact.storage_layout = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigError(f"Could not read storage layout {storage_layout_path}: {e}") from e

    return artifact
