"""End-to-end tests for watcher generation."""
import shutil
from pathlib import Path

import pytest

from watcher_codegen.core.errors import EntityNameCollisionError, UnmappedTypeError
from watcher_codegen.generators.watcher_gen import entity as entity_module
from watcher_codegen.generators.watcher_gen.generator import generate_watcher
from watcher_codegen.generators.watcher_gen.types import Transformer
from watcher_codegen.schemas.config import load_config

FIXTURES = Path(__file__).parent / "fixtures" / "token"

ETH_CALL_QUERIES = ["balanceOf", "allowance", "decimals", "getReserves", "holders"]
STORAGE_QUERIES = ["_balances", "_allowances", "_totalSupply", "_name"]


@pytest.fixture
def workspace(tmp_path):
    """Copy of the token fixtures the tests can modify."""
    target = tmp_path / "token"
    shutil.copytree(FIXTURES, target)
    return target


def test_generate_full_watcher(workspace, tmp_path):
    config = load_config(workspace / "codegen.yaml")
    out_dir = tmp_path / "generated"

    result = generate_watcher(config, out_dir=out_dir)

    assert [q.name for q in result.queries] == ETH_CALL_QUERIES + STORAGE_QUERIES
    assert result.has_state_variable_elementary_type is True
    assert result.has_state_variable_mapping_type is True
    assert result.indexer.has_state_variable_mapping_type is True
    assert [e.class_name for e in result.indexer.subgraph_entities] == ["Token", "Account"]

    class_names = [e.class_name for e in result.entities]
    assert class_names[:9] == [
        "BalanceOf", "Allowance", "Decimals", "GetReserves", "Holders",
        "_Balances", "_Allowances", "_TotalSupply", "_Name",
    ]
    assert class_names[9:11] == ["Token", "Account"]
    assert class_names[-1] == "FrothyEntity"

    balances = next(e for e in result.entities if e.class_name == "_Balances")
    value = next(c for c in balances.columns if c.name == "value")
    assert value.transformer is Transformer.BIGINT

    written = sorted(p.name for p in (out_dir / "entity").iterdir())
    assert written == sorted(f"{name}.ts" for name in class_names)
    assert "export class _Balances {" in (out_dir / "entity" / "_Balances.ts").read_text(encoding="utf-8")


def test_storage_mode_only(workspace):
    config = load_config(workspace / "codegen.yaml").model_copy(update={"mode": "storage", "subgraph_path": None})

    result = generate_watcher(config, write=False)

    assert [q.name for q in result.queries] == STORAGE_QUERIES
    assert "FrothyEntity" not in [e.class_name for e in result.entities]
    assert result.files[0].path == "entity/_Balances.ts"


def test_eth_call_mode_has_no_state_variable_flags(workspace):
    config = load_config(workspace / "codegen.yaml").model_copy(update={"mode": "eth_call"})

    result = generate_watcher(config, write=False)

    assert result.has_state_variable_elementary_type is False
    assert result.has_state_variable_mapping_type is False


def test_failed_run_writes_nothing(workspace, tmp_path):
    (workspace / "schema.graphql").write_text("type Token @entity { id: ID! at: Timestamp! }", encoding="utf-8")
    config = load_config(workspace / "codegen.yaml")
    out_dir = tmp_path / "generated"

    with pytest.raises(UnmappedTypeError):
        generate_watcher(config, out_dir=out_dir)
    assert not out_dir.exists()


def test_collision_aborts_run(workspace, tmp_path):
    (workspace / "schema.graphql").write_text("type Decimals @entity { id: ID! }", encoding="utf-8")
    config = load_config(workspace / "codegen.yaml")
    out_dir = tmp_path / "generated"

    with pytest.raises(EntityNameCollisionError):
        generate_watcher(config, out_dir=out_dir)
    assert not out_dir.exists()


def test_system_tables_loaded_once_per_run(workspace, monkeypatch):
    calls = []
    original = entity_module.load_system_entities

    def counting_load(include_frothy):
        calls.append(include_frothy)
        return original(include_frothy)

    monkeypatch.setattr(entity_module, "load_system_entities", counting_load)
    result = generate_watcher(load_config(workspace / "codegen.yaml"), write=False)

    assert calls == [True]
    assert [f.path for f in result.files] == [f"entity/{e.class_name}.ts" for e in result.entities]
