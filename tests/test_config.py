"""Tests for run configuration loading."""
from pathlib import Path

import pytest

from watcher_codegen.core.errors import ConfigError
from watcher_codegen.schemas.config import CodegenConfig, load_config

FIXTURES = Path(__file__).parent / "fixtures" / "token"


def test_load_fixture_config():
    config = load_config(FIXTURES / "codegen.yaml")

    assert config.mode == "all"
    assert config.includes_eth_call and config.includes_storage
    contract, = config.contracts
    assert contract.name == "ERC20"
    assert contract.path == FIXTURES / "ERC20.json"
    assert contract.storage_layout_path is None
    assert config.output_folder == FIXTURES / "out"
    assert config.subgraph_path == FIXTURES / "schema.graphql"


def test_defaults():
    config = CodegenConfig()
    assert config.contracts == []
    assert config.subgraph_path is None
    assert config.mode == "all"


@pytest.mark.parametrize("mode, eth_call, storage", [
    ("eth_call", True, False),
    ("storage", False, True),
    ("none", False, False),
])
def test_mode_flags(mode, eth_call, storage):
    config = CodegenConfig(mode=mode)
    assert config.includes_eth_call is eth_call
    assert config.includes_storage is storage


def test_absolute_paths_are_kept(tmp_path):
    abi_path = tmp_path / "abi.json"
    config_path = tmp_path / "nested" / "codegen.yaml"
    config_path.parent.mkdir()
    config_path.write_text(
        f"contracts:\n  - name: A\n    path: {abi_path}\n    kind: A\n", encoding="utf-8"
    )
    assert load_config(config_path).contracts[0].path == abi_path


class TestInvalidConfig:
    def test_unknown_mode(self, tmp_path):
        path = tmp_path / "codegen.yaml"
        path.write_text("mode: everything\n", encoding="utf-8")
        with pytest.raises(ConfigError):
            load_config(path)

    def test_duplicate_contract_names(self, tmp_path):
        path = tmp_path / "codegen.yaml"
        path.write_text(
            "contracts:\n"
            "  - {name: A, path: a.json, kind: A}\n"
            "  - {name: A, path: b.json, kind: A}\n",
            encoding="utf-8",
        )
        with pytest.raises(ConfigError):
            load_config(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError):
            load_config(tmp_path / "missing.yaml")
