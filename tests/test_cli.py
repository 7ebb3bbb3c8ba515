"""Tests for the watcher-codegen command."""
import shutil
from pathlib import Path

from watcher_codegen.cli import main

FIXTURES = Path(__file__).parent / "fixtures" / "token"


def test_cli_generates_entities(tmp_path, capsys):
    out_dir = tmp_path / "out"
    exit_code = main(["--config-file", str(FIXTURES / "codegen.yaml"), "--output-folder", str(out_dir)])

    assert exit_code == 0
    assert (out_dir / "entity" / "BalanceOf.ts").exists()
    assert "Queries: 9" in capsys.readouterr().out


def test_cli_dry_run_writes_nothing(tmp_path, capsys):
    out_dir = tmp_path / "out"
    exit_code = main([
        "--config-file", str(FIXTURES / "codegen.yaml"),
        "--output-folder", str(out_dir),
        "--dry-run",
    ])

    assert exit_code == 0
    assert not out_dir.exists()
    assert "entity/Token.ts" in capsys.readouterr().out


def test_cli_reports_failure(tmp_path):
    workspace = tmp_path / "token"
    shutil.copytree(FIXTURES, workspace)
    (workspace / "schema.graphql").write_text("type Broken {", encoding="utf-8")

    exit_code = main(["--config-file", str(workspace / "codegen.yaml"), "--output-folder", str(tmp_path / "out")])

    assert exit_code == 1
    assert not (tmp_path / "out").exists()
