"""Command line entry point: watcher-codegen --config-file codegen.yaml"""
import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from watcher_codegen.core.errors import CodegenError
from watcher_codegen.core.logging import configure_logging
from watcher_codegen.generators.watcher_gen.generator import generate_watcher
from watcher_codegen.schemas.config import load_config

log = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="watcher-codegen",
        description="Generate watcher queries and entities from contract ABIs and a subgraph schema.",
    )
    parser.add_argument("--config-file", required=True, type=Path, help="Path to codegen.yaml")
    parser.add_argument("--output-folder", type=Path, help="Override the configured output folder")
    parser.add_argument("--dry-run", action="store_true", help="Build and render without writing files")
    parser.add_argument("--log-level", help="Logging level (default from CODEGEN_LOG_LEVEL)")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    try:
        config = load_config(args.config_file)
        result = generate_watcher(config, out_dir=args.output_folder, write=not args.dry_run)
    except CodegenError as e:
        log.error("Generation failed: %s", e)
        return 1

    print(f"Queries: {len(result.queries)}")
    print(f"Entities: {len(result.entities)}")
    if args.dry_run:
        for file in result.files:
            print(f"  {file.path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
