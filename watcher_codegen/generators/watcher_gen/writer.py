"""File writer for watcher generation."""
import logging
from pathlib import Path
from typing import List, Sequence

from watcher_codegen.generators.watcher_gen.types import GeneratedFile

log = logging.getLogger(__name__)


def write_files(files: Sequence[GeneratedFile], out_dir: Path) -> List[Path]:
    """
    Write rendered files under the output directory.

    Callers only get here once every file has been rendered, so a failed run
    leaves nothing half-written.

    Args:
        files: GeneratedFile objects with paths relative to out_dir
        out_dir: Base output directory path

    Returns:
        Absolute paths of the written files, in input order
    """
    out_dir.mkdir(parents=True, exist_ok=True)

    written = []
    for file in files:
        file_path = out_dir / file.path
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(file.content, encoding="utf-8")
        written.append(file_path)
        log.debug("Wrote %s", file_path, extra={"stage": "write"})

    log.info("Wrote %d files to %s", len(written), out_dir, extra={"stage": "write"})
    return written
