import logging
import sys
from typing import Optional

from watcher_codegen.core.config import settings


class ContextFormatter(logging.Formatter):
    """Formatter that fills in '-' for records logged without contract or stage context."""
    context_fields = ("contract", "stage")

    def format(self, record):
        for name in self.context_fields:
            if not hasattr(record, name):
                setattr(record, name, "-")
        return super().format(record)


def configure_logging(level: Optional[str] = None) -> None:
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(ContextFormatter(
        "%(asctime)s %(levelname)s %(name)s [contract=%(contract)s stage=%(stage)s] - %(message)s"
    ))
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        handlers=[handler],
        force=True,
    )
