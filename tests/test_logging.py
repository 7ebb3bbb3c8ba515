"""Tests for log record formatting."""
import logging

from watcher_codegen.core.logging import ContextFormatter

FORMAT = "%(levelname)s [contract=%(contract)s stage=%(stage)s] %(message)s"


def _record(**extra):
    record = logging.LogRecord("watcher_codegen", logging.INFO, __file__, 1, "Collected %d queries", (3,), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_missing_context_defaults_to_dash():
    assert ContextFormatter(FORMAT).format(_record()) == "INFO [contract=- stage=-] Collected 3 queries"


def test_context_is_kept():
    line = ContextFormatter(FORMAT).format(_record(contract="ERC20", stage="abi"))
    assert line == "INFO [contract=ERC20 stage=abi] Collected 3 queries"
