"""Structured Logging — verifies JSON log records carry invoice context."""

import json
import logging

import pytest

from app.infrastructure.observability import JSONFormatter, log_context, setup_logging


def _record(**extra):
    record = logging.LogRecord(
        "app.services.invoice_actions", logging.ERROR, __file__, 1,
        "Error during invoice create", None, None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_base_fields():
    log = json.loads(JSONFormatter().format(_record()))
    assert log["level"] == "ERROR"
    assert log["logger"] == "app.services.invoice_actions"
    assert log["message"] == "Error during invoice create"
    assert log["timestamp"].endswith("+00:00")


def test_json_formatter_includes_context_extras():
    log = json.loads(JSONFormatter().format(
        _record(**log_context("create", invoice_id="inv-1", error_code="DATABASE_ERROR")),
    ))
    assert log["operation"] == "create"
    assert log["invoice_id"] == "inv-1"
    assert log["error_code"] == "DATABASE_ERROR"


def test_json_formatter_skips_absent_extras():
    log = json.loads(JSONFormatter().format(_record()))
    assert "invoice_id" not in log
    assert "operation" not in log


def test_log_context_drops_none_and_unknown_fields():
    assert log_context("delete", invoice_id=None, customer="c1") == {"operation": "delete"}
    assert log_context("update", rowcount=0) == {"operation": "update", "rowcount": 0}


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


def test_setup_logging_is_idempotent(restore_root_logger):
    setup_logging("INFO", "json")
    setup_logging("WARNING", "text")

    installed = [h for h in restore_root_logger.handlers if h.get_name() == "invoice-dashboard"]
    assert len(installed) == 1
    assert not isinstance(installed[0].formatter, JSONFormatter)
    assert restore_root_logger.level == logging.WARNING
    assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING
