"""Unit coverage for structured logging utilities."""
from __future__ import annotations

import json
import logging

from assistant_transport.base.log_support import JsonFormatter
from assistant_transport.base.logging import BASE_LOGGER_NAME, LogContext, configure_logger, get_logger, log_event


def test_loggers_nest_under_package_logger():
    logger = get_logger("thirdparty.module")
    assert logger.name == f"{BASE_LOGGER_NAME}.thirdparty.module"
    assert get_logger(BASE_LOGGER_NAME).propagate is False


def test_log_event_drops_none_fields(log_events):
    logger = get_logger("tests.log_event")
    log_event(logger, "unit.event", LogContext(operation="op", path="/v1/x"), attempt=2, status=None)

    assert log_events[-1] == {"event": "unit.event", "operation": "op", "path": "/v1/x", "attempt": 2}


def test_log_event_keep_none(log_events):
    log_event(get_logger("tests.keep"), "unit.none", keep_none=True, status=None)
    assert log_events[-1] == {"event": "unit.none", "status": None}


def test_json_formatter_hoists_json_message():
    formatter = JsonFormatter()
    record = logging.LogRecord("assistant_transport.x", logging.INFO, __file__, 1, json.dumps({"event": "e", "n": 1}), None, None)

    data = json.loads(formatter.format(record))

    assert data["event"] == "e"
    assert data["n"] == 1
    assert data["level"] == "INFO"
    assert "msg" not in data


def test_json_formatter_keeps_plain_message():
    record = logging.LogRecord("x", logging.WARNING, __file__, 1, "plain %s", ("text",), None)
    data = json.loads(JsonFormatter().format(record))
    assert data["msg"] == "plain text"


def test_configure_logger_file_handler(tmp_path):
    path = tmp_path / "logs" / "transport.log"
    logger = configure_logger(level="INFO", file_path=str(path))
    try:
        log_event(get_logger("tests.file"), "file.event", value=1)
        for handler in logger.handlers:
            handler.flush()
        lines = path.read_text(encoding="utf-8").strip().splitlines()
        assert json.loads(lines[-1])["event"] == "file.event"
    finally:
        configure_logger(file_path=None)
