from __future__ import annotations

import json
import logging

import pytest

from subtasking_worker.worker.logging import JsonFormatter, configure_logging, task_logger


def _record(**extra: object) -> logging.LogRecord:
    record = logging.LogRecord(
        name="subtasking_worker.test",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="Execute task",
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_includes_extra_fields() -> None:
    payload = json.loads(JsonFormatter().format(_record(session_id="s1", task_id="T1")))

    assert payload["level"] == "INFO"
    assert payload["logger"] == "subtasking_worker.test"
    assert payload["message"] == "Execute task"
    assert payload["extra"] == {"session_id": "s1", "task_id": "T1"}


def test_task_logger_merges_call_extra(caplog: pytest.LogCaptureFixture) -> None:
    log = task_logger(logging.getLogger("subtasking_worker.test"), session_id="s1", task_id="T1")

    with caplog.at_level(logging.DEBUG, logger="subtasking_worker.test"):
        log.debug("Submitting workers", extra={"count": 5})

    (record,) = caplog.records
    assert record.session_id == "s1"
    assert record.task_id == "T1"
    assert record.count == 5


def test_configure_logging_installs_single_json_handler() -> None:
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    try:
        configure_logging("debug")
        configure_logging("debug")

        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, JsonFormatter)
        assert root.level == logging.DEBUG
    finally:
        for handler in list(root.handlers):
            root.removeHandler(handler)
        for handler in saved_handlers:
            root.addHandler(handler)
        root.setLevel(saved_level)
