from __future__ import annotations

import io
import json
import logging
import sys

import pytest

from autopilot.runner.logging import LOGGER_NAME, JsonLinesFormatter, configure_logging


@pytest.fixture
def restore_logger():
    logger = logging.getLogger(LOGGER_NAME)
    handlers, level, propagate = list(logger.handlers), logger.level, logger.propagate
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate


def _lines(stream: io.StringIO) -> list[dict]:
    return [json.loads(line) for line in stream.getvalue().splitlines()]


def test_json_lines_entry_shape(restore_logger) -> None:
    stream = io.StringIO()
    configure_logging("DEBUG", run_id="run-1", stream=stream)
    logging.getLogger("autopilot.jobforge.bundle").warning(
        "built bundle", extra={"request_count": 2}
    )

    [entry] = _lines(stream)
    assert entry["level"] == "warn"
    assert entry["msg"] == "built bundle"
    assert entry["logger"] == "autopilot.jobforge.bundle"
    assert entry["run_id"] == "run-1"
    assert entry["request_count"] == 2
    assert entry["ts"].endswith("Z")


def test_entries_are_redacted(restore_logger) -> None:
    stream = io.StringIO()
    configure_logging(stream=stream, extra_deny_keys=("ssn",))
    log = logging.getLogger("autopilot.test")
    log.info("login password=hunter2", extra={"authorization": "Bearer x", "ssn": "1"})

    [entry] = _lines(stream)
    assert "hunter2" not in entry["msg"]
    assert entry["authorization"] == "[REDACTED]"
    assert entry["ssn"] == "[REDACTED]"


def test_level_threshold_and_handler_replacement(restore_logger) -> None:
    first = io.StringIO()
    configure_logging("INFO", stream=first)
    second = io.StringIO()
    logger = configure_logging("WARNING", stream=second)

    assert len(logger.handlers) == 1
    assert logger.propagate is False
    logging.getLogger("autopilot.x").info("hidden")
    logging.getLogger("autopilot.x").error("shown")
    assert first.getvalue() == ""
    assert [e["msg"] for e in _lines(second)] == ["shown"]


def test_plain_text_mode(restore_logger) -> None:
    stream = io.StringIO()
    configure_logging(json_lines=False, stream=stream)
    logging.getLogger("autopilot.x").info("hello")
    assert stream.getvalue() == "[INFO] hello\n"


def test_formatter_includes_exception() -> None:
    formatter = JsonLinesFormatter()
    try:
        raise RuntimeError("kaput")
    except RuntimeError:
        record = logging.getLogger("autopilot.x").makeRecord(
            "autopilot.x", logging.ERROR, __file__, 1, "failed", None, sys.exc_info()
        )
    entry = json.loads(formatter.format(record))
    assert entry["level"] == "error"
    assert "RuntimeError: kaput" in entry["exc_info"]
    assert "run_id" not in entry
