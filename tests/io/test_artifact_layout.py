from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from autopilot.io.artifacts import (
    ArtifactLogHandler,
    ArtifactSummary,
    ArtifactWriter,
    load_artifacts,
)
from autopilot.io.errors import IoReadError


def _summary(writer: ArtifactWriter, **overrides) -> dict:
    data = {
        "run_id": writer.run_id,
        "command": "bundle",
        "status": "success",
        "started_at": "2026-01-15T10:00:00.000Z",
        "completed_at": "2026-01-15T10:00:01.000Z",
        "evidence_files": writer.evidence_files,
        "log_line_count": writer.log_line_count,
    }
    data.update(overrides)
    return data


def test_run_layout_round_trip(tmp_path: Path) -> None:
    writer = ArtifactWriter("run-1", tmp_path)
    writer.init()
    writer.write_evidence("scan", {"url": "https://example.com", "score": 0.5})
    writer.append_log({"level": "info", "msg": "started"})
    writer.append_log("plain line")
    writer.flush_logs()
    writer.write_summary(_summary(writer))

    run_dir = tmp_path / "run-1"
    assert (run_dir / "evidence" / "scan.json").exists()
    assert (run_dir / "logs.jsonl").read_text().count("\n") == 2

    loaded = load_artifacts(run_dir)
    assert isinstance(loaded.summary, ArtifactSummary)
    assert loaded.summary.evidence_files == ["scan.json"]
    assert loaded.summary.log_line_count == 2
    assert loaded.summary.dry_run is True
    assert json.loads(loaded.logs[0]) == {"level": "info", "msg": "started"}
    assert loaded.evidence == {"scan.json": {"score": 0.5, "url": "https://example.com"}}


def test_evidence_is_redacted(tmp_path: Path) -> None:
    writer = ArtifactWriter("run-2", tmp_path, extra_deny_keys=("ssn",))
    writer.init()
    path = writer.write_evidence("creds.json", {"api_key": "k", "nested": {"ssn": "1"}, "ok": 1})
    data = json.loads(Path(path).read_text())
    assert data == {"api_key": "[REDACTED]", "nested": {"ssn": "[REDACTED]"}, "ok": 1}
    assert writer.evidence_files == ["creds.json"]


def test_log_lines_are_redacted(tmp_path: Path) -> None:
    writer = ArtifactWriter("run-3", tmp_path)
    writer.append_log("password=hunter2 user=ada")
    writer.append_log({"token": "abc"})
    writer.flush_logs()
    logs = load_artifacts(tmp_path / "run-3").logs
    assert logs == ["password=[REDACTED] user=ada", '{"token": "[REDACTED]"}']


def test_redaction_can_be_disabled(tmp_path: Path) -> None:
    writer = ArtifactWriter("run-4", tmp_path, redaction_enabled=False)
    path = writer.write_evidence("raw", {"password": "p"})
    assert json.loads(Path(path).read_text()) == {"password": "p"}


def test_log_handler_buffers_json_records(tmp_path: Path) -> None:
    writer = ArtifactWriter("run-5", tmp_path)
    log = logging.getLogger("tests.artifacts")
    log.setLevel(logging.INFO)
    handler = ArtifactLogHandler(writer)
    log.addHandler(handler)
    try:
        log.info("bundle built", extra={"secret": "s3"})
    finally:
        log.removeHandler(handler)

    assert writer.log_line_count == 1
    writer.flush_logs()
    entry = json.loads(load_artifacts(tmp_path / "run-5").logs[0])
    assert entry["msg"] == "bundle built"
    assert entry["run_id"] == "run-5"
    assert entry["secret"] == "[REDACTED]"


def test_load_missing_dir_is_empty(tmp_path: Path) -> None:
    loaded = load_artifacts(tmp_path / "nope")
    assert loaded.summary is None
    assert loaded.logs == []
    assert loaded.evidence == {}


def test_load_malformed_json_raises(tmp_path: Path) -> None:
    run_dir = tmp_path / "run-6"
    (run_dir / "evidence").mkdir(parents=True)
    (run_dir / "evidence" / "bad.json").write_text("{not json")
    with pytest.raises(IoReadError, match="not valid JSON"):
        load_artifacts(run_dir)


def test_summary_status_is_constrained(tmp_path: Path) -> None:
    writer = ArtifactWriter("run-7", tmp_path)
    with pytest.raises(ValueError):
        writer.write_summary(_summary(writer, status="maybe"))
