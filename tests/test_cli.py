from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from autopilot.cli import build_argparser, main, run
from autopilot.core.canonical import short_hash, stable_hash
from autopilot.core.envelopes import create_job_request, create_report_envelope
from autopilot.jobforge.bundle import build_report_bundle, serialize_bundle
from autopilot.jobforge.idempotency import derive_idempotency_key

TENANT = {"tenant_id": "tenant-123", "project_id": "project-456"}


@pytest.fixture(autouse=True)
def _isolate(tmp_path: Path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    for key in ("AUTOPILOT_LOG_LEVEL", "AUTOPILOT_STABLE_OUTPUT", "AUTOPILOT_ARTIFACTS_DIR"):
        monkeypatch.delenv(key, raising=False)
    logger = logging.getLogger("autopilot")
    handlers, level, propagate = list(logger.handlers), logger.level, logger.propagate
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate


def _write(path: Path, data) -> str:
    path.write_text(json.dumps(data))
    return str(path)


def _request(**kwargs) -> dict:
    kwargs.setdefault("requested_at", "2026-01-15T10:00:00.000Z")
    return create_job_request(
        "autopilot.growth.seo_scan", TENANT, {"url": "https://example.com"}, **kwargs
    ).model_dump(mode="json")


def test_no_args_prints_help(capsys) -> None:
    assert run([]) == 0
    assert "usage: autopilot" in capsys.readouterr().out


def test_canonicalize_and_hash(tmp_path: Path, capsys) -> None:
    doc = {"b": 1, "a": [1, 2.5, "x"]}
    f = _write(tmp_path / "doc.json", doc)

    assert run(["canonicalize", f, "--no-env"]) == 0
    assert capsys.readouterr().out == '{"a":[1,2.5,"x"],"b":1}\n'

    assert run(["hash", f, "--no-env"]) == 0
    assert capsys.readouterr().out.split() == [stable_hash(doc), short_hash(doc)]

    assert run(["hash", f, "--short", "--no-env"]) == 0
    assert capsys.readouterr().out.strip() == short_hash(doc)

    assert run(["hash", f, "--prefix", "doc", "--no-env"]) == 0
    assert capsys.readouterr().out.strip() == f"doc-{short_hash(doc)}"


def test_canonicalize_to_file(tmp_path: Path) -> None:
    f = _write(tmp_path / "doc.json", {"z": None, "a": True})
    out = tmp_path / "out" / "canon.json"
    assert run(["canonicalize", f, "--out", str(out), "--no-env"]) == 0
    assert out.read_text() == '{"a":true,"z":null}\n'


def test_idempotency_key(tmp_path: Path, capsys) -> None:
    req = _request()
    f = _write(tmp_path / "req.json", req)
    assert run(["idempotency-key", f, "--no-env"]) == 0
    assert capsys.readouterr().out.strip() == derive_idempotency_key(req)


def test_idempotency_key_matches_bundle_for_sparse_request(tmp_path: Path, capsys) -> None:
    req = _request()
    del req["policy"], req["metadata"], req["evidence_links"]
    f = _write(tmp_path / "req.json", req)
    assert run(["idempotency-key", f, "--no-env"]) == 0
    key = capsys.readouterr().out.strip()

    g = _write(tmp_path / "reqs.json", [req])
    out = tmp_path / "bundle.json"
    assert run(["bundle", g, "--trace", "trace-1", "--out", str(out), "--no-env"]) == 0
    bundle = json.loads(out.read_text())
    assert bundle["idempotency_keys"][0]["idempotency_key"] == key
    assert key == derive_idempotency_key(_request())


def test_idempotency_key_rejects_invalid_request(tmp_path: Path, capsys) -> None:
    f = _write(tmp_path / "req.json", {"job_type": "autopilot.growth.seo_scan"})
    assert run(["idempotency-key", f, "--no-env"]) == 2
    assert capsys.readouterr().out == ""


def test_bundle_then_verify(tmp_path: Path, capsys) -> None:
    f = _write(tmp_path / "reqs.json", {"requests": [_request(), _request(priority="high")]})
    out = tmp_path / "bundle.json"
    code = run(["bundle", f, "--stable", "--trace", "trace-1", "--out", str(out), "--no-env"])
    assert code == 0

    bundle = json.loads(out.read_text())
    assert bundle["tenant_id"] == "tenant-123"
    assert bundle["trace_id"] == "trace-1"
    assert bundle["created_at"] == "2000-01-01T00:00:00.000Z"

    assert run(["verify", str(out), "--no-env"]) == 0
    assert json.loads(capsys.readouterr().out) == {"errors": [], "valid": True}

    bundle["trace_id"] = "trace-2"
    tampered = _write(tmp_path / "tampered.json", bundle)
    assert run(["verify", tampered, "--no-env"]) == 2
    assert json.loads(capsys.readouterr().out)["valid"] is False


def test_bundle_rejects_empty_input(tmp_path: Path, capsys) -> None:
    f = _write(tmp_path / "empty.json", [])
    assert run(["bundle", f, "--no-env"]) == 2
    assert "error: Input validation failed" in capsys.readouterr().err


def test_validate_reports_issues(tmp_path: Path, capsys) -> None:
    f = _write(tmp_path / "req.json", _request())
    assert run(["validate", f, "--no-env"]) == 0
    result = json.loads(capsys.readouterr().out)
    assert result["valid"] is True
    assert [i["code"] for i in result["issues"]] == ["EVIDENCE_WARNING"]

    bad = _write(tmp_path / "bad.json", {"job_type": "autopilot.growth.seo_scan"})
    assert run(["validate", bad, "--no-env"]) == 2
    assert json.loads(capsys.readouterr().out)["valid"] is False


def test_redact_modes(tmp_path: Path, capsys) -> None:
    f = _write(tmp_path / "doc.json", {"password": "p", "nested": {"token": "t"}})

    assert run(["redact", f, "--no-env"]) == 0
    assert json.loads(capsys.readouterr().out) == {"nested": {"token": "t"}, "password": "***"}

    assert run(["redact", f, "--denylist", "--no-env"]) == 0
    assert json.loads(capsys.readouterr().out) == {
        "nested": {"token": "[REDACTED]"},
        "password": "[REDACTED]",
    }


def test_render_report_bundle(tmp_path: Path, capsys) -> None:
    report = create_report_envelope("growth.seo_audit", TENANT, {"name": "growth", "version": "1.0.0"})
    bundle = build_report_bundle(report, trace_id="trace-1", stable_output=True)
    f = tmp_path / "report.json"
    f.write_text(serialize_bundle(bundle))

    assert run(["render", str(f), "--no-env"]) == 0
    assert capsys.readouterr().out.startswith("# growth report")


@pytest.mark.parametrize(
    ("setup", "expected"),
    [
        (lambda p: str(p / "missing.json"), "file not found"),
        (lambda p: (p / "bad.json").write_text("{oops") and str(p / "bad.json"), "invalid JSON"),
    ],
)
def test_unreadable_input_exits_2(tmp_path: Path, capsys, setup, expected: str) -> None:
    assert run(["hash", setup(tmp_path), "--no-env"]) == 2
    assert expected in capsys.readouterr().err


def test_bad_config_exits_2(tmp_path: Path, monkeypatch, capsys) -> None:
    monkeypatch.setenv("AUTOPILOT_LOG_LEVEL", "chatty")
    assert run(["version", "--no-env"]) == 2
    assert "log_level" in capsys.readouterr().err


def test_dotenv_is_loaded(tmp_path: Path, monkeypatch) -> None:
    (tmp_path / ".env").write_text("AUTOPILOT_ARTIFACTS_DIR=from_dotenv\n")
    # Record the variable so teardown also removes the value loaded from .env.
    monkeypatch.setenv("AUTOPILOT_ARTIFACTS_DIR", "unset")
    monkeypatch.delenv("AUTOPILOT_ARTIFACTS_DIR")
    assert run(["version", "--artifacts", "--run-id", "run-env"]) == 0
    assert (tmp_path / "from_dotenv" / "run-env" / "summary.json").exists()


def test_artifacts_written_on_failure(tmp_path: Path) -> None:
    f = _write(tmp_path / "empty.json", [])
    assert run(["bundle", f, "--artifacts", "--run-id", "run-7", "--no-env"]) == 2

    run_dir = tmp_path / "artifacts" / "run-7"
    summary = json.loads((run_dir / "summary.json").read_text())
    assert summary["status"] == "failure"
    assert summary["command"] == "bundle"
    assert summary["error"]["code"] == "VALIDATION_ERROR"
    logs = [json.loads(line) for line in (run_dir / "logs.jsonl").read_text().splitlines()]
    assert logs and all(entry["run_id"] == "run-7" for entry in logs)


def test_main_raises_system_exit(capsys) -> None:
    with pytest.raises(SystemExit) as info:
        main(["version", "--no-env"])
    assert info.value.code == 0
    assert "contract" in capsys.readouterr().out


def test_parser_lists_commands() -> None:
    parser = build_argparser()
    args = parser.parse_args(["hash", "x.json", "--short"])
    assert args.cmd == "hash" and args.short is True


def test_profiles_listing_and_lookup(tmp_path: Path, capsys) -> None:
    assert run(["profiles", "--no-env"]) == 0
    assert capsys.readouterr().out.split() == [
        "base",
        "jobforge",
        "settler",
        "readylayer",
        "aias",
        "keys",
    ]

    assert run(["profiles", "--category", "ai", "--no-env"]) == 0
    assert capsys.readouterr().out.split() == ["aias"]

    assert run(["profiles", "--id", "keys", "--no-env"]) == 0
    assert json.loads(capsys.readouterr().out)["name"] == "Keys"

    assert run(["profiles", "--id", "nope", "--no-env"]) == 2
    assert "error:" in capsys.readouterr().err


def test_profiles_extend(tmp_path: Path) -> None:
    f = _write(tmp_path / "overrides.json", {"id": "acme", "name": "Acme"})
    out = tmp_path / "acme.json"
    assert run(["profiles", "--id", "settler", "--extend", f, "--out", str(out), "--no-env"]) == 0
    profile = json.loads(out.read_text())
    assert profile["id"] == "acme"
    assert profile["voice"]["tone"] == "friendly"
