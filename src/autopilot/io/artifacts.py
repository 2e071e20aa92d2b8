"""
Artifact layout for autopilot command runs.

Layout (file protocol baseline)
- <base>/<run_id>/logs.jsonl
- <base>/<run_id>/evidence/*.json
- <base>/<run_id>/summary.json

Notes
- Every JSON payload passes through denylist redaction before it is written (unless
  the writer was created with ``redaction_enabled=False``).
- Atomicity: tmp write -> fsync -> os.replace (same FS) using io.fs helpers.
- ``load_artifacts`` reads a run directory back for replay and diagnosis.
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from ..core.redaction import redact_key_values, redact_keys
from ..core.serde import json_dumps_pretty, to_jsonable
from ..runner.logging import JsonLinesFormatter
from .errors import IoReadError
from .fs import makedirs, write_text_atomic

__all__ = [
    "ArtifactSummary",
    "ArtifactWriter",
    "ArtifactLogHandler",
    "LoadedArtifacts",
    "load_artifacts",
]

logger = logging.getLogger(__name__)

LOGS_FILE = "logs.jsonl"
SUMMARY_FILE = "summary.json"
EVIDENCE_DIR = "evidence"


class ArtifactSummary(BaseModel):
    """Outcome record written as ``summary.json`` at the end of a run."""

    model_config = ConfigDict(extra="forbid")

    run_id: str
    command: str
    status: Literal["success", "failure"]
    started_at: str
    completed_at: str
    dry_run: bool = True
    error: dict[str, Any] | None = None
    evidence_files: list[str] = Field(default_factory=list)
    log_line_count: int = 0


class ArtifactWriter:
    """
    Write the artifacts of one run under ``<base_dir>/<run_id>``.

    Args:
        run_id (str): Run identifier; becomes the directory name.
        base_dir (str | os.PathLike[str]): Parent directory; "artifacts".
        redaction_enabled (bool): Apply denylist redaction to every payload.
        extra_deny_keys (Iterable[str]): Keys redacted in addition to the defaults.
    """

    def __init__(
        self,
        run_id: str,
        base_dir: str | os.PathLike[str] = "artifacts",
        *,
        redaction_enabled: bool = True,
        extra_deny_keys: Iterable[str] = (),
    ) -> None:
        self.run_id = run_id
        self.dir = os.path.join(os.fspath(base_dir), run_id)
        self.evidence_dir = os.path.join(self.dir, EVIDENCE_DIR)
        self.redaction_enabled = redaction_enabled
        self.extra_deny_keys = tuple(extra_deny_keys)
        self._evidence_files: list[str] = []
        self._log_lines: list[str] = []

    def init(self) -> None:
        makedirs(self.dir)
        makedirs(self.evidence_dir)

    def _prepare(self, data: Any) -> Any:
        plain = to_jsonable(data)
        if not self.redaction_enabled:
            return plain
        return redact_keys(plain, self.extra_deny_keys)

    def write_evidence(self, name: str, data: Any) -> str:
        """
        Write one evidence payload as ``evidence/<name>.json``.

        Returns:
            str: Path of the written file.
        """
        filename = name if name.endswith(".json") else f"{name}.json"
        path = write_text_atomic(
            os.path.join(self.evidence_dir, filename), json_dumps_pretty(self._prepare(data))
        )
        self._evidence_files.append(filename)
        logger.debug("wrote evidence", extra={"path": path})
        return path

    def append_log(self, line: str | Mapping[str, Any]) -> None:
        """Buffer one log line; mappings are serialized as a JSON object."""
        if isinstance(line, Mapping):
            text = json.dumps(self._prepare(line), ensure_ascii=False)
        elif self.redaction_enabled:
            text = redact_key_values(line, self.extra_deny_keys)
        else:
            text = line
        self._log_lines.append(text)

    def flush_logs(self) -> str:
        body = "\n".join(self._log_lines) + ("\n" if self._log_lines else "")
        return write_text_atomic(os.path.join(self.dir, LOGS_FILE), body)

    def write_summary(self, summary: ArtifactSummary | Mapping[str, Any]) -> str:
        if not isinstance(summary, ArtifactSummary):
            summary = ArtifactSummary.model_validate(summary)
        return write_text_atomic(
            os.path.join(self.dir, SUMMARY_FILE), json_dumps_pretty(self._prepare(summary))
        )

    @property
    def evidence_files(self) -> list[str]:
        return list(self._evidence_files)

    @property
    def log_line_count(self) -> int:
        return len(self._log_lines)


class ArtifactLogHandler(logging.Handler):
    """Logging handler that buffers formatted records into an `ArtifactWriter`."""

    def __init__(self, writer: ArtifactWriter, level: int = logging.NOTSET) -> None:
        super().__init__(level)
        self.writer = writer
        self.setFormatter(
            JsonLinesFormatter(run_id=writer.run_id, extra_deny_keys=writer.extra_deny_keys)
        )

    def emit(self, record: logging.LogRecord) -> None:
        try:
            self.writer.append_log(self.format(record))
        except Exception:
            self.handleError(record)


@dataclass
class LoadedArtifacts:
    summary: ArtifactSummary | None
    logs: list[str] = field(default_factory=list)
    evidence: dict[str, Any] = field(default_factory=dict)


def _read_json(path: str) -> Any:
    try:
        with open(path, encoding="utf-8") as fh:
            return json.load(fh)
    except json.JSONDecodeError as e:
        raise IoReadError(f"{path} is not valid JSON: {e}") from e


def load_artifacts(artifact_dir: str | os.PathLike[str]) -> LoadedArtifacts:
    """
    Load a run directory written by `ArtifactWriter`.

    Missing pieces load as empty (no summary, no logs, no evidence).

    Raises:
        IoReadError: If a JSON file is present but malformed.
        pydantic.ValidationError: If summary.json does not match ArtifactSummary.
    """
    base = os.fspath(artifact_dir)
    summary_path = os.path.join(base, SUMMARY_FILE)
    logs_path = os.path.join(base, LOGS_FILE)
    evidence_dir = os.path.join(base, EVIDENCE_DIR)

    summary = None
    if os.path.exists(summary_path):
        summary = ArtifactSummary.model_validate(_read_json(summary_path))

    logs: list[str] = []
    if os.path.exists(logs_path):
        with open(logs_path, encoding="utf-8") as fh:
            logs = [line for line in fh.read().split("\n") if line]

    evidence: dict[str, Any] = {}
    if os.path.isdir(evidence_dir):
        for name in sorted(os.listdir(evidence_dir)):
            if name.endswith(".json"):
                evidence[name] = _read_json(os.path.join(evidence_dir, name))

    return LoadedArtifacts(summary=summary, logs=logs, evidence=evidence)
