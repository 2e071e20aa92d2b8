"""
autopilot.io: settings, atomic file writes and the per-run artifact layout.

## Responsibilities
- AutopilotSettings with precedence env > TOML > defaults.
- Atomic writes (tmp -> fsync -> os.replace).
- ArtifactWriter / load_artifacts for ``<base>/<run_id>/{logs.jsonl, evidence/, summary.json}``.

## Import DAG discipline
- Depends on stdlib, pydantic, autopilot.core.* and autopilot.runner.logging.
"""

from __future__ import annotations

from .artifacts import (
    ArtifactLogHandler,
    ArtifactSummary,
    ArtifactWriter,
    LoadedArtifacts,
    load_artifacts,
)
from .config import AutopilotSettings
from .errors import IoConfigError, IoError, IoReadError, IoWriteError
from .fs import write_text_atomic

__all__ = [
    "ArtifactLogHandler",
    "ArtifactSummary",
    "ArtifactWriter",
    "LoadedArtifacts",
    "load_artifacts",
    "AutopilotSettings",
    "IoConfigError",
    "IoError",
    "IoReadError",
    "IoWriteError",
    "write_text_atomic",
]
