"""
Configuration for autopilot commands.

Defines AutopilotSettings, a frozen dataclass carrying runtime configuration for the CLI,
logging, redaction and artifact output. Library functions never read it implicitly: the
CLI loads settings once and passes values down as arguments.

Precedence
- environment (``AUTOPILOT_*``) > TOML > defaults.
- TOML search order: ./autopilot.toml (``[autopilot]`` table or top-level keys), then
  ./pyproject.toml under ``[tool.autopilot]``.

Import DAG discipline
- Depends only on stdlib, autopilot.core.constants and autopilot.io.errors.

Notes
- A ``.env`` file is loaded into the environment by the CLI (python-dotenv) before
  ``AutopilotSettings.load`` runs, so dotenv values sit at the environment level.
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

from ..core.constants import DEFAULT_EXPIRATION_HOURS, DEFAULT_MODULE_ID
from .errors import IoConfigError

__all__ = ["AutopilotSettings", "ENV_PREFIX"]

ENV_PREFIX = "AUTOPILOT_"

_TRUE = {"1", "true", "t", "yes", "y", "on"}
_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def _bool(v: Any) -> bool:
    if isinstance(v, bool):
        return v
    if isinstance(v, (int, float)):
        return bool(v)
    if isinstance(v, str):
        return v.strip().lower() in _TRUE
    return False


def _number(name: str, v: Any) -> float:
    try:
        return float(v)
    except (TypeError, ValueError) as e:
        raise IoConfigError(f"{name} must be a number, got {v!r}") from e


def _keys(v: Any) -> tuple[str, ...]:
    if isinstance(v, str):
        return tuple(k.strip() for k in v.split(",") if k.strip())
    if isinstance(v, (list, tuple)):
        return tuple(str(k) for k in v)
    return ()


@dataclass(frozen=True)
class AutopilotSettings:
    """
    Runtime settings for autopilot commands.

    Attributes:
        artifacts_dir (str): Base directory for run artifacts ("artifacts").
        log_level (str): Logging threshold name ("INFO").
        log_json (bool): Emit JSON lines (True) or plain ``[LEVEL] msg`` lines.
        redaction_enabled (bool): Redact artifacts and log entries before writing.
        extra_deny_keys (tuple[str, ...]): Keys redacted in addition to the defaults.
        default_priority (str): Priority for requests created without one ("normal").
        default_expiration_hours (float): Expiry horizon for created requests (24).
        module_id (str): Module identifier stamped on bundles ("autopilot").
        stable_output (bool): Use the fixed placeholder timestamp in bundles.

    Examples:
        >>> AutopilotSettings(artifacts_dir="out").log_level
        'INFO'
    """

    artifacts_dir: str = "artifacts"
    log_level: str = "INFO"
    log_json: bool = True
    redaction_enabled: bool = True
    extra_deny_keys: tuple[str, ...] = ()
    default_priority: str = "normal"
    default_expiration_hours: float = DEFAULT_EXPIRATION_HOURS
    module_id: str = DEFAULT_MODULE_ID
    stable_output: bool = False

    @classmethod
    def _apply_mapping(
        cls, base: AutopilotSettings, cfg: dict[str, Any] | None
    ) -> AutopilotSettings:
        """Apply a loose config mapping onto settings, returning a new instance."""
        if not isinstance(cfg, dict):
            return base

        s = base
        if isinstance(cfg.get("artifacts_dir"), str):
            s = replace(s, artifacts_dir=cfg["artifacts_dir"])

        if isinstance(cfg.get("log_level"), str):
            level = cfg["log_level"].strip().upper()
            if level not in _LOG_LEVELS:
                raise IoConfigError(f"unknown log_level {cfg['log_level']!r}")
            s = replace(s, log_level=level)

        if "log_json" in cfg:
            s = replace(s, log_json=_bool(cfg["log_json"]))
        if "redaction_enabled" in cfg:
            s = replace(s, redaction_enabled=_bool(cfg["redaction_enabled"]))
        if "extra_deny_keys" in cfg:
            s = replace(s, extra_deny_keys=_keys(cfg["extra_deny_keys"]))

        if isinstance(cfg.get("default_priority"), str):
            s = replace(s, default_priority=cfg["default_priority"].strip().lower())

        if "default_expiration_hours" in cfg:
            hours = _number("default_expiration_hours", cfg["default_expiration_hours"])
            if hours <= 0:
                raise IoConfigError("default_expiration_hours must be > 0")
            s = replace(s, default_expiration_hours=hours)

        if isinstance(cfg.get("module_id"), str):
            s = replace(s, module_id=cfg["module_id"])
        if "stable_output" in cfg:
            s = replace(s, stable_output=_bool(cfg["stable_output"]))
        return s

    @classmethod
    def from_env(
        cls, base: AutopilotSettings | None = None, prefix: str = ENV_PREFIX
    ) -> AutopilotSettings:
        """
        Build settings from environment variables. Precedence is env > base > defaults.

        Recognized variables (with the default prefix):
            - AUTOPILOT_ARTIFACTS_DIR
            - AUTOPILOT_LOG_LEVEL
            - AUTOPILOT_LOG_JSON (1/0/true/false/yes/no/on/off)
            - AUTOPILOT_REDACTION_ENABLED
            - AUTOPILOT_EXTRA_DENY_KEYS (comma-separated)
            - AUTOPILOT_DEFAULT_PRIORITY
            - AUTOPILOT_DEFAULT_EXPIRATION_HOURS
            - AUTOPILOT_MODULE_ID
            - AUTOPILOT_STABLE_OUTPUT

        Raises:
            IoConfigError: If a value cannot be interpreted.
        """
        s = base or cls()
        mapping: dict[str, Any] = {}
        for name in (
            "artifacts_dir",
            "log_level",
            "log_json",
            "redaction_enabled",
            "extra_deny_keys",
            "default_priority",
            "default_expiration_hours",
            "module_id",
            "stable_output",
        ):
            v = os.getenv(prefix + name.upper())
            if v:
                mapping[name] = v
        return cls._apply_mapping(s, mapping)

    @classmethod
    def from_toml(cls, path: str | os.PathLike[str] | None = None) -> AutopilotSettings:
        """
        Build settings from a TOML file.

        Search order when `path` is None:
            1) ./autopilot.toml (with either an [autopilot] table or direct keys)
            2) ./pyproject.toml under [tool.autopilot]

        Returns defaults if no candidate file exists.

        Raises:
            IoConfigError: If a candidate file exists but is not valid TOML.
        """
        s = cls()

        cand: list[Path] = []
        if path is not None:
            cand.append(Path(path))
        else:
            cand.append(Path.cwd() / "autopilot.toml")
            cand.append(Path.cwd() / "pyproject.toml")

        cfg: dict[str, Any] | None = None
        for p in cand:
            if not p.exists():
                continue
            try:
                with p.open("rb") as fh:
                    data = tomllib.load(fh)
            except tomllib.TOMLDecodeError as e:
                raise IoConfigError(f"invalid TOML in {p}: {e}") from e

            if p.name == "pyproject.toml":
                tool = data.get("tool", {})
                cfg = tool.get("autopilot") if isinstance(tool, dict) else None
            elif isinstance(data.get("autopilot"), dict):
                cfg = data["autopilot"]
            else:
                cfg = data
            if cfg:
                break

        return cls._apply_mapping(s, cfg)

    @classmethod
    def load(cls, path: str | os.PathLike[str] | None = None) -> AutopilotSettings:
        """
        Load settings applying precedence: environment > TOML > defaults.

        Args:
            path: Optional explicit TOML path. If None, search autopilot.toml, pyproject.toml.
        """
        return cls.from_env(base=cls.from_toml(path))
