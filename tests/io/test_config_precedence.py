from __future__ import annotations

from pathlib import Path

import pytest

from autopilot.io.config import AutopilotSettings
from autopilot.io.errors import IoConfigError

_ENV_KEYS = [
    "AUTOPILOT_ARTIFACTS_DIR",
    "AUTOPILOT_LOG_LEVEL",
    "AUTOPILOT_LOG_JSON",
    "AUTOPILOT_REDACTION_ENABLED",
    "AUTOPILOT_EXTRA_DENY_KEYS",
    "AUTOPILOT_DEFAULT_PRIORITY",
    "AUTOPILOT_DEFAULT_EXPIRATION_HOURS",
    "AUTOPILOT_MODULE_ID",
    "AUTOPILOT_STABLE_OUTPUT",
]


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch) -> None:
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def _write_autopilot_toml(tmp: Path, content: str) -> Path:
    p = tmp / "autopilot.toml"
    p.write_text(content)
    return p


def test_settings_precedence_env_over_toml(tmp_path: Path, monkeypatch) -> None:
    # Arrange TOML
    _write_autopilot_toml(
        tmp_path,
        """
        [autopilot]
        artifacts_dir = "out_toml"
        log_level = "debug"
        default_expiration_hours = 12
        """.strip(),
    )
    monkeypatch.chdir(tmp_path)
    # Arrange ENV that should override TOML
    monkeypatch.setenv("AUTOPILOT_ARTIFACTS_DIR", "out_env")
    monkeypatch.setenv("AUTOPILOT_DEFAULT_EXPIRATION_HOURS", "48")

    s = AutopilotSettings.load()

    assert s.artifacts_dir == "out_env"
    assert s.default_expiration_hours == 48.0
    assert s.log_level == "DEBUG"  # TOML only


def test_settings_from_toml_top_level_keys(tmp_path: Path, monkeypatch) -> None:
    _write_autopilot_toml(
        tmp_path,
        """
        log_json = false
        redaction_enabled = false
        extra_deny_keys = ["ssn", "dob"]
        stable_output = true
        module_id = "growth"
        """.strip(),
    )
    monkeypatch.chdir(tmp_path)

    s = AutopilotSettings.load()

    assert s.log_json is False
    assert s.redaction_enabled is False
    assert s.extra_deny_keys == ("ssn", "dob")
    assert s.stable_output is True
    assert s.module_id == "growth"


def test_settings_from_pyproject_tool_table(tmp_path: Path, monkeypatch) -> None:
    (tmp_path / "pyproject.toml").write_text(
        """
        [project]
        name = "demo"

        [tool.autopilot]
        default_priority = "HIGH"
        """.strip()
    )
    monkeypatch.chdir(tmp_path)

    assert AutopilotSettings.load().default_priority == "high"


def test_settings_defaults_when_no_config(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    assert AutopilotSettings.load() == AutopilotSettings()


def test_env_values_are_coerced(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("AUTOPILOT_LOG_JSON", "off")
    monkeypatch.setenv("AUTOPILOT_STABLE_OUTPUT", "yes")
    monkeypatch.setenv("AUTOPILOT_EXTRA_DENY_KEYS", "ssn, dob,,")

    s = AutopilotSettings.load()

    assert s.log_json is False
    assert s.stable_output is True
    assert s.extra_deny_keys == ("ssn", "dob")


def test_explicit_path_is_used(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)
    cfg = tmp_path / "conf" / "custom.toml"
    cfg.parent.mkdir()
    cfg.write_text('[autopilot]\nartifacts_dir = "elsewhere"\n')

    assert AutopilotSettings.load(cfg).artifacts_dir == "elsewhere"


@pytest.mark.parametrize(
    ("env", "value", "match"),
    [
        ("AUTOPILOT_LOG_LEVEL", "chatty", "log_level"),
        ("AUTOPILOT_DEFAULT_EXPIRATION_HOURS", "soon", "must be a number"),
        ("AUTOPILOT_DEFAULT_EXPIRATION_HOURS", "-1", "must be > 0"),
    ],
)
def test_bad_values_raise(tmp_path: Path, monkeypatch, env: str, value: str, match: str) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv(env, value)
    with pytest.raises(IoConfigError, match=match):
        AutopilotSettings.load()


def test_invalid_toml_raises(tmp_path: Path, monkeypatch) -> None:
    _write_autopilot_toml(tmp_path, "[autopilot\nartifacts_dir = ")
    monkeypatch.chdir(tmp_path)
    with pytest.raises(IoConfigError, match="invalid TOML"):
        AutopilotSettings.load()
