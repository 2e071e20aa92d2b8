"""
JSON-lines logging for autopilot commands.

`configure_logging` installs a single handler on the ``autopilot`` logger. With
``json_lines=True`` each record becomes one JSON object per line::

    {"ts": "2026-01-15T12:00:00.000Z", "level": "info", "msg": "...",
     "logger": "autopilot.jobforge.bundle", "run_id": "run-1", "request_count": 2}

Fields passed through ``extra=`` are merged into the object, and the whole entry goes
through denylist redaction (`autopilot.core.redaction.redact_keys`) before it is
serialized, so a stray ``token=...`` in ``extra`` never reaches the stream.

Modules log through ``logging.getLogger(__name__)``; nothing here is required for the
library to work, it only shapes the output of the CLI.
"""

from __future__ import annotations

import json
import logging
import sys
from collections.abc import Iterable
from datetime import datetime, timezone
from typing import IO, Any

from ..core.envelopes import iso_timestamp
from ..core.redaction import redact_key_values, redact_keys
from ..core.serde import to_jsonable

__all__ = ["JsonLinesFormatter", "configure_logging", "LOGGER_NAME"]

LOGGER_NAME = "autopilot"

# Attributes every LogRecord carries; anything else arrived through ``extra=``.
_RESERVED = frozenset(
    vars(logging.LogRecord("x", logging.INFO, "x", 0, "x", None, None)).keys()
) | {"message", "asctime", "taskName"}

_LEVEL_NAMES = {
    logging.DEBUG: "debug",
    logging.INFO: "info",
    logging.WARNING: "warn",
    logging.ERROR: "error",
    logging.CRITICAL: "critical",
}


class JsonLinesFormatter(logging.Formatter):
    """
    Format records as redacted single-line JSON objects.

    Args:
        run_id (str | None): Added to every entry as ``run_id`` when set.
        extra_deny_keys (Iterable[str]): Keys redacted in addition to the default denylist.
    """

    def __init__(self, run_id: str | None = None, extra_deny_keys: Iterable[str] = ()) -> None:
        super().__init__()
        self.run_id = run_id
        self.extra_deny_keys = tuple(extra_deny_keys)

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "ts": iso_timestamp(datetime.fromtimestamp(record.created, timezone.utc)),
            "level": _LEVEL_NAMES.get(record.levelno, record.levelname.lower()),
            "msg": redact_key_values(record.getMessage(), self.extra_deny_keys),
            "logger": record.name,
        }
        if self.run_id:
            entry["run_id"] = self.run_id
        for key, value in vars(record).items():
            if key not in _RESERVED and not key.startswith("_"):
                entry[key] = to_jsonable(value)
        if record.exc_info:
            entry["exc_info"] = self.formatException(record.exc_info)

        entry = redact_keys(entry, self.extra_deny_keys)
        return json.dumps(entry, ensure_ascii=False, default=str)


def configure_logging(
    level: str | int = "INFO",
    *,
    json_lines: bool = True,
    run_id: str | None = None,
    stream: IO[str] | None = None,
    extra_deny_keys: Iterable[str] = (),
) -> logging.Logger:
    """
    Install one stream handler on the ``autopilot`` logger, replacing earlier ones.

    Args:
        level (str | int): Threshold, e.g. "DEBUG" or logging.INFO.
        json_lines (bool): JSON-lines output if True, ``[LEVEL] message`` otherwise.
        run_id (str | None): Correlation id stamped on every JSON entry.
        stream (IO[str] | None): Destination; sys.stderr if None.
        extra_deny_keys (Iterable[str]): Additional keys to redact.

    Returns:
        logging.Logger: The configured ``autopilot`` logger.
    """
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    if json_lines:
        handler.setFormatter(JsonLinesFormatter(run_id=run_id, extra_deny_keys=extra_deny_keys))
    else:
        handler.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(level.upper() if isinstance(level, str) else level)
    logger.propagate = False
    return logger
