from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

REDACT_KEYS = ("password", "pwd", "secret", "token", "authorization")

_EXTRA_FIELDS = (
    "event",
    "event_id",
    "calendar_id",
    "join_url_found",
    "candidate_count",
    "match_count",
    "extra",
)


def _redact(value: Any) -> Any:
    if isinstance(value, dict):
        out: dict[str, Any] = {}
        for k, v in value.items():
            if any(p in k.lower() for p in REDACT_KEYS):
                out[k] = "***"
            else:
                out[k] = _redact(v)
        return out
    if isinstance(value, (list, tuple)):
        return [_redact(v) for v in value]
    return value


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        for key in _EXTRA_FIELDS:
            if hasattr(record, key):
                payload[key] = getattr(record, key)
        return json.dumps(_redact(payload), ensure_ascii=False, default=str)


def configure_logging(level: str = "WARNING") -> None:
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level.upper())

    # stdout carries the meeting listing; logs go to stderr.
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(JsonFormatter())
    root.addHandler(handler)
