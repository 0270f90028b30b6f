from __future__ import annotations

import json
import logging
import math
import sys
from typing import Any, Dict, Optional, TextIO


SERVICE = "sensorfusion"
DEFAULT_LEVEL = "INFO"

_RESERVED = set(vars(logging.makeLogRecord({}))) | {"message", "taskName"}


def _jsonable(value: Any) -> Any:
    # NaN features and inf scores are not valid JSON numbers
    if isinstance(value, float) and not math.isfinite(value):
        return str(value)
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    return value


class JsonFormatter(logging.Formatter):
    """One JSON object per record; ``extra=`` fields become top-level keys."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        payload: Dict[str, Any] = {
            "time": self.formatTime(record, "%Y-%m-%dT%H:%M:%S%z"),
            "level": record.levelname,
            "service": SERVICE,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.levelno <= logging.DEBUG:
            payload["where"] = f"{record.module}:{record.lineno}"
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        for key, value in record.__dict__.items():
            if key not in _RESERVED:
                payload[key] = _jsonable(value)
        return json.dumps(payload, ensure_ascii=False, default=str)


def setup_logging(level: Optional[str] = None, stream: Optional[TextIO] = None) -> None:
    """Route all records through :class:`JsonFormatter`.

    Records go to stderr by default so stdout stays free for command output.
    """
    root = logging.getLogger()
    root.setLevel((level or DEFAULT_LEVEL).upper())
    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(JsonFormatter())
    root.handlers.clear()
    root.addHandler(handler)
