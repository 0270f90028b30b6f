from __future__ import annotations

import io
import json
import logging

from sensorfusion.utils.logging import JsonFormatter, setup_logging


def test_json_formatter_fields() -> None:
    record = logging.makeLogRecord({
        "name": "sensorfusion.core.predict",
        "levelno": logging.INFO,
        "levelname": "INFO",
        "msg": "prediction",
        "label": "walk",
        "scores": [0.5, float("nan")],
    })
    payload = json.loads(JsonFormatter().format(record))
    assert payload["service"] == "sensorfusion"
    assert payload["message"] == "prediction"
    assert payload["label"] == "walk"
    assert payload["scores"] == [0.5, "nan"]
    assert "where" not in payload
    assert "msg" not in payload


def test_setup_logging_writes_json_to_stream() -> None:
    stream = io.StringIO()
    root = logging.getLogger()
    saved = (root.level, list(root.handlers))
    try:
        setup_logging("debug", stream=stream)
        logging.getLogger("sensorfusion.test").debug("pruned channel", extra={"channel": "A"})
    finally:
        root.setLevel(saved[0])
        root.handlers[:] = saved[1]
    payload = json.loads(stream.getvalue().splitlines()[0])
    assert payload["level"] == "DEBUG"
    assert payload["channel"] == "A"
    assert payload["where"].startswith("test_logging:")
