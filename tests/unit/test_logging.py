from __future__ import annotations

import json
import logging
import sys

from mockdb.utils.logging import JsonFormatter, _json_formatter, configure_logging

EXPECTED_RECORDS = 10


def _record(msg: str = "hello") -> logging.LogRecord:
    return logging.LogRecord(
        name="test.logger",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=msg,
        args=(),
        exc_info=None,
    )


def test_json_formatter_promotes_standard_extra_fields() -> None:
    record = _record()
    record.records = EXPECTED_RECORDS
    record.collection = "notifications"

    payload = json.loads(_json_formatter(record))

    assert payload["level"] == "INFO"
    assert payload["logger"] == "test.logger"
    assert payload["message"] == "hello"
    assert payload["records"] == EXPECTED_RECORDS
    assert payload["collection"] == "notifications"
    assert "pathname" not in payload


def test_json_formatter_includes_traceback() -> None:
    try:
        raise ValueError("bad record")
    except ValueError:
        record = logging.LogRecord(
            "test.logger", logging.ERROR, __file__, 1, "failed", (), sys.exc_info()
        )

    payload = json.loads(_json_formatter(record))

    assert payload["level"] == "ERROR"
    assert "ValueError: bad record" in payload["exc_info"]


def test_json_formatter_stringifies_unserializable_extras() -> None:
    record = _record()
    record.owner = object()

    payload = json.loads(JsonFormatter().format(record))

    assert payload["owner"].startswith("<object object")


def test_configure_logging_sets_root_level() -> None:
    configure_logging(level="WARNING", json_logs=True)
    root = logging.getLogger()

    assert root.level == logging.WARNING
    assert any(isinstance(h.formatter, JsonFormatter) for h in root.handlers)

    configure_logging(level="INFO")
