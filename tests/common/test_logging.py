from __future__ import annotations

import json
import logging

from bucket_export.common.logging import JsonFormatter


def _record(msg: str, *args, extra=None, exc_info=None) -> logging.LogRecord:
    record = logging.LogRecord(
        "bucket_export.export", logging.ERROR, __file__, 1, msg, args, exc_info
    )
    if extra is not None:
        record.extra = extra
    return record


def test_formats_message_and_extra_payload():
    record = _record(
        "export_object_failed bucket=%s object=%s",
        "docs",
        "locked.txt",
        extra={"bucket": "docs", "object": "locked.txt", "path": "/out/docs/locked.txt"},
    )

    payload = json.loads(JsonFormatter().format(record))

    assert payload == {
        "level": "ERROR",
        "logger": "bucket_export.export",
        "message": "export_object_failed bucket=docs object=locked.txt",
        "bucket": "docs",
        "object": "locked.txt",
        "path": "/out/docs/locked.txt",
    }


def test_ignores_non_dict_extra():
    payload = json.loads(JsonFormatter().format(_record("hello", extra="nope")))

    assert payload["message"] == "hello"
    assert "nope" not in payload.values()


def test_includes_exception_text():
    try:
        raise OSError("disk full")
    except OSError:
        import sys

        record = _record("export_aborted", exc_info=sys.exc_info())

    payload = json.loads(JsonFormatter().format(record))

    assert "disk full" in payload["exc_info"]
