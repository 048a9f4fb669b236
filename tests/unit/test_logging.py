"""
Module: tests/unit/test_logging.py

What:
    Check the JSON logger's level threshold, payload shape, and redaction of
    message content.

Why:
    Archives hold private mail. Log lines must stay parseable and must never
    carry message text, even when a caller passes it by mistake.
"""

import io
import json

import pytest

from mboxiter.utils.logging import REDACTED, JsonLogger, get_logger


def _lines(stream):
    return [json.loads(line) for line in stream.getvalue().splitlines()]


def test_entries_below_threshold_are_dropped():
    stream = io.StringIO()
    logger = JsonLogger(stream=stream, component="unit", level="INFO")
    logger.debug("hidden")
    logger.info("shown", size=3)
    logger.warning("also_shown")
    entries = _lines(stream)
    assert [entry["msg"] for entry in entries] == ["shown", "also_shown"]
    assert entries[0]["lvl"] == "INFO"
    assert entries[0]["component"] == "unit"
    assert entries[0]["size"] == 3
    assert "ts" in entries[0]


def test_sensitive_keys_are_redacted_at_any_depth():
    stream = io.StringIO()
    logger = JsonLogger(stream=stream, level="DEBUG")
    logger.error(
        "leak_attempt",
        text="Dragă Mihai",
        nested={"body": "secret", "boundary": "From a@b.c", "offset": 12},
        preview="hi",
    )
    (entry,) = _lines(stream)
    assert entry["text"] == REDACTED
    assert entry["preview"] == REDACTED
    assert entry["nested"] == {"body": REDACTED, "boundary": REDACTED, "offset": 12}
    assert "secret" not in stream.getvalue()


def test_non_json_values_are_stringified(tmp_path):
    stream = io.StringIO()
    JsonLogger(stream=stream, level="DEBUG").info("opened", path=tmp_path)
    (entry,) = _lines(stream)
    assert entry["path"] == str(tmp_path)


def test_get_logger_validates_level():
    stream = io.StringIO()
    logger = get_logger("mboxiter.test", level="debug", stream=stream)
    assert logger.level == "DEBUG"
    assert logger.enabled_for("debug")
    with pytest.raises(ValueError):
        get_logger("mboxiter.test", level="chatty")


def test_default_logger_writes_warnings_to_stderr(capsys):
    logger = get_logger("mboxiter.test")
    logger.info("quiet")
    logger.error("loud")
    err = capsys.readouterr().err
    assert '"msg":"loud"' in err
    assert "quiet" not in err
