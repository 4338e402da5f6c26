import json
import logging

from nowplaying_bot.utils.logging import JsonFormatter, setup_logging


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord("nowplaying_bot.test", logging.WARNING, __file__, 1, "Cycle failed", None, None)
    record.__dict__.update(extra)
    return record


def test_json_line_has_level_logger_and_extra():
    entry = json.loads(JsonFormatter().format(_record(track="Song A - Artist X")))
    assert entry["message"] == "Cycle failed"
    assert entry["level"] == "WARNING"
    assert entry["logger"] == "nowplaying_bot.test"
    assert entry["track"] == "Song A - Artist X"
    assert "time" in entry


def test_setup_logging_installs_single_handler():
    root = logging.getLogger()
    saved = root.handlers[:], root.level
    try:
        setup_logging("debug", json_output=False)
        assert len(root.handlers) == 1
        assert not isinstance(root.handlers[0].formatter, JsonFormatter)
        assert root.level == logging.DEBUG
        assert logging.getLogger("aiohttp").level == logging.WARNING

        setup_logging("info", json_output=True)
        assert isinstance(root.handlers[0].formatter, JsonFormatter)
    finally:
        root.handlers[:] = saved[0]
        root.setLevel(saved[1])
