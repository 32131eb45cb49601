import json
import logging

from flowlog_tool import logging as flow_logging
from flowlog_tool.logging import get_logger


def test_explicit_level_is_applied():
    logger = get_logger("flowlog_tool.tests.explicit", level="debug")
    assert logger.level == logging.DEBUG


def test_level_defaults_to_settings(monkeypatch):
    monkeypatch.setattr(flow_logging.settings, "log_level", "WARNING")
    logger = get_logger("flowlog_tool.tests.from_settings")
    assert logger.level == logging.WARNING


def test_unknown_level_falls_back_to_info():
    logger = get_logger("flowlog_tool.tests.unknown", level="CHATTY")
    assert logger.level == logging.INFO


def test_handler_is_attached_once():
    first = get_logger("flowlog_tool.tests.reuse", level=logging.ERROR)
    second = get_logger("flowlog_tool.tests.reuse", level="DEBUG")
    assert first is second
    assert len(second.handlers) == 1
    assert second.level == logging.ERROR


def test_records_are_json_lines(capsys):
    logger = get_logger("flowlog_tool.tests.format", level="INFO")
    logger.info("counted %d flows", 3)
    record = json.loads(capsys.readouterr().out.strip())
    assert record["lvl"] == "INFO"
    assert record["mod"] == "flowlog_tool.tests.format"
    assert record["msg"] == "counted 3 flows"
