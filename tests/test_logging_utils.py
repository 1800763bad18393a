import json
import logging

from lacework_client.logging_utils import (
    ROOT_LOGGER_NAME,
    JSONFormatter,
    configure_logging,
    get_logger,
    log_level_from_environment,
    valid_level,
)


def _own_handlers():
    return [
        handler
        for handler in logging.getLogger(ROOT_LOGGER_NAME).handlers
        if getattr(handler, "_lacework_handler", False)
    ]


def test_get_logger_lives_under_the_package_namespace():
    assert get_logger("http").name == "lacework_client.http"
    assert get_logger("lacework_client.auth").name == "lacework_client.auth"


def test_valid_levels():
    assert valid_level("")
    assert valid_level("info")
    assert valid_level("DEBUG")
    assert not valid_level("TRACE")


def test_level_from_environment(monkeypatch):
    monkeypatch.setenv("LW_LOG", "debug")
    assert log_level_from_environment() == "DEBUG"
    monkeypatch.setenv("LW_LOG", "loud")
    assert log_level_from_environment() == ""


def test_configure_logging_replaces_its_handler():
    configure_logging("DEBUG")
    configure_logging("INFO")
    assert len(_own_handlers()) == 1
    assert logging.getLogger(ROOT_LOGGER_NAME).level == logging.INFO

    configure_logging("")
    assert logging.getLogger(ROOT_LOGGER_NAME).level == logging.WARNING


def test_configure_logging_json_format():
    configure_logging("INFO", json_format=True)
    assert isinstance(_own_handlers()[0].formatter, JSONFormatter)
    configure_logging("")


def test_json_formatter_merges_fields():
    record = logging.LogRecord("lacework_client.http", logging.INFO, __file__, 1, "request %s", ("GET",), None)
    record.fields = {"url": "http://x"}

    entry = json.loads(JSONFormatter().format(record))

    assert entry["message"] == "request GET"
    assert entry["level"] == "INFO"
    assert entry["logger"] == "lacework_client.http"
    assert entry["url"] == "http://x"
