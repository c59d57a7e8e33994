import logging

import pytest

from cos_sdk import config
from cos_sdk.logging import setup
from cos_sdk.logging.format import AddFormattedAttributes, DefaultFormatter


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    level = root.level
    loggers = {name: logging.getLogger(name).level for name in ["cos_sdk", *setup.default_log_levels]}
    yield
    logging.captureWarnings(False)
    for handler in list(root.handlers):
        if isinstance(handler.formatter, DefaultFormatter):
            root.removeHandler(handler)
    root.setLevel(level)
    for name, logger_level in loggers.items():
        logging.getLogger(name).setLevel(logger_level)


def test_setup_logging(restore_logging):
    setup.setup_logging(logging.DEBUG)

    root = logging.getLogger()
    assert len(root.handlers) == 1
    assert isinstance(root.handlers[0].formatter, DefaultFormatter)
    assert any(isinstance(f, AddFormattedAttributes) for f in root.handlers[0].filters)
    assert logging.getLogger("cos_sdk").level == logging.DEBUG
    assert logging.getLogger("botocore").level == logging.ERROR
    assert logging.getLogger("cos_sdk.wire").level == logging.WARNING


@pytest.mark.parametrize(
    "sdk_log, debug, expected",
    [
        (False, False, logging.INFO),
        (False, True, logging.DEBUG),
        ("warn", False, logging.WARNING),
        ("error", True, logging.ERROR),
        ("trace", False, logging.DEBUG),
    ],
)
def test_get_log_level_from_config(monkeypatch, sdk_log, debug, expected):
    monkeypatch.setattr(config, "SDK_LOG", sdk_log)
    monkeypatch.setattr(config, "DEBUG", debug)
    assert setup.get_log_level_from_config() == expected


def test_trace_logging_enables_wire_log(monkeypatch, restore_logging):
    monkeypatch.setattr(config, "SDK_LOG", "trace")
    setup.setup_logging_from_config()
    assert logging.getLogger("cos_sdk.wire").level == logging.DEBUG
    assert logging.getLogger("cos_sdk.http.client").level == logging.DEBUG
