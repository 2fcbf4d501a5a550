import json
import logging

from pythonjsonlogger.json import JsonFormatter

import src.utils.logging as log_utils


def test_setup_logging_production_json(monkeypatch, tmp_path):
    monkeypatch.setattr(log_utils.settings, "ENVIRONMENT", "production", raising=False)
    monkeypatch.setattr(log_utils.settings, "LOG_LEVEL", "INFO", raising=False)
    monkeypatch.setattr(log_utils.settings, "LOG_DIR", str(tmp_path), raising=False)

    logger = log_utils.setup_logging("test_logger_prod")

    assert all(isinstance(h.formatter, JsonFormatter) for h in logger.handlers)
    assert len(logger.handlers) == 2
    assert log_utils.log_file_path("test_logger_prod").exists()


def test_production_records_carry_extra_fields(monkeypatch, tmp_path):
    monkeypatch.setattr(log_utils.settings, "ENVIRONMENT", "production", raising=False)
    monkeypatch.setattr(log_utils.settings, "LOG_LEVEL", "INFO", raising=False)
    monkeypatch.setattr(log_utils.settings, "LOG_DIR", str(tmp_path), raising=False)

    logger = log_utils.setup_logging("test_logger_extra")
    logger.error("stage failed", extra={"stage": "validate", "error_code": "DATA_QUALITY_VIOLATION"})
    for handler in logger.handlers:
        handler.flush()

    line = log_utils.log_file_path("test_logger_extra").read_text(encoding="utf-8").strip().splitlines()[-1]
    payload = json.loads(line)
    assert payload["message"] == "stage failed"
    assert payload["stage"] == "validate"
    assert payload["error_code"] == "DATA_QUALITY_VIOLATION"


def test_setup_logging_dev_formatter(monkeypatch):
    monkeypatch.setattr(log_utils.settings, "ENVIRONMENT", "development", raising=False)
    monkeypatch.setattr(log_utils.settings, "LOG_LEVEL", "DEBUG", raising=False)
    monkeypatch.setattr(log_utils.settings, "LOG_DIR", "", raising=False)

    logger = log_utils.setup_logging("test_logger_dev")

    assert len(logger.handlers) == 1
    assert not isinstance(logger.handlers[0].formatter, JsonFormatter)
    assert logger.level == logging.DEBUG


def test_module_loggers_share_root_handlers(monkeypatch):
    monkeypatch.setattr(log_utils.settings, "ENVIRONMENT", "development", raising=False)
    monkeypatch.setattr(log_utils.settings, "LOG_DIR", "", raising=False)

    logger = log_utils.setup_logging("test_logger_root")

    assert logging.getLogger().handlers == logger.handlers


def test_get_logger_returns_named_logger():
    logger = log_utils.get_logger("src.processing.merge")
    assert logger.name == "src.processing.merge"
