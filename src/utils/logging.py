"""
County Natality Analysis - Logging Configuration
Console logging for every run, JSON-formatted in production, plus one log
file per pipeline per day under LOG_DIR
"""

import logging
import sys
from datetime import date
from pathlib import Path

from pythonjsonlogger.json import JsonFormatter

from config.settings import get_settings

settings = get_settings()

JSON_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"
TEXT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def _formatter() -> logging.Formatter:
    if settings.ENVIRONMENT == "production":
        # Extra fields (stage, error_code, records) become JSON keys
        return JsonFormatter(fmt=JSON_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S")
    return logging.Formatter(fmt=TEXT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")


def log_file_path(name: str) -> Path:
    """Daily log file for a pipeline, e.g. logs/pipeline_20221231.log"""
    return Path(settings.LOG_DIR) / f"{name}_{date.today():%Y%m%d}.log"


def setup_logging(name: str = "natality_pipeline") -> logging.Logger:
    """
    Configure logging for a pipeline run.

    Module loggers obtained with get_logger() have no handlers of their own;
    they reach the same console and file handlers through the root logger.

    Args:
        name: Pipeline logger name, also used for the log file name

    Returns:
        Configured logger instance
    """
    formatter = _formatter()

    handlers = [logging.StreamHandler(sys.stdout)]
    if settings.LOG_DIR:
        path = log_file_path(name)
        path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(path, encoding="utf-8"))

    for handler in handlers:
        handler.setFormatter(formatter)

    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, settings.LOG_LEVEL))
    logger.handlers = list(handlers)
    logger.propagate = False

    root_logger = logging.getLogger()
    root_logger.setLevel(logger.level)
    root_logger.handlers = list(handlers)

    return logger


def get_logger(module_name: str) -> logging.Logger:
    """
    Get a logger for a specific module.

    Args:
        module_name: Name of the module (typically __name__)

    Returns:
        Logger instance
    """
    return logging.getLogger(module_name)
