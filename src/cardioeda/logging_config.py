from __future__ import annotations

import logging
import os
import sys
from pythonjsonlogger.json import JsonFormatter

APP_LOGGER = "cardioeda"

# Fields rendered on every record; extra={...} keys are appended by the formatter
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s %(module)s %(funcName)s %(lineno)d"


def setup_logging(app_name: str = APP_LOGGER) -> logging.Logger:
    """
    JSON structured logger for a pipeline run: stdout always, plus a file
    when LOG_FILE is set. Level comes from LOG_LEVEL (default INFO).
    Stage modules log through children of this logger (cardioeda.<module>).
    """
    logger = logging.getLogger(app_name)
    logger.setLevel(os.getenv("LOG_LEVEL", "INFO").upper())
    logger.propagate = False

    # Running the pipeline twice in one process must not double every line
    if logger.handlers:
        return logger

    formatter = JsonFormatter(LOG_FORMAT)

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(formatter)
    logger.addHandler(console)

    log_file = os.getenv("LOG_FILE")  # e.g. logs/pipeline.jsonl
    if log_file:
        os.makedirs(os.path.dirname(log_file) or ".", exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def get_logger(module_name: str) -> logging.Logger:
    """Child logger for a stage module, e.g. get_logger(__name__) -> cardioeda.preprocess."""
    return logging.getLogger(f"{APP_LOGGER}.{module_name.rsplit('.', 1)[-1]}")
