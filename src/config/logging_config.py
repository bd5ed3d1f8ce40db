# src/config/logging_config.py

"""Logging for naftas: one log file per process launch.

``setup_logging()`` attaches two handlers to the ``naftas`` logger: a
DEBUG file handler writing ``run_<launch timestamp>.log`` under
``Settings.LOGS_DIR`` and a stderr handler at ``Settings.CONSOLE_LOG_LEVEL``.
Every ``naftas.*`` child logger (sources, services, api, cli) propagates
to them.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path

from src.config.settings import Settings

_FILE_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(name)s | "
    "%(module)s:%(funcName)s:%(lineno)d | %(message)s"
)
_STDERR_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(logs_dir: Path | None = None) -> Path:
    """Configure the ``naftas`` logger for this run.

    Safe to call more than once: when handlers are already attached
    nothing is added and the path this call would have used is returned.

    Returns:
        Path of the per-run log file.
    """
    target_dir = logs_dir or Settings.LOGS_DIR
    target_dir.mkdir(parents=True, exist_ok=True)
    log_file = target_dir / f"run_{datetime.now():%Y%m%d_%H%M%S}.log"

    app_logger = logging.getLogger("naftas")
    app_logger.setLevel(logging.DEBUG)
    if app_logger.handlers:
        return log_file

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(_FILE_FORMAT, _DATE_FORMAT))

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setLevel(
        logging.getLevelName(Settings.CONSOLE_LOG_LEVEL.upper())
    )
    stderr_handler.setFormatter(
        logging.Formatter(_STDERR_FORMAT, _DATE_FORMAT)
    )

    app_logger.addHandler(file_handler)
    app_logger.addHandler(stderr_handler)
    app_logger.info("Logging to %s", log_file)
    return log_file
