"""Operational logging for configuration runs."""

from __future__ import annotations

import logging
import os

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(message)s"


def setup_operational_logger(
    run_id: str,
    *,
    level: str = "INFO",
    log_dir: str | None = None,
) -> tuple[logging.Logger, str | None]:
    """
    Configure the logger for one configuration run.

    Messages go to the console at `level`. When `log_dir` is given, everything
    down to DEBUG also goes to a UTF-8 file under it. The `sharekit` kernel
    logs through the same handlers.
    """

    logger_name = f"multi_image.{run_id}"
    logger = logging.getLogger(logger_name)
    logger.setLevel(logging.DEBUG)
    logger.handlers.clear()

    formatter = logging.Formatter(LOG_FORMAT)

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(logging.getLevelName(level.upper()))
    stream_handler.setFormatter(formatter)
    logger.addHandler(stream_handler)

    log_file = None
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        log_file = os.path.join(log_dir, f"{run_id}_oplog.log")
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.propagate = False

    kernel_logger = logging.getLogger("sharekit")
    kernel_logger.setLevel(logging.DEBUG)
    kernel_logger.handlers = list(logger.handlers)
    kernel_logger.propagate = False

    logger.info("Operational logging initialized for run %s", run_id)
    if log_file:
        logger.debug("Operational log file: %s", log_file)

    return logger, log_file
