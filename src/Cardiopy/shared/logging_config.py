# src/Cardiopy/shared/logging_config.py
# -*- coding: utf-8 -*-
"""
Logging setup for Cardiopy.

All package loggers hang below the 'Cardiopy' logger. setup_logging() gives
that logger three handlers:

- stderr, so command output on stdout stays machine readable
- a per-run file named cardiopy_<timestamp>.log
- app.log, rewritten on every run, holding only the latest session

Dev mode (the --dev flag or CARDIOPY_DEV_MODE=1) drops every threshold to
DEBUG and tags each record with its source location.

Usage:
    from Cardiopy.shared.logging_config import setup_logging, get_logger
    setup_logging(dev_mode=True)
    log = get_logger(__name__)
"""
import logging
import os
import sys
from datetime import datetime
from pathlib import Path

from Cardiopy.shared.constants import DEFAULT_LOG_DIR, DEV_MODE_ENV_VAR

PACKAGE_LOGGER_NAME = 'Cardiopy'
LATEST_RUN_LOG = 'app.log'

RELEASE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DEV_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s'

# (console, file) thresholds
RELEASE_LEVELS = (logging.INFO, logging.INFO)
DEV_LEVELS = (logging.DEBUG, logging.DEBUG)


def dev_mode_from_env() -> bool:
    """True when CARDIOPY_DEV_MODE holds 1, true or yes (any case)."""
    value = os.environ.get(DEV_MODE_ENV_VAR)
    return bool(value) and value.lower() in ('1', 'true', 'yes')


def _attach(logger: logging.Logger, handler: logging.Handler, level: int, formatter: logging.Formatter) -> None:
    handler.setLevel(level)
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def setup_logging(dev_mode=False, log_dir=None, log_filename=None):
    """
    (Re)configures the package logger. Safe to call repeatedly; handlers
    from a previous call are closed first.

    Args:
        dev_mode (bool): DEBUG thresholds and source locations in every record.
        log_dir (Path, optional): Where the log files go. Defaults to ~/.cardiopy/logs/
        log_filename (str, optional): Per-run file name; timestamped when omitted.

    Returns:
        logging.Logger: the 'Cardiopy' logger
    """
    package_logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    for old_handler in list(package_logger.handlers):
        package_logger.removeHandler(old_handler)
        old_handler.close()
    package_logger.setLevel(logging.DEBUG)

    console_level, file_level = DEV_LEVELS if dev_mode else RELEASE_LEVELS
    formatter = logging.Formatter(DEV_FORMAT if dev_mode else RELEASE_FORMAT)

    directory = Path(log_dir) if log_dir else DEFAULT_LOG_DIR
    directory.mkdir(parents=True, exist_ok=True)
    run_log = directory / (log_filename or f"cardiopy_{datetime.now():%Y-%m-%d_%H-%M-%S}.log")

    _attach(package_logger, logging.StreamHandler(sys.stderr), console_level, formatter)
    _attach(package_logger, logging.FileHandler(run_log), file_level, formatter)
    _attach(package_logger, logging.FileHandler(directory / LATEST_RUN_LOG, mode='w'), file_level, formatter)

    package_logger.info(f"Cardiopy logging ready ({'dev' if dev_mode else 'release'} mode), writing to {run_log}")
    return package_logger


def get_logger(name):
    """
    Returns the logger `name` under the Cardiopy namespace.

    Args:
        name (str): Dotted logger name; 'Cardiopy.' is prepended when missing.
    """
    if not name.startswith(f'{PACKAGE_LOGGER_NAME}.'):
        name = f'{PACKAGE_LOGGER_NAME}.{name}'
    return logging.getLogger(name)
