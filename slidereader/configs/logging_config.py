"""
Logging configuration for SlideReader (configs).

Stdlib logging (used by the storage backend) and loguru (used everywhere
else) are configured together so both honour one level and one file.
"""

import logging
import logging.config
import os
import sys
from typing import Any

from loguru import logger as loguru_logger

from slidereader.configs.config import config

DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
CONSOLE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
FILE_FORMAT = (
    "%(asctime)s - %(name)s - %(levelname)s - "
    "%(module)s:%(funcName)s:%(lineno)d - %(message)s"
)
MAX_LOG_BYTES = 10 * 1024 * 1024
LOG_BACKUPS = 5


def _log_file_name(log_file: str | None, component: str) -> str:
    if log_file:
        return log_file
    if component == "default":
        return "slidereader.log"
    return f"{component}.log"


def _build_dict_config(
    level: str, log_format: str, log_path: str | None
) -> dict[str, Any]:
    handlers: dict[str, Any] = {
        "console": {
            "class": "logging.StreamHandler",
            "level": level,
            "formatter": "console",
            "stream": "ext://sys.stderr",
        }
    }
    if log_path:
        handlers["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "level": "DEBUG",
            "formatter": "file",
            "filename": log_path,
            "maxBytes": MAX_LOG_BYTES,
            "backupCount": LOG_BACKUPS,
        }

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "console": {"format": log_format, "datefmt": DATE_FORMAT},
            "file": {"format": FILE_FORMAT, "datefmt": DATE_FORMAT},
        },
        "handlers": handlers,
        "loggers": {
            "slidereader": {
                "level": level,
                "handlers": list(handlers),
                "propagate": False,
            },
        },
        "root": {"level": level, "handlers": list(handlers)},
    }


def setup_logging(
    log_level: str | None = None,
    log_format: str | None = None,
    enable_file_logging: bool = False,
    log_file: str | None = None,
    log_dir: str | None = None,
    component: str = "default",
) -> None:
    """
    Configure stdlib logging and loguru sinks.

    Console output always goes to stderr; stdout is left to the CLI. With
    ``enable_file_logging`` a rotating file ``<log_dir>/<component>.log`` (or
    ``log_file``) is added to both systems.
    """
    level = (log_level or config.log_level).upper()

    log_path = None
    if enable_file_logging:
        directory = log_dir or config.log_dir
        os.makedirs(directory, exist_ok=True)
        file_name = _log_file_name(log_file or config.log_file, component)
        log_path = os.path.join(directory, file_name)

    logging.config.dictConfig(
        _build_dict_config(level, log_format or CONSOLE_FORMAT, log_path)
    )

    loguru_logger.remove()
    loguru_logger.add(sys.stderr, level=level)
    if log_path:
        loguru_logger.add(
            log_path,
            level="DEBUG",
            rotation=MAX_LOG_BYTES,
            retention=LOG_BACKUPS,
            backtrace=False,
            diagnose=False,
        )
