from __future__ import annotations

import logging.config
from pathlib import Path
from typing import Any

from photonctl.constants import LOGGER_NAME

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s"

LOGGING_CONFIG: dict[str, Any] = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {"fmt": {"format": LOG_FORMAT}},
    "handlers": {
        "stderr": {
            "class": "logging.StreamHandler",
            "level": "WARNING",
            "formatter": "fmt",
            "stream": "ext://sys.stderr",
        },
    },
    "loggers": {LOGGER_NAME: {"level": "DEBUG", "handlers": ["stderr"], "propagate": False}},
}


def logging_config(log_file: Path | None = None) -> dict[str, Any]:
    """Build the dictConfig for one CLI run; ``log_file`` records everything at DEBUG."""

    config: dict[str, Any] = {
        **LOGGING_CONFIG,
        "handlers": {name: dict(handler) for name, handler in LOGGING_CONFIG["handlers"].items()},
        "loggers": {name: dict(logger) for name, logger in LOGGING_CONFIG["loggers"].items()},
    }
    if log_file is not None:
        config["handlers"]["file"] = {
            "class": "logging.FileHandler",
            "level": "DEBUG",
            "formatter": "fmt",
            "filename": str(Path(log_file).expanduser()),
            "encoding": "utf-8",
        }
        config["loggers"][LOGGER_NAME]["handlers"] = ["stderr", "file"]
    return config


def configure_logging(log_file: Path | None = None) -> None:
    logging.config.dictConfig(logging_config(log_file))
