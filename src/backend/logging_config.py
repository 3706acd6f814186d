"""Logging setup for the tree API process."""
from __future__ import annotations

from logging.config import dictConfig
from pathlib import Path
from typing import Any

from config import _get_logging_config

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def build_logging_config(level: str = "INFO", log_file: str | None = None) -> dict[str, Any]:
    handlers: dict[str, Any] = {
        "console": {
            "level": level,
            "class": "logging.StreamHandler",
            "formatter": "standard",
        },
    }
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers["file"] = {
            "level": level,
            "class": "logging.handlers.RotatingFileHandler",
            "formatter": "standard",
            "filename": str(log_file),
            "maxBytes": 10_000_000,  # 10 MB
            "backupCount": 5,
            "encoding": "utf-8",
        }
    handler_names = list(handlers)

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {"format": LOG_FORMAT},
        },
        "handlers": handlers,
        "loggers": {
            "": {
                "handlers": handler_names,
                "level": level,
                "propagate": True,
            },
            "uvicorn": {
                "handlers": handler_names,
                "level": level,
                "propagate": False,
            },
            "uvicorn.error": {
                "handlers": handler_names,
                "level": level,
                "propagate": False,
            },
            "uvicorn.access": {
                "handlers": handler_names,
                "level": level,
                "propagate": False,
            },
        },
    }


def setup_logging() -> None:
    """Configure root and uvicorn loggers from config.yaml."""
    logging_config = _get_logging_config()
    dictConfig(build_logging_config(logging_config["level"], logging_config["file"]))
