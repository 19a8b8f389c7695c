"""
Unified logging configuration for resumescorer.
"""

import logging
import logging.config
from typing import Any, Dict, Optional

from rich.console import Console

from resumescorer.config import LoggingConfig

PACKAGE_LOGGER_NAME = "resumescorer"
REQUEST_LOGGER_NAME = "resumescorer.request"
ANALYSIS_LOGGER_NAME = "resumescorer.analysis"

# Logs go to stderr so command output on stdout stays machine readable
LOG_CONSOLE = Console(stderr=True)


def _get_handlers(config: LoggingConfig, level: str) -> Dict[str, Dict[str, Any]]:
    handlers: Dict[str, Dict[str, Any]] = {
        "console": {
            "class": "rich.logging.RichHandler",
            "console": "ext://resumescorer.utils.logging_config.LOG_CONSOLE",
            "formatter": "console",
            "level": level,
            "rich_tracebacks": True,
            "show_path": False,
        },
    }

    if config.file:
        config.file.parent.mkdir(parents=True, exist_ok=True)
        handlers["file"] = {
            "class": "logging.FileHandler",
            "formatter": "detailed",
            "filename": str(config.file),
            "encoding": "utf-8",
            "level": "DEBUG",
        }

    return handlers


def setup_logging(config: Optional[LoggingConfig] = None, debug: bool = False) -> None:
    """Set up logging for the application.

    Args:
        config: Logging settings. Defaults are used when omitted.
        debug: Force DEBUG level on the console.
    """
    config = config or LoggingConfig()
    level = "DEBUG" if debug else config.level
    handlers = _get_handlers(config, level)

    logging_config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "console": {
                "format": "%(message)s",
                "datefmt": "[%X]",
            },
            "detailed": {
                "format": config.format,
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
        },
        "handlers": handlers,
        "loggers": {
            "": {  # root logger
                "handlers": ["console"],
                "level": "WARNING",
            },
            PACKAGE_LOGGER_NAME: {
                "handlers": list(handlers),
                "level": "DEBUG" if "file" in handlers else level,
                "propagate": False,
            },
        },
    }

    logging.config.dictConfig(logging_config)


def get_request_logger() -> logging.Logger:
    """Get the logger recording individual request attempts."""
    return logging.getLogger(REQUEST_LOGGER_NAME)


def get_analysis_logger() -> logging.Logger:
    """Get the analysis logger."""
    return logging.getLogger(ANALYSIS_LOGGER_NAME)
