"""
Central logging configuration.

Entry points (CLI, web app) call setup_logging() once; modules grab a
logger with get_logger(__name__).
"""

import logging
import logging.config
from typing import Any, Dict, Union

DEFAULT_LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_CONFIGURED = False


class MaxLevelFilter(logging.Filter):
    """Allow only records up to (and including) `max_level`."""

    def __init__(self, max_level: int) -> None:
        super().__init__()
        self.max_level = max_level

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno <= self.max_level


def build_logging_config(level: Union[str, int] = "INFO") -> Dict[str, Any]:
    """
    Build a dictConfig-style configuration.

    INFO and below go to stdout, WARNING and above to stderr.
    """
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {
            "stdout_max_info": {"()": MaxLevelFilter, "max_level": logging.INFO},
        },
        "formatters": {
            "standard": {"format": DEFAULT_LOG_FORMAT, "datefmt": DEFAULT_DATE_FORMAT},
        },
        "handlers": {
            "stdout": {
                "class": "logging.StreamHandler",
                "formatter": "standard",
                "filters": ["stdout_max_info"],
                "level": "DEBUG",
                "stream": "ext://sys.stdout",
            },
            "stderr": {
                "class": "logging.StreamHandler",
                "formatter": "standard",
                "level": "WARNING",
                "stream": "ext://sys.stderr",
            },
        },
        "root": {"level": level, "handlers": ["stdout", "stderr"]},
    }


def setup_logging(level: Union[str, int] = "INFO", override_existing: bool = False) -> None:
    """Configure logging once per process."""
    global _CONFIGURED

    if _CONFIGURED and not override_existing:
        return
    logging.config.dictConfig(build_logging_config(level))
    _CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    """Module logger under the autotrace namespace."""
    if name == "autotrace" or name.startswith("autotrace."):
        return logging.getLogger(name)
    return logging.getLogger(f"autotrace.{name}")
