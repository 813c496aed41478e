from __future__ import annotations

import logging
from logging.config import dictConfig
from typing import Optional

from .config import get_settings

PACKAGE_LOGGER = "trading_sessions"


def setup_logging(level: Optional[str] = None) -> None:
    """Attach a console handler to the ``trading_sessions`` logger.

    Only the package logger is configured; the root logger and any handlers an
    embedding application installed are left alone.
    """

    level_name = (level or get_settings().log_level).upper()
    resolved = logging.getLevelName(level_name)
    if not isinstance(resolved, int):
        resolved = logging.INFO

    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "sessions": {
                    "format": "%(asctime)s %(levelname)s trading_sessions [%(module)s] %(message)s",
                    "datefmt": "%Y-%m-%dT%H:%M:%SZ",
                }
            },
            "handlers": {
                "sessions_console": {
                    "class": "logging.StreamHandler",
                    "formatter": "sessions",
                    "stream": "ext://sys.stderr",
                }
            },
            "loggers": {
                PACKAGE_LOGGER: {
                    "level": resolved,
                    "handlers": ["sessions_console"],
                    "propagate": False,
                }
            },
        }
    )
