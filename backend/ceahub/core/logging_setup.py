# backend/ceahub/core/logging_setup.py
from __future__ import annotations

import logging.config


def configure_logging(level: str = "INFO") -> None:
    """
    One console handler on the root logger; `ceahub.*` loggers propagate
    to it at the configured level.
    """
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {
                    "format": "%(asctime)s %(levelname)s [%(name)s] %(message)s",
                },
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "default",
                },
            },
            "root": {"handlers": ["console"], "level": "WARNING"},
            "loggers": {
                "ceahub": {"level": level},
            },
        }
    )
