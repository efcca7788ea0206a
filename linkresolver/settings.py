"""Environment-driven settings for linkresolver.

Values are read once at import time from environment variables. Logging
follows the same dictionary layout Django projects use for ``LOGGING``
and is only applied when :func:`configure_logging` is called.
"""

from __future__ import annotations

import logging.config
import os
from typing import Any, Dict

CONFIG_PATH = os.getenv('LINKRESOLVER_CONFIG') or None

LOG_LEVEL = os.getenv('LINKRESOLVER_LOG_LEVEL', 'INFO').upper()


def build_logging(level: str = LOG_LEVEL) -> Dict[str, Any]:
    """Return a ``dictConfig`` mapping that logs to the console at ``level``."""

    return {
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': {
            'console': {
                'format': '%(asctime)s | %(levelname)-8s | %(name)s | %(message)s',
                'datefmt': '%Y-%m-%d %H:%M:%S',
            },
        },
        'handlers': {
            'console': {
                'class': 'logging.StreamHandler',
                'formatter': 'console',
            },
        },
        'root': {
            'handlers': ['console'],
            'level': level,
        },
        'loggers': {
            'linkresolver': {
                'handlers': ['console'],
                'level': level,
                'propagate': False,
            },
            'aiohttp': {
                'handlers': ['console'],
                'level': 'WARNING',
                'propagate': False,
            },
        },
    }


LOGGING = build_logging()


def configure_logging(level: str | None = None) -> None:
    """Apply :data:`LOGGING`, optionally overriding the level."""

    logging.config.dictConfig(build_logging(level.upper()) if level else LOGGING)
