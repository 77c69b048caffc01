"""Logging configuration for the API process.

Installs a single stdout handler on the root logger. Level comes from
``settings.LOG_LEVEL``.
"""

import logging
import sys

from config.settings import settings


def setup_logging() -> None:
    """Configure the root logger (safe to call more than once)."""
    log_level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    formatter = logging.Formatter(
        fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S%z",
    )

    handler = logging.StreamHandler(stream=sys.stdout)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.setLevel(log_level)

    # Replace handlers instead of stacking duplicates on reload
    root.handlers.clear()
    root.addHandler(handler)

    # SQL echo is noisy at INFO
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
