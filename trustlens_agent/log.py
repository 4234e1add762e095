from __future__ import annotations

import logging
import sys

from .config import load_env, log_level

_PACKAGE_LOGGER = "trustlens_agent"


def _configure_package_logger() -> logging.Logger:
    root = logging.getLogger(_PACKAGE_LOGGER)
    if root.handlers:
        return root

    # .env may carry TRUSTLENS_LOG_LEVEL, and loggers are created at import.
    load_env()
    root.setLevel(log_level())

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        logging.Formatter(
            "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    root.addHandler(handler)
    root.propagate = False
    return root


def get_logger(name: str) -> logging.Logger:
    """Module logger; records flow to the shared trustlens_agent handler.

    Usage:
        logger = get_logger(__name__)
    """
    _configure_package_logger()
    return logging.getLogger(name)
