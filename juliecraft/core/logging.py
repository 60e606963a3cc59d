# juliecraft/core/logging.py

import logging

from juliecraft.core.config import LOG_LEVEL

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = LOG_LEVEL) -> None:
    """Installs one stream handler on the package logger (safe to call twice)."""
    logger = logging.getLogger("juliecraft")
    logger.setLevel(level)

    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
        logger.propagate = False
