# streamprep/common/logging.py
from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str = "streamprep", level: int | str | None = None) -> logging.Logger:
    """
    Return the application logger.
    If no handlers are set, we add a basicConfig once.
    """
    logger = logging.getLogger(name)
    if not logging.getLogger().handlers and not logger.handlers:
        logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
    if level is not None:
        logger.setLevel(level)
    return logger
