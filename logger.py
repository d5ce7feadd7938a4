# -*- coding: utf-8 -*-

"""
Logging setup for the console runner.
"""

import logging
import sys

from config import settings


def setup_logger(name: str) -> logging.Logger:
    """
    Configure and return a logger with a stdout handler.

    Calling it again for the same name returns the existing logger untouched.
    """
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)
    logger.setLevel(log_level)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    logger.addHandler(handler)
    return logger
