"""Utilities for logging.
"""
import logging
import sys
from logging import Logger


def get_logger() -> Logger:
    """Getter for the main logger.

    Messages go to stderr, since stdout is reserved for the scalar accuracy consumed by parameter search.
    """
    logger_name = "relocperf-logger"
    logger = logging.getLogger(logger_name)
    logger.setLevel(logging.INFO)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        fmt = "[%(asctime)s %(levelname)s %(filename)s line %(lineno)d %(process)d] %(message)s"
        handler.setFormatter(logging.Formatter(fmt))
        logger.addHandler(handler)
    return logger
