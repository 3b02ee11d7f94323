# listings_admin/utils.py
"""Shared logging setup."""
import logging
from . import config


def get_logger(name=__name__):
    logging.basicConfig(
        format="%(asctime)s | %(levelname)-7s | %(name)s | %(message)s",
        level=getattr(logging, config.LOG_LEVEL, logging.INFO)
    )
    return logging.getLogger(name)

logger = get_logger("listings-admin")
