"""Logging setup for applications using the memcache client."""

import logging
import sys
from typing import Optional

from .settings import settings

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(debug: Optional[bool] = None, level: Optional[str] = None) -> None:
    """
    Configure root logging for the client.

    Args:
        debug: Log at DEBUG level (default from settings.DEBUG)
        level: Level name used when debug is off (default settings.LOG_LEVEL)
    """
    if debug is None:
        debug = settings.DEBUG
    if debug:
        resolved = logging.DEBUG
    else:
        resolved = getattr(logging, (level or settings.LOG_LEVEL).upper(), logging.INFO)

    logging.basicConfig(
        level=resolved,
        format=LOG_FORMAT,
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
        force=True,
    )
