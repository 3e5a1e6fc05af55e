"""Logging setup shared by the API, the dashboard client and scripts."""

from __future__ import annotations

import logging
import sys
from typing import Optional

from inkbook.utils.config import get_settings


LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

# Libraries whose INFO output drowns out studio events.
_QUIET_LOGGERS = ("urllib3", "multipart", "watchdog")

_configured = False


def configure_logging(level: Optional[str] = None, force: bool = False) -> None:
    """Send every record to stdout in one pipe-separated format.

    The first call wins; pass ``force=True`` to re-apply with a new level,
    e.g. after the launcher has read ``LOG_LEVEL``.
    """

    global _configured
    if _configured and not force:
        return

    resolved_level = (level or get_settings().log_level).upper()
    logging.basicConfig(level=resolved_level, format=LOG_FORMAT, stream=sys.stdout, force=force)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    _configured = True


def get_logger(name: str) -> logging.Logger:
    configure_logging()
    return logging.getLogger(name)
