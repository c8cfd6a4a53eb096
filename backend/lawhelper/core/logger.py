# backend/lawhelper/core/logger.py
"""
Application logger.

Modules either import ``logger`` from here or call ``logging.getLogger(__name__)``;
both end up under the ``lawhelper`` hierarchy and share this handler.
"""
import logging
import sys

from lawhelper.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def _build_logger() -> logging.Logger:
    log = logging.getLogger("lawhelper")
    if not log.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        log.addHandler(handler)
    log.setLevel(settings.LOG_LEVEL.upper())
    return log


logger = _build_logger()
