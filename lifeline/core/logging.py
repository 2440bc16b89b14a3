from __future__ import annotations

import logging
import sys
from loguru import logger

_LOGGING_CONFIGURED = False

LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level} | {name}:{function}:{line} - {message}"


def setup_logging(level: str = "INFO", *, enqueue: bool = True) -> None:
    global _LOGGING_CONFIGURED
    if _LOGGING_CONFIGURED:
        return

    logging.basicConfig(level=level.upper())
    # SQL echo is far too chatty below WARNING
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

    logger.remove()
    logger.add(
        sys.stdout,
        level=level.upper(),
        format=LOG_FORMAT,
        enqueue=enqueue,
        diagnose=False,
        backtrace=False,
    )

    _LOGGING_CONFIGURED = True
