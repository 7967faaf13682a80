"""Single place where the loguru sink is (re)configured."""
from __future__ import annotations

import sys

from loguru import logger

from sos_dispatch.config import LOG_LEVEL

_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function} - {message}"


def configure_logging(level: str | None = None) -> None:
    """Replace loguru's default sink with one stderr sink at ``level``."""

    logger.remove()
    logger.add(sys.stderr, level=(level or LOG_LEVEL).upper(), format=_FORMAT)


__all__ = ["configure_logging"]
