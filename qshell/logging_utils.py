"""Runtime logging helpers."""

from __future__ import annotations

import os
import sys

from loguru import logger

LOG_LEVEL_ENV = "QSHELL_LOG_LEVEL"
_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level:<7} | {name}:{function}:{line} | {message}"
_CONFIGURED = False


def configure_logging(*, level: str | None = None, force: bool = False) -> None:
    """Configure process-level logging once."""
    global _CONFIGURED
    if _CONFIGURED and not force:
        return

    resolved = (level or os.getenv(LOG_LEVEL_ENV, "WARNING")).upper()
    logger.remove()
    logger.add(
        sys.stderr,
        level=resolved,
        format=_FORMAT,
        backtrace=False,
        diagnose=False,
    )
    _CONFIGURED = True
