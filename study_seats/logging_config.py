"""Centralized logging configuration."""

from __future__ import annotations

import os
import sys
from typing import Optional

from loguru import logger


log_format = " | ".join(
    (
        "<lk>{time:YYYY-MM-DD HH:mm:ss.SSS}</>",
        "<lvl>{level:<8}</>",
        "<c>{name}:{function}:{line}</>",
        "{message}",
    )
)


def configure_logging(level: Optional[str] = None) -> None:
    level = (level or os.environ.get("STUDY_SEATS_LOG_LEVEL", "INFO")).upper()
    logger.remove()  # drop loguru's default handler so output is not duplicated
    logger.add(sys.stderr, format=log_format, level=level)
