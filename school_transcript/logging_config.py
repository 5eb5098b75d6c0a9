"""Loguru setup shared by the schema tooling.

Every record carries a ``module`` extra. ``get_logger(name=__name__)``
binds it per module; records from the bare logger show the package name.
"""

import sys
from typing import Optional

from loguru import logger

from school_transcript.settings import get_settings


LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{extra[module]}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "{message}"
)


def configure_logging(level: Optional[str] = None) -> None:
    """Install a single stderr sink at ``level`` or the configured log level."""
    logger.remove()
    logger.configure(extra={"module": "school_transcript"})
    logger.add(
        sys.stderr,
        level=(level or get_settings().log_level).upper(),
        format=LOG_FORMAT,
        backtrace=False,
        diagnose=False,
    )


def get_logger(name: Optional[str] = None, **kwargs):
    """Return a logger bound with an optional module/component name."""
    if name:
        return logger.bind(module=name, **kwargs)
    return logger.bind(**kwargs)
