"""
Logging setup for the cart API.

Importing this module attaches one stdout handler to the root logger.
``LOG_LEVEL`` picks the level. ``LOG_STYLE`` picks ``detailed`` (with
timestamps) or ``simple``; it defaults to ``simple`` on Vercel, whose
log drain stamps lines itself.

    from kaimono.logging import get_logger
    logger = get_logger(__name__)
"""

import logging
import os
import sys
from functools import cache

LOG_FORMATS = {
    "detailed": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    "simple": "%(levelname)s - %(name)s - %(message)s",
}

# upstash-redis talks REST over httpx, which logs each request at INFO
QUIET_LOGGERS = ("httpx",)

_LOG_ESCAPES = str.maketrans({"\n": "\\n", "\r": "\\r", "\t": "\\t", "\x00": None})


def _get_log_level() -> int:
    level_name = os.environ.get("LOG_LEVEL", "INFO").upper()
    return getattr(logging, level_name, logging.INFO)


def _get_log_style() -> str:
    default = "simple" if os.environ.get("VERCEL") == "1" else "detailed"
    style = os.environ.get("LOG_STYLE", default).lower()
    return style if style in LOG_FORMATS else default


def configure_logging() -> None:
    """Attach the stdout handler unless the root logger already has one."""
    root = logging.getLogger()
    if root.handlers:
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMATS[_get_log_style()]))
    root.addHandler(handler)
    root.setLevel(_get_log_level())

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


configure_logging()


@cache
def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def sanitize_id_for_logging(id_value: str | None) -> str:
    """
    Shorten a cart ID or session token to its first 8 characters.

    Control characters are escaped first so a crafted ID cannot forge
    log lines (CWE-117). Empty values log as ``N/A``.
    """
    if not id_value:
        return "N/A"
    return str(id_value).translate(_LOG_ESCAPES)[:8]


__all__ = [
    "LOG_FORMATS",
    "configure_logging",
    "get_logger",
    "sanitize_id_for_logging",
]
