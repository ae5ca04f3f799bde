"""Shared utilities for installer_console: logging setup, date formatting."""

import logging
import sys
from datetime import datetime, tzinfo
from typing import Optional

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Route all logging to stderr with a single handler."""
    logging.basicConfig(
        level=level.upper(),
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[logging.StreamHandler(sys.stderr)],
        force=True,
    )
    for name in ("httpx", "httpcore", "uvicorn.access"):
        logging.getLogger(name).setLevel(logging.WARNING)


def format_date(time_ms: int, tz: Optional[tzinfo] = None) -> str:
    """Format a millisecond timestamp as ``HH:mm:ss:SSS yyyy-MMM-dd``; -1 gives '-'."""
    if time_ms == -1:
        return "-"
    d = datetime.fromtimestamp(time_ms // 1000, tz=tz)
    return f"{d:%H:%M:%S}:{time_ms % 1000:03d} {d:%Y-%b-%d}"
