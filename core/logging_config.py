"""Logging setup for hosts embedding the Brass Birmingham engine.

Engine modules log through ``get_logger(__name__)`` and never install
handlers themselves. A host calls ``setup_logging`` once to send engine
records to stdout as text or as JSON lines.
"""

from __future__ import annotations

import json
import logging
import sys
from typing import Optional

TEXT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class JsonLineFormatter(logging.Formatter):
    """Formats each record as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "time": self.formatTime(record, DATE_FORMAT),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry)


def setup_logging(
    level: str = "INFO",
    format_json: bool = False,
    logger_name: Optional[str] = None,
) -> logging.Handler:
    """Install a stdout handler.

    Args:
        level: Level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        format_json: Emit JSON lines instead of plain text.
        logger_name: Logger to configure (the root logger if None).

    Returns:
        The installed handler, so a host can remove it again.
    """
    handler = logging.StreamHandler(sys.stdout)
    if format_json:
        handler.setFormatter(JsonLineFormatter())
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT, datefmt=DATE_FORMAT))

    target = logging.getLogger(logger_name)
    target.setLevel(getattr(logging, level.upper(), logging.INFO))
    target.addHandler(handler)
    return handler


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


__all__ = ["JsonLineFormatter", "get_logger", "setup_logging"]
