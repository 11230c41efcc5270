"""Logging configuration for the marketplace server and CLI."""

from __future__ import annotations

import json
import logging
import sys
from typing import Optional


class JSONFormatter(logging.Formatter):
    """One JSON object per line, for log shippers."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_data)


def setup_logging(
    level: int = logging.INFO,
    json_logs: bool = False,
    stream: Optional[object] = None,
) -> logging.Logger:
    """Configure the ``nebula`` and ``web`` logger hierarchies.

    Calling this more than once replaces the previously installed handler
    instead of stacking duplicates.
    """
    handler = logging.StreamHandler(stream or sys.stderr)
    if json_logs:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)-8s %(name)s: %(message)s")
        )
    handler.set_name("nebula")

    root = logging.getLogger("nebula")
    for name in ("nebula", "web"):
        logger = logging.getLogger(name)
        for existing in list(logger.handlers):
            if existing.get_name() == "nebula":
                logger.removeHandler(existing)
        logger.addHandler(handler)
        logger.setLevel(level)
        logger.propagate = False
    return root
