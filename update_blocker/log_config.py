"""
Structured Logging

JSON-formatted log output for the update blocker's loggers, suitable for log
aggregation systems like ELK Stack, Loki, or CloudWatch.
"""

import json
import logging
from datetime import datetime, timezone

from update_blocker.config import BlockerSettings

LOGGER_NAME = "update_blocker"

_EXTRA_FIELDS = ("url", "kind", "identifier")


class StructuredFormatter(logging.Formatter):
    """JSON formatter adding update-check context fields when present."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        # Add exception info if present
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for key in _EXTRA_FIELDS:
            if hasattr(record, key):
                log_data[key] = getattr(record, key)

        return json.dumps(log_data)


def configure_logging(settings: BlockerSettings) -> logging.Logger:
    """
    Attach a stream handler to the package logger.

    Uses StructuredFormatter when ``settings.log_json`` is set, a plain text
    format otherwise. Calling it again replaces the handler it installed.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(settings.log_level)

    for handler in list(logger.handlers):
        if getattr(handler, "_update_blocker", False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler._update_blocker = True  # type: ignore[attr-defined]
    if settings.log_json:
        handler.setFormatter(StructuredFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    logger.addHandler(handler)
    return logger
