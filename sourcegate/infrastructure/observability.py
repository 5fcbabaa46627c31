"""Structured Logging — JSON formatter and setup for engine-call observability.

Invariants:
    - All logs include timestamp, level, logger name, and message
    - Extra fields (file_path, operation, error_code, ...) surfaced when present
    - JSON format in production, human-readable in development

Design Decisions:
    - JSONFormatter over third-party libs: zero dependencies, full control
    - setup_logging runs on every lifespan startup and owns exactly one named root handler
"""

import logging
import json
from datetime import datetime, timezone

EXTRA_FIELDS = (
    "file_path", "operation", "error_code", "diagnostics_count",
    "blocking", "format_mode", "engine_module", "verbose",
)


class JSONFormatter(logging.Formatter):
    """Format logs as JSON for structured logging in production."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in EXTRA_FIELDS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = val
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False, default=str)


HANDLER_NAME = "sourcegate"


def setup_logging(level: str = "INFO", fmt: str = "json"):
    """Configure logging for the application.

    Idempotent: the handler installed by an earlier call is replaced, so
    repeated app lifespans never duplicate log lines.
    """
    for existing in list(logging.root.handlers):
        if existing.get_name() == HANDLER_NAME:
            logging.root.removeHandler(existing)
    handler = logging.StreamHandler()
    handler.set_name(HANDLER_NAME)
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s — %(message)s",
        ))
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
