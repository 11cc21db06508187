"""Structured Logging - JSON formatter and setup for production observability.

Invariants:
    - All logs include timestamp (the record's creation time), level, logger name, and message
    - Order context fields surfaced when present: placement records carry outcome
      and reason, stock records carry product_id and delta
    - Enum values are logged by value, UUIDs and Decimals as strings
    - JSON format in production, human-readable in development

Design Decisions:
    - stdlib JSONFormatter: no logging dependency beyond the standard library
    - setup_logging called once on startup via lifespan; calling it again
      replaces the handler it installed instead of stacking a second one
"""

import logging
import json
from datetime import datetime, timezone
from enum import Enum

ORDER_FIELDS = ("order_id", "customer", "outcome", "reason", "total", "status")
STOCK_FIELDS = ("product_id", "delta")
REQUEST_FIELDS = ("error_code", "path")

# Loggers that drown placement records at INFO
QUIET_LOGGERS = ("sqlalchemy.engine", "aiosqlite", "asyncio")


def _json_default(value: object) -> object:
    if isinstance(value, Enum):
        return value.value
    return str(value)


class JSONFormatter(logging.Formatter):
    """Format logs as JSON for structured logging in production."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.fromtimestamp(
                record.created, timezone.utc,
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in ORDER_FIELDS + STOCK_FIELDS + REQUEST_FIELDS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = val
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False, default=_json_default)


class _ShopHandler(logging.StreamHandler):
    """Marker type so setup_logging can find the handler it installed."""


def setup_logging(level: str = "INFO", fmt: str = "json"):
    """Configure logging for the application."""
    handler = _ShopHandler()
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s - %(message)s",
        ))
    for existing in list(logging.root.handlers):
        if isinstance(existing, _ShopHandler):
            logging.root.removeHandler(existing)
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
