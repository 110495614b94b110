"""
Structured logging for the matching engine.

Console output is plain text; the log file, when configured, gets one JSON
object per record with any structured fields merged in.
"""

import logging
import json
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from invoice_matcher.config import get_config


config = get_config()


class StructuredFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update(getattr(record, "fields", {}))
        return json.dumps(entry, default=str)


def setup_logging(name: str = __name__) -> logging.Logger:
    """Logger for a module, with console and optional JSON file handlers."""
    logger = logging.getLogger(name)
    level = getattr(logging, config.LOG_LEVEL.upper())
    logger.setLevel(level)

    # Modules are imported once, but guard against re-attaching on reload
    if logger.handlers:
        return logger

    handlers = [(logging.StreamHandler(), logging.Formatter(config.LOG_FORMAT))]
    if config.LOG_FILE:
        handlers.append((logging.FileHandler(config.LOG_FILE), StructuredFormatter()))

    for handler, formatter in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger


def log_agent_action(
    logger: logging.Logger,
    agent_name: str,
    action: str,
    details: Optional[Dict[str, Any]] = None,
    confidence: Optional[float] = None,
) -> None:
    """Log what a workflow node decided, with the identifiers behind it."""
    fields: Dict[str, Any] = {"agent": agent_name, "action": action}
    if confidence is not None:
        fields["confidence"] = confidence
    fields.update(details or {})

    logger.info(f"[{agent_name}] {action}", extra={"fields": fields})


def log_flag(logger: logging.Logger, invoice_number: str, flag: str) -> None:
    """Log a flag raised against an invoice."""
    logger.warning(
        f"Flag raised for {invoice_number}: {flag}",
        extra={"fields": {"type": "flag", "invoice_number": invoice_number, "flag": flag}},
    )
