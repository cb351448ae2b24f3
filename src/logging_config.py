"""Centralized logging configuration for the digest job.

Log calls can attach digest context through ``extra=`` (see
``CONTEXT_FIELDS``); both formatters render whatever context a record
carries, so a failure can be traced back to its board, card, assignee or
pipeline step.
"""

import json
import logging
import os
from datetime import datetime, timezone

CONTEXT_FIELDS = ("step", "board_id", "card_id", "assignee")

NOISY_LOGGERS = ("googleapiclient", "google.auth", "urllib3", "httpx", "httpcore")


def record_context(record: logging.LogRecord) -> dict[str, str]:
    """Digest context attached to a record, in CONTEXT_FIELDS order."""
    return {
        name: str(getattr(record, name))
        for name in CONTEXT_FIELDS
        if getattr(record, name, None) is not None
    }


class JSONFormatter(logging.Formatter):
    """One JSON object per line (NDJSON).

    Fields: timestamp, level, logger, message, any digest context
    (step, board_id, card_id, assignee) and optionally exception.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        log_entry.update(record_context(record))
        if record.exc_info and record.exc_info[0] is not None:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry, ensure_ascii=False)


class ContextTextFormatter(logging.Formatter):
    """Human-readable lines with digest context appended as key=value pairs."""

    def __init__(self):
        super().__init__("%(asctime)s [%(levelname)s] %(name)s: %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = record_context(record)
        if not context:
            return line
        pairs = " ".join(f"{key}={value}" for key, value in context.items())
        # Keep the traceback last when one was rendered.
        head, sep, tail = line.partition("\n")
        return f"{head} [{pairs}]{sep}{tail}"


def configure_logging(level_override: str | None = None) -> None:
    """Configure root logging for a digest run.

    Args:
        level_override: If set, takes precedence over LOG_LEVEL env var.

    Environment variables:
        LOG_LEVEL: DEBUG, INFO, WARNING or ERROR. Defaults to INFO.
        LOG_FORMAT: "json" for JSON lines, anything else for text.
    """
    level_name = (level_override or os.getenv("LOG_LEVEL", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)
    json_output = os.getenv("LOG_FORMAT", "text").lower() == "json"

    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(JSONFormatter() if json_output else ContextTextFormatter())

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
