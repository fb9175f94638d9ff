"""Logging configuration for MediaRelay."""

import contextvars
import json
import logging
import sys
import traceback
from datetime import datetime, timezone
from typing import Any, Dict

# Context variable for storing the B2 object key in request scope
object_key_context: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "object_key", default=None
)

# Attributes every LogRecord carries; anything else came in through extra={...}
_STANDARD_RECORD_FIELDS = frozenset(
    [
        "name", "msg", "args", "created", "filename", "funcName",
        "levelname", "levelno", "lineno", "module", "msecs",
        "message", "pathname", "process", "processName",
        "relativeCreated", "thread", "threadName", "exc_info",
        "exc_text", "stack_info", "taskName", "getMessage",
    ]
)


class CloudLoggingFormatter(logging.Formatter):
    """JSON formatter for structured log ingestion.

    Formats log records as single-line JSON objects. Exceptions and
    tracebacks are included as strings within the JSON structure.
    """

    # Map Python logging levels to Cloud Logging severity
    SEVERITY_MAP = {
        logging.DEBUG: "DEBUG",
        logging.INFO: "INFO",
        logging.WARNING: "WARNING",
        logging.ERROR: "ERROR",
        logging.CRITICAL: "CRITICAL",
    }

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as single-line JSON.

        Args:
            record: Log record to format

        Returns:
            Single-line JSON string
        """
        log_entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc)
            .isoformat()
            .replace("+00:00", "Z"),
            "severity": self.SEVERITY_MAP.get(record.levelno, "DEFAULT"),
            "message": record.getMessage(),
            "logger": record.name,
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        object_key = object_key_context.get()
        if object_key:
            log_entry["object_key"] = object_key

        # Add extra fields from logger.info(..., extra={...})
        for key, value in record.__dict__.items():
            if key not in _STANDARD_RECORD_FIELDS:
                log_entry[key] = value

        if record.exc_info:
            exc_text = "".join(traceback.format_exception(*record.exc_info))
            log_entry["exception"] = exc_text
            log_entry["exception_type"] = record.exc_info[0].__name__ if record.exc_info[0] else "Unknown"
            log_entry["exception_message"] = str(record.exc_info[1]) if record.exc_info[1] else ""

        return json.dumps(log_entry, default=str, ensure_ascii=False)


def setup_logging() -> None:
    """Configure structured logging for the application.

    Local environments get a plain text format at DEBUG level; everything
    else gets single-line JSON at the configured LOG_LEVEL.
    """
    from mediarelay.core.config import settings

    if settings.ENV == "local":
        log_level = logging.DEBUG
    else:
        log_level = logging.getLevelName(settings.LOG_LEVEL.upper())
        if not isinstance(log_level, int):
            log_level = logging.INFO

    handler = logging.StreamHandler(sys.stdout)

    if settings.ENV == "local":
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
    else:
        formatter = CloudLoggingFormatter()

    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    # httpx logs every request line at INFO
    logging.getLogger("httpx").setLevel(max(log_level, logging.WARNING))

    for logger_name in ["uvicorn", "uvicorn.access", "uvicorn.error"]:
        uvicorn_logger = logging.getLogger(logger_name)
        uvicorn_logger.setLevel(log_level)
        uvicorn_logger.handlers.clear()
        uvicorn_logger.addHandler(handler)
        uvicorn_logger.propagate = False
