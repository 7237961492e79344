"""Structured JSON logging configuration."""

import json
import logging
from datetime import datetime, timezone
from typing import Dict, Any

REDACTED = "***"

# Extra fields never written out in clear text
SENSITIVE_KEYS = {"password", "token", "authorization", "secret"}


def _is_sensitive(key: str) -> bool:
    lowered = key.lower()
    return any(marker in lowered for marker in SENSITIVE_KEYS)


class JSONFormatter(logging.Formatter):
    """Format log records as JSON for structured logging."""

    # Standard LogRecord attributes that should not be included as extra fields
    _STANDARD_ATTRS = {
        'name', 'msg', 'args', 'created', 'filename', 'funcName', 'levelname',
        'levelno', 'lineno', 'module', 'msecs', 'message', 'pathname',
        'process', 'processName', 'relativeCreated', 'thread', 'threadName',
        'exc_info', 'exc_text', 'stack_info', 'taskName'
    }

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        # logger.info("msg", extra={"login": "x"}) puts login directly on the record
        for key, value in record.__dict__.items():
            if key in self._STANDARD_ATTRS or callable(value):
                continue
            log_data[key] = REDACTED if _is_sensitive(key) else value

        return json.dumps(log_data, ensure_ascii=False, default=str)


def setup_structured_logging(level: str = "INFO"):
    """Configure structured JSON logging for the application.

    This configures all loggers including uvicorn access logs.
    """
    handler = logging.StreamHandler()
    handler.setFormatter(JSONFormatter())
    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers = [handler]

    # Route uvicorn access logs through the same handler, warnings only
    uvicorn_access = logging.getLogger("uvicorn.access")
    uvicorn_access.handlers = [handler]
    uvicorn_access.setLevel(logging.WARNING)
