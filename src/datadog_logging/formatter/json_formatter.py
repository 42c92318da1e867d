"""
JSON formatter producing Datadog intake payloads
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from ..config import LoggerConfig, get_default_config

RESERVED_FIELDS = frozenset(
    {
        "message",
        "channel",
        "level",
        "level_value",
        "timestamp",
        "logger",
        "exception",
        "stack",
        "context",
    }
)


class DatadogJSONFormatter(logging.Formatter):
    """
    Formats a log record as a single compact JSON object

    The logger name is emitted as ``channel``; the handler falls back to it
    when no explicit service attribute is configured.
    """

    def __init__(self, config: Optional[LoggerConfig] = None):
        super().__init__()
        self.config = config or get_default_config()

    def format(self, record: logging.LogRecord) -> str:
        log_entry: Dict[str, Any] = {
            "message": record.getMessage(),
            "channel": record.name,
            "level": record.levelname,
            "level_value": record.levelno,
        }

        if self.config.include_timestamp:
            log_entry["timestamp"] = datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat()

        log_entry["logger"] = {
            "name": record.name,
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
            "thread_name": record.threadName,
        }

        # ctx_ prefixed extras become top-level attributes; names clashing
        # with built-in fields are kept under "context" instead
        for key, value in record.__dict__.items():
            if key.startswith("ctx_"):
                name = key[4:]
                if name in RESERVED_FIELDS:
                    log_entry.setdefault("context", {})[name] = value
                else:
                    log_entry[name] = value

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)
        elif record.exc_text:
            log_entry["exception"] = record.exc_text

        if record.stack_info:
            log_entry["stack"] = self.formatStack(record.stack_info)

        return json.dumps(log_entry, separators=(",", ":"), default=str)
