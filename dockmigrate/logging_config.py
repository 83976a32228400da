"""
Logging setup for the dockmigrate command.

Progress and errors go to stderr, either as plain lines or as one JSON
object per line for log collectors.
"""
import json
import logging
import sys
from datetime import datetime, timezone
from typing import Optional, TextIO

PLAIN_FORMAT = "%(asctime)s %(levelname)s %(message)s"

_RESERVED = {
    'name', 'msg', 'args', 'levelname', 'levelno', 'pathname', 'filename',
    'module', 'lineno', 'funcName', 'created', 'msecs', 'relativeCreated',
    'thread', 'threadName', 'processName', 'process', 'stack_info',
    'exc_info', 'exc_text', 'message', 'asctime', 'taskName',
}


class StructuredFormatter(logging.Formatter):
    """JSON formatter that carries ``extra`` fields such as state and container."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key in _RESERVED or key.startswith("_"):
                continue
            try:
                json.dumps(value)
                log_entry[key] = value
            except (TypeError, ValueError):
                log_entry[key] = str(value)

        return json.dumps(log_entry, ensure_ascii=False, separators=(',', ':'))


def configure_logging(level: str = "INFO", fmt: str = "plain",
                      stream: Optional[TextIO] = None) -> logging.Logger:
    """Point the ``dockmigrate`` logger at stderr; safe to call more than once"""
    root = logging.getLogger("dockmigrate")
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    handler = logging.StreamHandler(stream or sys.stderr)
    if fmt == "json":
        handler.setFormatter(StructuredFormatter())
    else:
        handler.setFormatter(logging.Formatter(PLAIN_FORMAT))

    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)
    root.propagate = False
    return root
