"""Logging helpers for SpaceMouse bridge processes."""

from __future__ import annotations

import msgspec
import logging
import os
from datetime import datetime, timezone
from logging import Handler
from logging.config import dictConfig
from logging.handlers import SysLogHandler
from pathlib import Path
from typing import Any

from .model import SessionConfig

SYSLOG_SOCKETS = (Path("/dev/log"), Path("/var/run/syslog"), Path("/var/run/log"))

_RESERVED_LOG_KEYS = {
    "args",
    "asctime",
    "created",
    "exc_info",
    "exc_text",
    "filename",
    "funcName",
    "levelname",
    "levelno",
    "lineno",
    "module",
    "msecs",
    "message",
    "msg",
    "name",
    "pathname",
    "process",
    "processName",
    "relativeCreated",
    "stack_info",
    "taskName",
    "thread",
    "threadName",
}


def _serialise_value(value: Any) -> Any:
    if isinstance(value, (str, int, float, bool)) or value is None:
        return value
    if isinstance(value, bytes):
        # Helper lines are ASCII; anything else is shown as hex.
        return f"[{' '.join(f'{b:02X}' for b in value)}]"
    if isinstance(value, msgspec.Struct):
        return msgspec.to_builtins(value)
    return str(value)


class StructuredLogFormatter(logging.Formatter):
    """Emit JSON per log line while trimming the shared prefix."""

    PREFIX = "spacemousebridge."

    def format(self, record: logging.LogRecord) -> str:
        logger_name = record.name
        if logger_name.startswith(self.PREFIX):
            logger_name = logger_name[len(self.PREFIX) :]

        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": logger_name,
            "message": record.getMessage(),
        }

        extras = {
            key: _serialise_value(value)
            for key, value in record.__dict__.items()
            if key not in _RESERVED_LOG_KEYS and not key.startswith("_")
        }
        if extras:
            payload["extra"] = extras

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return msgspec.json.encode(payload).decode("utf-8")


def _build_handler(use_syslog: bool = False) -> Handler:
    if os.environ.get("SPACEMOUSE_LOG_STREAM") or not use_syslog:
        return logging.StreamHandler()

    for candidate in SYSLOG_SOCKETS:
        if candidate.exists():
            syslog_handler = SysLogHandler(
                address=str(candidate),
                facility=SysLogHandler.LOG_USER,
            )
            syslog_handler.ident = "spacemousebridge "
            return syslog_handler
    return logging.StreamHandler()


def configure_logging(config: SessionConfig) -> None:
    """Configure root logging based on session settings."""

    level_name = "DEBUG" if config.debug_logging else "INFO"

    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "structured": {
                    "()": "spacemousebridge.config.logging.StructuredLogFormatter",
                }
            },
            "handlers": {
                "spacemousebridge": {
                    "()": _build_handler,
                    "use_syslog": config.log_syslog,
                    "level": level_name,
                    "formatter": "structured",
                }
            },
            "root": {
                "level": level_name,
                "handlers": ["spacemousebridge"],
            },
        }
    )

    logging.getLogger("spacemousebridge").info("Logging configured at level %s", level_name)
