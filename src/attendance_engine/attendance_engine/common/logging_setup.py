"""Structured JSON logging for the engine and its adapters."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone

ROOT_LOGGER_NAME = "attendance_engine"


class JsonFormatter(logging.Formatter):
    """Emit log records as single-line JSON objects."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.")
            + f"{int(record.msecs):03d}Z",
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            entry["exc"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False)


def configure_logging(level: str = "INFO") -> logging.Logger:
    """Attach a JSON stderr handler to the package logger (idempotent)."""

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(getattr(logging, str(level).upper(), logging.INFO))

    if not any(getattr(h, "_attendance_engine", False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(JsonFormatter())
        handler._attendance_engine = True
        logger.addHandler(handler)

    return logger
