"""Structured JSON logging for the task board service."""

from __future__ import annotations

import json
import logging
import logging.config
from datetime import datetime, timezone
from typing import Any

from .config import Settings
from .context import UNSET, get_request_id, get_user_id

# Attribute names every LogRecord carries; anything else arrived through ``extra=``.
_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {
    "message",
    "asctime",
    "taskName",
    "color_message",
}

# Third-party loggers routed through the JSON handler. ``None`` follows the app level.
_LIBRARY_LOGGERS: dict[str, str | None] = {
    "uvicorn": None,
    "uvicorn.error": None,
    "uvicorn.access": "WARNING",
    "pymongo": "WARNING",
    "passlib": "ERROR",
}


class JsonLogFormatter(logging.Formatter):
    """Render each record as a single JSON object.

    Every line carries the service name, environment, request id and user id.
    Values passed through ``extra=`` become top-level keys; anything JSON
    cannot encode is rendered with ``str``.
    """

    def __init__(self, *, service: str, environment: str) -> None:
        super().__init__()
        self._static_fields = {"service": service, "environment": environment}

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        payload: dict[str, Any] = {
            "timestamp": created.isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **self._static_fields,
            "request_id": getattr(record, "request_id", UNSET),
            "user_id": getattr(record, "user_id", UNSET),
        }
        for key, value in vars(record).items():
            if key not in _RECORD_ATTRS and key not in payload:
                payload[key] = value

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        if record.stack_info:
            payload["stack"] = self.formatStack(record.stack_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


class RequestContextFilter(logging.Filter):
    """Fill in the current request and user identifiers where a record lacks them."""

    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        # Identifiers passed explicitly through ``extra=`` take precedence.
        if getattr(record, "request_id", UNSET) == UNSET:
            record.request_id = get_request_id()
        if getattr(record, "user_id", UNSET) == UNSET:
            record.user_id = get_user_id()
        return True


def configure_logging(settings: Settings) -> None:
    """Send all application and library logs to stdout as JSON."""

    level = logging.getLevelName(settings.log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO
    logging.captureWarnings(True)

    handler_names = ["stdout"]
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "filters": {"request_context": {"()": RequestContextFilter}},
            "formatters": {
                "json": {
                    "()": JsonLogFormatter,
                    "service": settings.project_name,
                    "environment": settings.environment,
                }
            },
            "handlers": {
                "stdout": {
                    "class": "logging.StreamHandler",
                    "stream": "ext://sys.stdout",
                    "formatter": "json",
                    "filters": ["request_context"],
                }
            },
            "root": {"handlers": handler_names, "level": level},
            "loggers": {
                name: {
                    "handlers": handler_names,
                    "level": library_level or level,
                    "propagate": False,
                }
                for name, library_level in _LIBRARY_LOGGERS.items()
            },
        }
    )


__all__ = ["JsonLogFormatter", "RequestContextFilter", "configure_logging"]
