"""Process-wide logging setup: JSON lines in production, plain text locally."""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from grocery_api.config import settings
from grocery_api.middleware import get_request_id

TEXT_FORMAT = "%(asctime)s [%(request_id)s] %(name)s %(levelname)s: %(message)s"

NOISY_LOGGERS = ("sqlalchemy.engine", "httpx", "httpcore", "uvicorn.access")


class RequestIdFilter(logging.Filter):
    """Expose the current request id to text formatters as ``%(request_id)s``."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = get_request_id() or "-"
        return True


class JSONFormatter(logging.Formatter):
    """One JSON object per record.

    ``trace_id`` is taken from the request-id context variable; anything passed
    as ``extra={"extra_fields": {...}}`` is merged into the top level.
    """

    def __init__(self, service: str | None = None):
        super().__init__()
        self.service = service or settings.app_name

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "service": self.service,
            "logger": record.name,
            "message": record.getMessage(),
        }

        trace_id = get_request_id()
        if trace_id:
            entry["trace_id"] = trace_id

        if record.levelno >= logging.WARNING:
            entry["source"] = f"{record.module}:{record.lineno}"

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        extra_fields = getattr(record, "extra_fields", None)
        if extra_fields:
            entry.update(extra_fields)

        return json.dumps(entry, ensure_ascii=False, default=str)


def configure_logging(level_name: str | None = None, log_format: str | None = None) -> None:
    """Replace the root handlers with a single stdout handler.

    Falls back to settings for anything not given; unknown level names mean INFO.
    """
    fmt = (log_format or settings.log_format).strip().lower()
    level = logging.getLevelName((level_name or settings.log_level).strip().upper())
    if not isinstance(level, int):
        level = logging.INFO

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.addFilter(RequestIdFilter())
    handler.setFormatter(JSONFormatter() if fmt == "json" else logging.Formatter(TEXT_FORMAT))

    root = logging.getLogger()
    for existing in root.handlers[:]:
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
