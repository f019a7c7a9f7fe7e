from __future__ import annotations

import json
import logging
import sys
from typing import Any

from bizdir.core.config import BaseAppSettings, settings

PLAIN_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

# Attributes every LogRecord carries; anything else came in through ``extra=``
_RESERVED_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "asctime"}


class JsonFormatter(logging.Formatter):
    """One JSON object per record, tagged with the service name and environment."""

    def __init__(self, service: str | None = None, env: str | None = None, datefmt: str | None = None):
        super().__init__(datefmt=datefmt)
        self.service = service
        self.env = env

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if self.service:
            payload["service"] = self.service
        if self.env:
            payload["env"] = self.env
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        for key, value in record.__dict__.items():
            if key.startswith("_") or key in _RESERVED_ATTRS or key in payload:
                continue
            payload.setdefault("extra", {})[key] = value
        return json.dumps(payload, default=str)


def build_handler(app_settings: BaseAppSettings | None = None) -> logging.Handler:
    """Stdout handler formatted per ``LOG_FORMAT`` of ``app_settings``."""
    app_settings = app_settings or settings
    handler = logging.StreamHandler(sys.stdout)
    if app_settings.LOG_FORMAT.lower() == "json":
        handler.setFormatter(JsonFormatter(service=app_settings.APP_NAME, env=app_settings.ENV))
    else:
        handler.setFormatter(logging.Formatter(PLAIN_FORMAT))
    return handler


def init_logging(level: int | None = None, app_settings: BaseAppSettings | None = None) -> None:
    """Install the root handler once; later calls are no-ops."""
    if logging.getLogger().handlers:
        return
    app_settings = app_settings or settings
    effective_level = level or getattr(logging, app_settings.LOG_LEVEL.upper(), logging.INFO)
    root = logging.getLogger()
    root.setLevel(effective_level)
    root.addHandler(build_handler(app_settings))
