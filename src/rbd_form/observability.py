"""Structured logging for form sessions.

Library modules log through ``logging.getLogger(__name__)``. Session
lifecycle events go through StructuredLogger, which emits one JSON object
per record so they can be shipped as-is to ELK, Datadog, etc.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from rbd_form.settings import EngineSettings

ROOT_LOGGER = "rbd_form"


class StructuredLogger:
    """JSON-structured logger.

    Output format::

        {"timestamp": "...", "level": "INFO", "session": "edit",
         "event": "response.loaded", "message": "..."}
    """

    def __init__(self, name: str = ROOT_LOGGER, **bound: Any) -> None:
        self._logger = logging.getLogger(name)
        self._bound = bound

    def bind(self, **extra: Any) -> StructuredLogger:
        """Return a logger that adds *extra* to every record."""
        return StructuredLogger(self._logger.name, **{**self._bound, **extra})

    def _structured(self, extra: dict[str, Any]) -> dict[str, Any]:
        return {"structured": {**self._bound, **extra}}

    def info(self, message: str, **extra: Any) -> None:
        self._logger.info(message, extra=self._structured(extra))

    def warning(self, message: str, **extra: Any) -> None:
        self._logger.warning(message, extra=self._structured(extra))

    def error(self, message: str, **extra: Any) -> None:
        self._logger.error(message, extra=self._structured(extra))

    def debug(self, message: str, **extra: Any) -> None:
        self._logger.debug(message, extra=self._structured(extra))


class JsonFormatter(logging.Formatter):
    """Format log records as single-line JSON."""

    def format(self, record: logging.LogRecord) -> str:
        structured = getattr(record, "structured", {})
        entry = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **structured,
        }
        return json.dumps(entry, default=str)


def configure_logging(settings: EngineSettings) -> logging.Logger:
    """Attach a stream handler to the package logger, once."""
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(settings.log_level)
    if not logger.handlers:
        handler = logging.StreamHandler()
        if settings.json_logs:
            handler.setFormatter(JsonFormatter())
        else:
            handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
        logger.addHandler(handler)
    return logger
