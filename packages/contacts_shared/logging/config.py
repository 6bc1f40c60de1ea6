"""Process-wide log output for the contacts backend.

A single stdout handler renders each record either as one JSON object per
line or as text followed by ``key=value`` correlation fields.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime

from packages.contacts_shared.config import LoggingSettings

from . import fields
from .context import bind_context, get_context

_TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


class _CorrelationFilter(logging.Filter):
    """Snapshot correlation fields onto the record at emit time."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation = get_context()
        return True


class ContactLogFormatter(logging.Formatter):
    """Render records as JSON lines or as text with trailing fields."""

    def __init__(self, *, json_output: bool) -> None:
        super().__init__(fmt=_TEXT_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S%z")
        self._json_output = json_output

    def format(self, record: logging.LogRecord) -> str:
        correlation: dict[str, str] = getattr(record, "correlation", {})
        if not self._json_output:
            line = super().format(record)
            pairs = " ".join(f"{k}={v}" for k, v in sorted(correlation.items()))
            return f"{line} {pairs}" if pairs else line

        document = {
            fields.TIMESTAMP: datetime.fromtimestamp(record.created, UTC).isoformat(),
            fields.LEVEL: record.levelname,
            fields.LOGGER: record.name,
            fields.MESSAGE: record.getMessage(),
            **correlation,
        }
        if record.exc_info:
            document["exception"] = self.formatException(record.exc_info)
        return json.dumps(document, default=str, separators=(",", ":"))


def configure_logging(settings: LoggingSettings | None = None) -> None:
    """Route root logging to stdout according to ``settings``.

    Safe to call repeatedly; each call replaces the previous handler.
    """
    settings = settings or LoggingSettings()
    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(_CorrelationFilter())
    handler.setFormatter(ContactLogFormatter(json_output=settings.json_output))

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(settings.level)

    bind_context(
        **{fields.SERVICE: settings.service, fields.ENVIRONMENT: settings.environment}
    )


def get_logger(name: str | None = None) -> logging.Logger:
    return logging.getLogger(name)
