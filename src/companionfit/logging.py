"""Structured logging for CompanionFit.

Controlled via COMPANIONFIT_LOG_FORMAT env var: "text" (default) or "json".
In JSON mode every line names the emitting service, and ``companionfit_*``
extras (user id, XP gained, failed gateway operation) are collected under a
``context`` object with the prefix stripped.
"""

import json
import logging
import sys
import traceback
from datetime import datetime, timezone

EXTRA_PREFIX = "companionfit_"


class JSONFormatter(logging.Formatter):
    """Emit log records as single-line JSON objects."""

    def __init__(self, service: str = "companionfit") -> None:
        super().__init__()
        self.service = service

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "service": self.service,
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        context = {
            key[len(EXTRA_PREFIX):]: value
            for key, value in record.__dict__.items()
            if key.startswith(EXTRA_PREFIX)
        }
        if context:
            log_entry["context"] = context

        if record.exc_info and record.exc_info[1] is not None:
            log_entry["exception"] = "".join(traceback.format_exception(*record.exc_info))

        return json.dumps(log_entry, default=str)


def setup_logging(log_format: str, level: int = logging.INFO) -> None:
    """Configure the root logger with either JSON or plaintext output."""
    root = logging.getLogger()
    root.setLevel(level)

    for handler in root.handlers[:]:
        root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    if log_format == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))

    root.addHandler(handler)
