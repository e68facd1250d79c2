"""Logging helpers."""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional


class JsonLogFormatter(logging.Formatter):
    """Format log records as JSON lines."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        for attr in ("actor_id", "event_id", "action"):
            if hasattr(record, attr):
                payload[attr] = getattr(record, attr)
        return json.dumps(payload, ensure_ascii=False, default=str)


def configure_logging(*, level: Optional[str] = None, json_lines: bool = False) -> None:
    root_logger = logging.getLogger()
    if root_logger.handlers:
        # Already configured (e.g. by the test runner or a WSGI server).
        return

    handler = logging.StreamHandler(sys.stdout)
    if json_lines:
        handler.setFormatter(JsonLogFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s"))

    root_logger.setLevel(getattr(logging, (level or "INFO").upper(), logging.INFO))
    root_logger.addHandler(handler)

    logging.getLogger("mysql.connector").setLevel(logging.WARNING)
