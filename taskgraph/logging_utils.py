from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any

from .settings import get_settings


_LOGGING_CONFIGURED = False


def configure_logging() -> None:
    global _LOGGING_CONFIGURED
    if _LOGGING_CONFIGURED:
        return

    settings = get_settings()
    logging.basicConfig(level=getattr(logging, settings.log_level, logging.INFO))
    _LOGGING_CONFIGURED = True



def format_event(event: str, log_format: str = "json", **fields: Any) -> str:
    payload = {
        "ts": datetime.now(timezone.utc).isoformat(),
        "event": event,
        **fields,
    }
    if log_format == "text":
        return " ".join(f"{key}={value}" for key, value in payload.items())
    return json.dumps(payload, default=str, separators=(",", ":"))



def log_event(logger: logging.Logger, event: str, **fields: Any) -> None:
    logger.info(format_event(event, get_settings().log_format, **fields))
