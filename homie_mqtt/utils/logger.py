"""Structured logging configuration."""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

PACKAGE_LOGGER = "homie_mqtt"


class JSONFormatter(logging.Formatter):
    """One JSON object per record; thread is included since paho callbacks log from their own thread."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "thread": record.threadName,
            "message": record.getMessage(),
        }
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_data)


def redact_sensitive(data: Dict[str, Any]) -> Dict[str, Any]:
    """Mask credentials in a settings dict before it is logged."""
    sensitive_keys = ["password", "token", "authorization", "auth"]
    return {
        k: "***REDACTED***" if k.lower() in sensitive_keys and v is not None else v
        for k, v in data.items()
    }


def _package_logger() -> logging.Logger:
    root = logging.getLogger(PACKAGE_LOGGER)
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(JSONFormatter())
        root.addHandler(handler)
        root.setLevel(logging.INFO)
    return root


def get_logger(name: str, level: Optional[str] = None) -> logging.Logger:
    """Module logger under the homie_mqtt hierarchy, sharing one JSON handler."""
    _package_logger()
    logger = logging.getLogger(name)
    if level is not None:
        logger.setLevel(getattr(logging, level.upper()))
    return logger


def set_log_level(level: str) -> None:
    """Apply LOG_LEVEL to the whole homie_mqtt hierarchy."""
    _package_logger().setLevel(getattr(logging, level.upper()))
