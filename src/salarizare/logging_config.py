"""Logging setup for the command-line application."""

import json
import logging
import os
import sys
from typing import Any, Optional

LOG_LEVEL_ENV = "SALARIZARE_LOG_LEVEL"
JSON_LOGS_ENV = "SALARIZARE_JSON_LOGS"
DEFAULT_LEVEL = "WARNING"

PLAIN_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


class JsonFormatter(logging.Formatter):
    """Format each record as a single JSON object."""

    def format(self, record: logging.LogRecord) -> str:
        data: dict[str, Any] = {
            "time": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            data["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(data, ensure_ascii=False)


def json_logs_enabled() -> bool:
    return (os.environ.get(JSON_LOGS_ENV) or "").strip().lower() in {"1", "true", "yes", "on"}


def resolve_level(level: Optional[str] = None) -> int:
    """Resolve a level name from the argument, the environment, or the default.

    Raises:
        ValueError: If the name is not a logging level
    """
    name = (level or os.environ.get(LOG_LEVEL_ENV) or DEFAULT_LEVEL).strip().upper()
    value = logging.getLevelName(name)
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level '{name}'")
    return value


def configure_logging(level: Optional[str] = None, json_logs: Optional[bool] = None) -> None:
    """Install a single stderr handler on the root logger.

    Args:
        level: Level name; falls back to SALARIZARE_LOG_LEVEL, then WARNING
        json_logs: Force JSON output on or off; defaults to SALARIZARE_JSON_LOGS
    """
    root = logging.getLogger()
    root.setLevel(resolve_level(level))

    handler = logging.StreamHandler(sys.stderr)
    if json_logs if json_logs is not None else json_logs_enabled():
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(PLAIN_FORMAT))

    # Remove other handlers to avoid duplicate logs
    for h in list(root.handlers):
        root.removeHandler(h)
    root.addHandler(handler)
