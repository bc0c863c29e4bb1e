# log_config.py
import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict

from relay_config import LoggingSettings


def utc_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "ts": utc_iso(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


class TextFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        base = f"{utc_iso()} {record.levelname:<7} {record.name}: {record.getMessage()}"
        if record.exc_info:
            return base + "\n" + self.formatException(record.exc_info)
        return base


def configure_logging(settings: LoggingSettings | None = None) -> None:
    settings = settings or LoggingSettings.from_env()

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(getattr(logging, settings.level.upper(), logging.INFO))

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonFormatter() if settings.json else TextFormatter())
    root.addHandler(handler)

    # request lines are logged by our own middleware
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
