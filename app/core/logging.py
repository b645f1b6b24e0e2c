"""Logging setup driven by the ``log_level`` and ``log_format`` settings."""

import json
import logging
import logging.config
from datetime import UTC, datetime

from app.core.config import LogFormatEnum, LogLevelEnum


class JsonFormatter(logging.Formatter):
    """Render each record as a single JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)


def setup_logging(
    level: LogLevelEnum | str = LogLevelEnum.INFO,
    fmt: LogFormatEnum | str = LogFormatEnum.simple,
) -> None:
    """Configure the root logger."""
    level_name = level.value if isinstance(level, LogLevelEnum) else str(level).upper()
    formatter = "json" if LogFormatEnum(fmt) == LogFormatEnum.json else "simple"

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "simple": {"format": "%(asctime)s %(levelname)-8s %(name)s: %(message)s"},
                "json": {"()": JsonFormatter},
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": formatter,
                },
            },
            "root": {"level": level_name, "handlers": ["console"]},
        }
    )
