"""Root logger setup and the two output formats: key-value lines and JSON lines."""

import json
import logging
import sys
import time
from datetime import datetime
from typing import Any, Dict, Iterator, Literal, Tuple

from .context import get_log_context

LogFormat = Literal["json", "key-value"]

SERVICE_NAME = "jobfilter"
KEY_VALUE_LAYOUT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
KEY_VALUE_DATEFMT = "%Y-%m-%d %H:%M:%S"

# Attributes of a bare LogRecord; anything else arrived through extra= or a filter
_BUILTIN_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


def _extra_fields(record: logging.LogRecord) -> Iterator[Tuple[str, Any]]:
    for key, value in record.__dict__.items():
        if key not in _BUILTIN_ATTRS and not key.startswith("_"):
            yield key, value


class ContextualFilter(logging.Filter):
    """
    Stamps records with the service and environment labels and the active
    log_context fields. Values passed through a call's ``extra`` are kept.
    """

    def __init__(self, service: str = SERVICE_NAME, environment: str = "local"):
        super().__init__()
        self.labels = {"service": service, "environment": environment}

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in {**get_log_context(), **self.labels}.items():
            if key not in record.__dict__:
                setattr(record, key, value)
        return True


class JSONFormatter(logging.Formatter):
    """One JSON object per record: timestamp, level, logger, message, then every extra field."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update(_extra_fields(record))
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)

    def formatTime(self, record: logging.LogRecord, datefmt=None) -> str:
        """ISO-8601 UTC with milliseconds, e.g. 2025-11-04T10:30:00.123Z."""
        stamp = time.strftime("%Y-%m-%dT%H:%M:%S", time.gmtime(record.created))
        return f"{stamp}.{int(record.msecs):03d}Z"


class KeyValueFormatter(logging.Formatter):
    """
    Readable lines with the extra fields appended as sorted key=value pairs::

        2025-11-04 10:30:00 [INFO] jobfilter.pipeline.runner: Filter pass completed hidden=3 site=naukri
    """

    UNLISTED = frozenset({"service", "environment"})

    def __init__(self, fmt: str = KEY_VALUE_LAYOUT, datefmt: str = KEY_VALUE_DATEFMT):
        super().__init__(fmt, datefmt=datefmt)

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        pairs = sorted(
            ((key, value) for key, value in _extra_fields(record) if key not in self.UNLISTED),
            key=lambda pair: pair[0],
        )
        if not pairs:
            return line
        return line + " " + " ".join(f"{key}={_render(value)}" for key, value in pairs)


def _render(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, datetime):
        return value.isoformat()
    text = str(value)
    if isinstance(value, str) and any(char in text for char in " =,"):
        return f'"{text}"'
    return text


FORMATTERS = {"json": JSONFormatter, "key-value": KeyValueFormatter}


def configure_logging(
    level: str = "INFO",
    format_type: LogFormat = "key-value",
    environment: str = "local",
) -> None:
    """
    Route every record to stderr in the chosen format.

    Existing root handlers are replaced. stdout stays free for the HTML the
    ``filter`` command writes.

    Args:
        level: DEBUG, INFO, WARNING, ERROR or CRITICAL (case-insensitive)
        format_type: "json" or "key-value"
        environment: Label attached to every record

    Raises:
        ValueError: If level or format_type is unknown
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        raise ValueError(f"Invalid log level: {level}")
    if format_type not in FORMATTERS:
        raise ValueError(
            f"Invalid log format: {format_type}. Must be one of: {', '.join(FORMATTERS)}"
        )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(FORMATTERS[format_type]())
    handler.addFilter(ContextualFilter(environment=environment))

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(numeric_level)

    logging.getLogger(__name__).debug(
        "Logging configured",
        extra={"event": "logging.configured", "log_level": level.upper(), "log_format": format_type},
    )
