"""Logging setup for debt-manager.

Two output formats are supported: a pipe-separated line for terminals and
one JSON object per line for log collectors. Values passed through
``extra=`` (``title_id``, ``installment_id``, ...) are kept as top-level keys
in JSON output.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import IO, Any

STANDARD_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
STANDARD_DATEFMT = "%Y-%m-%d %H:%M:%S"

# Attributes every LogRecord has; anything else came in through ``extra=``
_RECORD_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__
) | {"message", "asctime"}


def setup_logging(
    level: str = "INFO",
    format_type: str = "standard",
    stream: IO[str] | None = None,
) -> logging.Handler:
    """Install a single handler on the root logger.

    Parameters
    ----------
    level : str
        Log level name; unknown names fall back to INFO.
    format_type : str
        ``"standard"`` or ``"json"``.
    stream : IO[str] | None
        Destination, stdout by default.

    Returns
    -------
    logging.Handler
        The installed handler.
    """
    log_level = getattr(logging, str(level).upper(), logging.INFO)
    if not isinstance(log_level, int):
        log_level = logging.INFO

    if format_type == "json":
        formatter: logging.Formatter = JsonFormatter()
    else:
        formatter = logging.Formatter(fmt=STANDARD_FORMAT, datefmt=STANDARD_DATEFMT)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setLevel(log_level)
    handler.setFormatter(formatter)
    root_logger.addHandler(handler)

    logging.getLogger("debt_manager").setLevel(log_level)
    # Faker logs locale fallbacks at DEBUG
    logging.getLogger("faker").setLevel(logging.WARNING)
    return handler


class JsonFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        log_data.update(
            (key, value) for key, value in record.__dict__.items() if key not in _RECORD_ATTRS
        )
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str, ensure_ascii=False)


def get_logger(name: str) -> logging.Logger:
    """Return the logger for ``name`` (usually ``__name__``)."""
    return logging.getLogger(name)
