# core/logging_config.py

"""
Structured JSON logging for the student record store.

Every log line is a single JSON object with a timestamp, level, message, channel,
business context (student ID, field, path), and extra metadata. Output goes to
stderr so log lines never interleave with the interactive prompts on stdout.

Channels:
- store: record creation, edits, recomputation, and resets
- counter: ID allocation and self-healing of the counter file
- io: atomic file replacement
- cli: interactive session events
"""

import json
import logging
import sys
from datetime import datetime, timezone

from core.config import get_log_level

LOGGER_NAMESPACE = "student_records"
CHANNELS = ["store", "counter", "io", "cli"]


class StructuredJsonFormatter(logging.Formatter):
    """
    Formats each record as a one-line JSON entry.

    Keys:
    - timestamp: ISO 8601 timestamp in UTC with millisecond precision
    - level: log severity name
    - message: human-readable message
    - channel: the emitting channel (store, counter, io, cli)
    - context: business context such as student_id or field
    - extra: additional metadata such as paths or counts
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[
                :-3
            ]
            + "Z",
            "level": record.levelname,
            "message": record.getMessage(),
            "channel": getattr(record, "channel", record.name.split(".")[-1]),
            "context": getattr(record, "context", {}) or {},
            "extra": getattr(record, "extra_data", {}) or {},
        }

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, default=str)


def setup_logging(level: str | None = None) -> logging.Logger:
    """
    Configures the package logger and its channel loggers.

    Args:
        level (str | None): A logging level name. Defaults to `STUDENT_RECORDS_LOG_LEVEL`.

    Returns:
        The configured package-level logger.

    Notes:
        - Safe to call more than once; the handler list is replaced, not appended to.
    """
    level_name = (level or get_log_level()).upper()
    log_level = getattr(logging, level_name, logging.WARNING)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(StructuredJsonFormatter())

    package_logger = logging.getLogger(LOGGER_NAMESPACE)
    package_logger.setLevel(log_level)
    package_logger.handlers = [handler]
    package_logger.propagate = False

    for channel in CHANNELS:
        get_logger(channel).setLevel(log_level)

    return package_logger


def get_logger(channel: str) -> logging.Logger:
    return logging.getLogger(f"{LOGGER_NAMESPACE}.{channel}")


def log_with_context(
    logger: logging.Logger,
    level: str,
    message: str,
    context: dict | None = None,
    extra_data: dict | None = None,
) -> None:
    """
    Emits a structured log entry with business context and extra metadata.

    Args:
        logger (logging.Logger): The channel logger to use.
        level (str): Level name (DEBUG, INFO, WARNING, ERROR).
        message (str): Human-readable message.
        context (dict | None): Business context, e.g. `{"student_id": 3}`.
        extra_data (dict | None): Additional metadata, e.g. `{"path": ...}`.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    logger.log(
        log_level,
        message,
        extra={
            "context": context or {},
            "extra_data": extra_data or {},
            "channel": logger.name.split(".")[-1],
        },
    )
