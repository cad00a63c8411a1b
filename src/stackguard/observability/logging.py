"""
Structured logging configuration for stackguard.

Provides consistent logging across all modules with support for
human-readable and JSON output.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any

LOGGER_NAME = "stackguard"

# LogRecord attributes that are not user-supplied extra fields
_RESERVED_ATTRS = frozenset(
    (
        "name",
        "msg",
        "args",
        "created",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "module",
        "msecs",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "exc_info",
        "exc_text",
        "thread",
        "threadName",
        "taskName",
        "message",
    )
)


class StructuredFormatter(logging.Formatter):
    """
    Formatter that outputs structured JSON logs.

    Useful when evaluation runs inside CI and logs are shipped to an
    aggregation system.
    """

    def __init__(
        self,
        include_timestamp: bool = True,
        include_location: bool = False,
        extra_fields: dict[str, Any] | None = None,
    ):
        """
        Initialize structured formatter.

        Args:
            include_timestamp: Include timestamp in output
            include_location: Include file/line location
            extra_fields: Additional fields to include in every log
        """
        super().__init__()
        self.include_timestamp = include_timestamp
        self.include_location = include_location
        self.extra_fields = extra_fields or {}

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data: dict[str, Any] = {}

        if self.include_timestamp:
            log_data["timestamp"] = datetime.now(timezone.utc).isoformat()

        log_data["level"] = record.levelname.lower()
        log_data["logger"] = record.name
        log_data["message"] = record.getMessage()

        if self.include_location:
            log_data["location"] = {
                "file": record.pathname,
                "line": record.lineno,
                "function": record.funcName,
            }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS:
                log_data[key] = value

        log_data.update(self.extra_fields)

        return json.dumps(log_data, default=str)


class HumanReadableFormatter(logging.Formatter):
    """Formatter that outputs human-readable logs for CLI usage."""

    COLORS = {
        "DEBUG": "\033[36m",  # Cyan
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def __init__(self, use_colors: bool = True, include_timestamp: bool = True):
        super().__init__()
        self.use_colors = use_colors and sys.stderr.isatty()
        self.include_timestamp = include_timestamp

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as human-readable text."""
        parts = []

        if self.include_timestamp:
            timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")
            parts.append(f"[{timestamp}]")

        level = record.levelname
        if self.use_colors and level in self.COLORS:
            level = f"{self.COLORS[level]}{level}{self.RESET}"
        parts.append(f"{level:>8}")

        parts.append(f"{record.name}:")
        parts.append(record.getMessage())

        output = " ".join(parts)

        if record.exc_info:
            output += "\n" + self.formatException(record.exc_info)

        return output


class GuardLogger:
    """
    Wrapper around Python logging with persistent context fields.

    Provides evaluation lifecycle events so that CI logs carry the same
    fields for every run.
    """

    def __init__(self, name: str, level: int | None = None):
        self.logger = logging.getLogger(name)
        if level is not None:
            self.logger.setLevel(level)
        self._context: dict[str, Any] = {}

    def set_context(self, **kwargs: Any) -> None:
        """Set persistent context fields for all logs."""
        self._context.update(kwargs)

    def clear_context(self) -> None:
        """Clear context fields."""
        self._context.clear()

    def _log(
        self,
        level: int,
        message: str,
        exc_info: bool = False,
        **kwargs: Any,
    ) -> None:
        extra = {**self._context, **kwargs}
        self.logger.log(level, message, exc_info=exc_info, extra=extra)

    def debug(self, message: str, **kwargs: Any) -> None:
        self._log(logging.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        self._log(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self._log(logging.WARNING, message, **kwargs)

    def error(self, message: str, exc_info: bool = False, **kwargs: Any) -> None:
        self._log(logging.ERROR, message, exc_info=exc_info, **kwargs)

    def evaluation_started(
        self, pack_name: str, snapshot_path: str, resource_count: int
    ) -> None:
        """Log evaluation start event."""
        self.info(
            "Evaluation started",
            event_type="evaluation.started",
            pack_name=pack_name,
            snapshot_path=snapshot_path,
            resource_count=resource_count,
        )

    def evaluation_completed(
        self,
        pack_name: str,
        violation_count: int,
        mandatory_count: int,
        duration_seconds: float,
    ) -> None:
        """Log evaluation completion event."""
        self.info(
            "Evaluation completed",
            event_type="evaluation.completed",
            pack_name=pack_name,
            violation_count=violation_count,
            mandatory_count=mandatory_count,
            duration_seconds=duration_seconds,
        )

    def policy_failed(self, policy_name: str, errors: list[str]) -> None:
        """Log a policy that could not be evaluated."""
        self.error(
            "Policy evaluation failed",
            event_type="policy.failed",
            policy_name=policy_name,
            errors=errors,
        )


def configure_logging(
    level: str | None = None,
    format: str | None = None,
    output: str = "stderr",
    extra_fields: dict[str, Any] | None = None,
) -> None:
    """
    Configure logging for stackguard.

    Level and format fall back to STACKGUARD_LOG_LEVEL and
    STACKGUARD_LOG_FORMAT, then to WARNING and human.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format: Output format (human, json)
        output: Output destination (stderr, stdout)
        extra_fields: Extra fields to include in structured logs
    """
    level = level or os.getenv("STACKGUARD_LOG_LEVEL", "WARNING")
    format = format or os.getenv("STACKGUARD_LOG_FORMAT", "human")

    root_logger = logging.getLogger(LOGGER_NAME)
    root_logger.setLevel(getattr(logging, level.upper()))
    root_logger.handlers.clear()

    if output == "stdout":
        handler = logging.StreamHandler(sys.stdout)
    else:
        handler = logging.StreamHandler(sys.stderr)

    if format == "json":
        formatter: logging.Formatter = StructuredFormatter(extra_fields=extra_fields)
    else:
        formatter = HumanReadableFormatter()

    handler.setFormatter(formatter)
    root_logger.addHandler(handler)


def get_logger(name: str) -> GuardLogger:
    """
    Get a stackguard logger instance.

    Args:
        name: Logger name (typically module name)

    Returns:
        GuardLogger instance
    """
    return GuardLogger(f"{LOGGER_NAME}.{name}")
