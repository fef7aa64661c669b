"""Structured logging with JSON format and daily rotation."""
import json
import logging
import re
import sys
import uuid
from datetime import datetime, timezone
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import Any, Dict, Optional, Union


# Global run ID for this execution
RUN_ID = str(uuid.uuid4())[:8]

_RESERVED_ATTRS = {
    "name", "msg", "args", "created", "filename", "funcName",
    "levelname", "levelno", "lineno", "module", "msecs",
    "message", "pathname", "process", "processName",
    "relativeCreated", "thread", "threadName", "exc_info",
    "exc_text", "stack_info", "taskName",
}


class JSONFormatter(logging.Formatter):
    """Format log records as JSON."""

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record as JSON."""
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "run_id": RUN_ID,
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        # Add exception info if present
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        # Add extra fields
        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS:
                log_data[key] = value

        return json.dumps(log_data, default=str)


class ConsoleFormatter(logging.Formatter):
    """Human-readable console formatter."""

    COLOURS = {
        "DEBUG": "\033[36m",      # Cyan
        "INFO": "\033[32m",       # Green
        "WARNING": "\033[33m",    # Yellow
        "ERROR": "\033[31m",      # Red
        "CRITICAL": "\033[35m",   # Magenta
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record for console."""
        colour = self.COLOURS.get(record.levelname, self.RESET)
        timestamp = datetime.now(timezone.utc).strftime("%H:%M:%S")

        msg = (
            f"{colour}[{timestamp}] {record.levelname:8s}{self.RESET} "
            f"{record.name}: {record.getMessage()}"
        )

        if record.exc_info:
            msg += "\n" + self.formatException(record.exc_info)

        return msg


class SensitiveDataFilter(logging.Filter):
    """Redact credential values before a record reaches any handler."""

    SENSITIVE_KEYS = [
        "apca-api-secret-key", "secret_key", "secret", "authorization",
        "bearer", "oauth_token", "token", "password",
    ]

    _VALUE_PATTERN = re.compile(
        r"(?i)(apca-api-secret-key|secret_key|secret|authorization|oauth_token|token|password)"
        r"(\s*[=:]\s*|['\"]\s*:\s*['\"]?)(bearer\s+)?[^\s,'\"}]+"
    )

    def filter(self, record: logging.LogRecord) -> bool:
        """Rewrite records that expose a sensitive value."""
        message = record.getMessage()
        lowered = message.lower()

        if any(key in lowered for key in self.SENSITIVE_KEYS):
            redacted = self._VALUE_PATTERN.sub(r"\1\2[REDACTED]", message)
            redacted = re.sub(r"(?i)bearer\s+[^\s,'\"}]+", "Bearer [REDACTED]", redacted)
            if redacted != message:
                record.msg = redacted
                record.args = ()

        return True


def setup_logger(
    name: str = "alpaca_rest",
    log_level: str = "INFO",
    log_dir: Optional[Union[str, Path]] = None,
) -> logging.Logger:
    """
    Set up logger with JSON file output and human-readable console output.

    Args:
        name: Logger name; "alpaca_rest" configures every module of the library
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_dir: Directory for log files; console only when None

    Returns:
        Configured logger instance
    """
    level = getattr(logging, log_level.upper())
    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()
    logger.filters.clear()
    redaction = SensitiveDataFilter()
    logger.addFilter(redaction)

    # Console handler (human-readable)
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(ConsoleFormatter())
    console_handler.addFilter(redaction)
    logger.addHandler(console_handler)

    # File handler (JSON, daily rotation)
    if log_dir is not None:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)

        file_handler = TimedRotatingFileHandler(
            filename=log_path / f"{name}.log",
            when="midnight",
            interval=1,
            backupCount=30,  # Keep 30 days
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(JSONFormatter())
        file_handler.addFilter(redaction)
        logger.addHandler(file_handler)

    return logger
