"""Structured JSON logging for the FSE Compliance service.

Every record is written as one JSON object. Values passed through ``extra``
are nested under an ``extra`` key, and the correlation ID of the current
request is attached by ``CorrelationIDFilter``.
"""

import json
import logging
import logging.handlers
import os
import sys
import uuid
from contextvars import ContextVar
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional


SERVICE_NAME = "fse-compliance"

_correlation_id: ContextVar[Optional[str]] = ContextVar("correlation_id", default=None)

# Attributes every LogRecord carries; anything else came in through ``extra``.
_STANDARD_ATTRS = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", None, None))
) | {"message", "asctime", "correlation_id"}

_QUIET_LOGGERS = ("uvicorn.access", "httpx", "httpcore")


class CorrelationIDFilter(logging.Filter):
    """Stamp records with the correlation ID of the current request."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = _correlation_id.get() or "unknown"
        return True


class JSONFormatter(logging.Formatter):
    """Render log records as single-line JSON."""

    def __init__(self, service_name: str = SERVICE_NAME):
        super().__init__()
        self.service_name = service_name

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.utcnow().isoformat() + "Z",
            "level": record.levelname,
            "service": self.service_name,
            "logger": record.name,
            "message": record.getMessage(),
            "correlation_id": getattr(record, "correlation_id", "unknown"),
            "location": f"{record.module}:{record.funcName}:{record.lineno}",
        }

        if record.exc_info and record.exc_info[0] is not None:
            entry["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": self.formatException(record.exc_info),
            }

        extra = {key: value for key, value in vars(record).items() if key not in _STANDARD_ATTRS}
        if extra:
            entry["extra"] = extra

        return json.dumps(entry, default=str, ensure_ascii=False)


@dataclass
class LoggingConfig:
    """Root logger setup: JSON to stdout, optionally to a rotating file."""

    log_level: str = "INFO"
    service_name: str = SERVICE_NAME
    log_file: Optional[Path] = None
    max_file_size: int = 10 * 1024 * 1024
    backup_count: int = 5

    @classmethod
    def from_env(cls) -> "LoggingConfig":
        """Read LOG_LEVEL, SERVICE_NAME, LOG_FILE, LOG_MAX_FILE_SIZE and LOG_BACKUP_COUNT."""
        log_file = os.getenv("LOG_FILE")
        return cls(
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            service_name=os.getenv("SERVICE_NAME", SERVICE_NAME),
            log_file=Path(log_file) if log_file else None,
            max_file_size=int(os.getenv("LOG_MAX_FILE_SIZE", str(10 * 1024 * 1024))),
            backup_count=int(os.getenv("LOG_BACKUP_COUNT", "5")),
        )

    def apply(self) -> None:
        """Replace the root logger's handlers with JSON handlers."""
        level = logging.getLevelName(self.log_level.upper())
        if not isinstance(level, int):
            raise ValueError(f"Unknown log level '{self.log_level}'")

        handlers = [logging.StreamHandler(sys.stdout)]
        if self.log_file is not None:
            self.log_file.parent.mkdir(parents=True, exist_ok=True)
            handlers.append(logging.handlers.RotatingFileHandler(
                self.log_file,
                maxBytes=self.max_file_size,
                backupCount=self.backup_count,
                encoding="utf-8"
            ))

        formatter = JSONFormatter(self.service_name)
        for handler in handlers:
            handler.addFilter(CorrelationIDFilter())
            handler.setFormatter(formatter)

        root = logging.getLogger()
        for handler in root.handlers[:]:
            root.removeHandler(handler)
        root.setLevel(level)
        for handler in handlers:
            root.addHandler(handler)

        for name in _QUIET_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)


def setup_logging_from_env() -> LoggingConfig:
    """Configure logging from environment variables."""
    config = LoggingConfig.from_env()
    config.apply()
    return config


def generate_correlation_id() -> str:
    """Generate a new correlation ID."""
    return str(uuid.uuid4())


def set_correlation_id(correlation_id: str) -> None:
    """Set the correlation ID for the current context."""
    _correlation_id.set(correlation_id)


def clear_correlation_id() -> None:
    """Clear the correlation ID of the current context."""
    _correlation_id.set(None)


def get_logger(name: str) -> logging.Logger:
    """Get a logger with the specified name."""
    return logging.getLogger(name)


def log_with_extra(logger: logging.Logger, level: int, message: str, **extra) -> None:
    """Log a message with structured fields."""
    logger.log(level, message, extra=extra)


def log_business_rule_violation(logger: logging.Logger, rule: str, details: str, **extra) -> None:
    """Log a refused operation."""
    log_with_extra(
        logger,
        logging.WARNING,
        f"Business rule violation: {rule} - {details}",
        business_rule=rule,
        violation_details=details,
        **extra
    )


def log_workflow_transition(logger: logging.Logger, operation: str, from_state: str, to_state: str, **extra) -> None:
    """Log a workflow state transition."""
    log_with_extra(
        logger,
        logging.INFO,
        f"Workflow {operation}: {from_state} -> {to_state}",
        workflow_operation=operation,
        from_state=from_state,
        to_state=to_state,
        **extra
    )


def log_collaborator_failure(logger: logging.Logger, collaborator: str, operation: str, error: Exception, **extra) -> None:
    """Log a degraded external collaborator call."""
    log_with_extra(
        logger,
        logging.WARNING,
        f"Collaborator {collaborator} failed during {operation}: {error}",
        collaborator=collaborator,
        collaborator_operation=operation,
        error_type=type(error).__name__,
        error=str(error),
        **extra
    )
