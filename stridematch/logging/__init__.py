"""Structured logging for the context extraction service.

Events emitted by the service:
- context_extracted: detected intent fields, dislikes, pending clarifications
- dislike_resolved: one candidate phrase, its best model and the gate outcome
- follow_up_selected: which follow-up question the caller should ask
- api_request: method, path, status and latency of each request

Per-request fields (request id, history size) are bound with
structlog.contextvars and merged into every event logged during the request.
"""

import logging
import os
import sys
import time
from enum import Enum
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

import structlog

from stridematch.config.settings import settings


class EventCategory(str, Enum):
    """Categories of logged events."""
    CONTEXT = "context"
    DISLIKE = "dislike"
    SYSTEM = "system"
    ERROR = "error"
    PERFORMANCE = "performance"


class LogConfig:
    """Logging configuration; environment comes from settings, the rest from LOG_* variables."""

    ENVIRONMENT: str = settings.environment

    # DEBUG shows every dislike resolution
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    # json or text
    LOG_FORMAT: str = os.getenv("LOG_FORMAT", "json" if ENVIRONMENT == "production" else "text")

    LOG_TO_FILE: bool = os.getenv("LOG_TO_FILE", "false").lower() == "true"
    LOG_DIR: Path = Path(os.getenv("LOG_DIR", "logs"))
    LOG_FILE_MAX_BYTES: int = int(os.getenv("LOG_FILE_MAX_BYTES", 10 * 1024 * 1024))
    LOG_FILE_BACKUP_COUNT: int = int(os.getenv("LOG_FILE_BACKUP_COUNT", 5))


def _rotating_handler(filename: str, level: int) -> RotatingFileHandler:
    LogConfig.LOG_DIR.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        LogConfig.LOG_DIR / filename,
        maxBytes=LogConfig.LOG_FILE_MAX_BYTES,
        backupCount=LogConfig.LOG_FILE_BACKUP_COUNT,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    handler.setLevel(level)
    return handler


def _handlers(level: int) -> list[logging.Handler]:
    console = logging.StreamHandler(sys.stdout)
    console.setLevel(level)
    handlers: list[logging.Handler] = [console]
    if LogConfig.LOG_TO_FILE:
        handlers.append(_rotating_handler("stridematch.log", level))
        handlers.append(_rotating_handler("stridematch-error.log", logging.ERROR))
    return handlers


def add_environment(logger, method_name, event_dict):
    """Tag every event with the deployment environment."""
    event_dict["env"] = LogConfig.ENVIRONMENT
    return event_dict


def configure_logging():
    """Route structlog events through stdlib handlers with per-request context."""
    level = getattr(logging, LogConfig.LOG_LEVEL, logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers = _handlers(level)

    renderer = (
        structlog.processors.JSONRenderer()
        if LogConfig.LOG_FORMAT == "json"
        else structlog.dev.ConsoleRenderer(colors=True)
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            add_environment,
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    structlog.get_logger(__name__).info(
        "logging_configured",
        environment=LogConfig.ENVIRONMENT,
        log_level=LogConfig.LOG_LEVEL,
        log_format=LogConfig.LOG_FORMAT,
        log_dir=str(LogConfig.LOG_DIR) if LogConfig.LOG_TO_FILE else None,
    )


def bind_request_fields(**fields):
    """Attach fields to every event logged for the rest of the request."""
    structlog.contextvars.bind_contextvars(**fields)


def clear_request_fields():
    """Drop all per-request fields."""
    structlog.contextvars.clear_contextvars()


logger = structlog.get_logger(__name__)


def log_context_extraction(fields: dict, dislikes: list[str], clarifications: int):
    """Log the outcome of building a conversation context.

    Args:
        fields: Detected coarse intent fields (goal, feel, support, ...)
        dislikes: Confirmed disliked models
        clarifications: Number of dislike candidates needing confirmation
    """
    logger.info(
        "context_extracted",
        category=EventCategory.CONTEXT.value,
        fields=fields,
        dislikes=dislikes,
        clarifications=clarifications,
    )


def log_dislike_resolution(
    candidate: str,
    model: Optional[str],
    confidence: float,
    accepted: bool,
):
    """Log how a single dislike candidate was resolved."""
    logger.debug(
        "dislike_resolved",
        category=EventCategory.DISLIKE.value,
        candidate=candidate,
        model=model,
        confidence=round(confidence, 3),
        accepted=accepted,
    )


def log_follow_up(question: Optional[str], pending_clarifications: int):
    """Log whether a follow-up question was chosen for the caller.

    Args:
        question: The question returned to the caller, if any
        pending_clarifications: Dislike candidates still awaiting confirmation
    """
    logger.info(
        "follow_up_selected",
        category=EventCategory.CONTEXT.value,
        asked=question is not None,
        question=question[:80] if question else None,
        pending_clarifications=pending_clarifications,
    )


def log_api_request(
    method: str,
    path: str,
    status_code: int,
    duration_ms: float,
    error: Optional[str] = None,
):
    """Log a finished API request at a level matching its status code."""
    level = "info" if status_code < 400 else "warning" if status_code < 500 else "error"
    getattr(logger, level)(
        "api_request",
        category=EventCategory.SYSTEM.value,
        method=method,
        path=path,
        status_code=status_code,
        duration_ms=round(duration_ms, 2),
        error=error,
    )


def log_error(error_type: str, message: str, context: Optional[dict] = None):
    """Log an error that was turned into an error response."""
    logger.error(
        "error",
        category=EventCategory.ERROR.value,
        error_type=error_type,
        message=message,
        context=context or {},
    )


class LogTimer:
    """Context manager that logs how long a block took."""

    def __init__(
        self,
        operation: str,
        category: EventCategory = EventCategory.PERFORMANCE,
        **extra_fields,
    ):
        self.operation = operation
        self.category = category
        self.extra_fields = extra_fields
        self.start_time: float = 0
        self.duration_ms: float = 0

    def __enter__(self):
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.duration_ms = (time.perf_counter() - self.start_time) * 1000

        if exc_type is not None:
            logger.error(
                self.operation,
                category=self.category.value,
                duration_ms=self.duration_ms,
                success=False,
                error=str(exc_val),
                **self.extra_fields,
            )
        else:
            logger.debug(
                self.operation,
                category=self.category.value,
                duration_ms=self.duration_ms,
                success=True,
                **self.extra_fields,
            )

        return False
