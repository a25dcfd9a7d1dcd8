"""
Centralized logging configuration for imgshelf application.

All modules log through structlog with snake_case event names and
key/value context. configure_structured_logging() routes everything
through the standard library so third-party log output shares one stream.
"""

import logging
import os
import sys
from typing import Any

import structlog

DEVELOPMENT_ENVIRONMENTS = ("development", "dev", "local")


def get_log_level() -> int:
    """Log level from LOG_LEVEL, INFO when unset or unknown."""
    level_name = os.getenv("LOG_LEVEL", "INFO").upper()
    return logging.getLevelNamesMapping().get(level_name, logging.INFO)


def is_development_environment() -> bool:
    return os.getenv("ENVIRONMENT", "development").lower() in DEVELOPMENT_ENVIRONMENTS


def configure_structured_logging() -> None:
    """
    Configure structured logging for the entire application.

    Development runs render human readable console lines; every other
    environment emits one JSON object per line on stderr.
    """
    log_level = get_log_level()
    is_dev = is_development_environment()

    logging.basicConfig(level=log_level, format="%(message)s", stream=sys.stderr)
    logging.getLogger().setLevel(log_level)

    renderer: Any = (
        structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()) if is_dev else structlog.processors.JSONRenderer()
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    get_logger("imgshelf.logging").debug(
        "logging_configured",
        log_level=logging.getLevelName(log_level),
        environment="development" if is_dev else "production",
    )


def get_logger(name: str | None = None) -> Any:
    """Get a structured logger, usually as get_logger(__name__)."""
    return structlog.get_logger(name)


def log_performance(operation: str, duration: float, **context: Any) -> None:
    """
    Log how long an operation took.

    Args:
        operation: Name of the operation
        duration: Duration in seconds
        **context: Additional context information
    """
    get_logger("imgshelf.performance").info(
        "performance_metric", operation=operation, duration_seconds=round(duration, 4), **context
    )


def log_user_action(username: str, action: str, **context: Any) -> None:
    """
    Record a user action in the audit trail.

    Args:
        username: Account the action was performed by
        action: Action performed (login, upload, delete_image, ...)
        **context: Additional context information
    """
    get_logger("imgshelf.user_actions").info("user_action", username=username, action=action, **context)


def log_error(error: Exception, context: dict[str, Any] | None = None) -> None:
    """Log an error with its type, message and structured context."""
    get_logger("imgshelf.errors").error(
        "error_occurred",
        error_type=type(error).__name__,
        error_message=str(error),
        **(context or {}),
    )


def log_security_event(event_type: str, username: str | None = None, **context: Any) -> None:
    """
    Log a security-relevant event such as a failed login.

    Args:
        event_type: Type of security event
        username: Account involved (if known)
        **context: Additional context information
    """
    get_logger("imgshelf.security").warning("security_event", event_type=event_type, username=username, **context)
