"""
Centralized error handling and classification for imgshelf application.

Every user-facing failure raised by the gallery core is a GalleryError
subclass carrying a category, severity, machine readable code and a
message suitable for showing to the user. Errors log themselves on
construction so callers only need to decide how to present them.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any

from .logging_config import get_logger, log_error, log_security_event

logger = get_logger(__name__)


class ErrorCategory(Enum):
    """Error categories for classification and handling."""

    VALIDATION = "validation"
    CONFLICT = "conflict"
    NOT_FOUND = "not_found"
    AUTHENTICATION = "authentication"
    READ = "read"
    STORAGE = "storage"
    UNKNOWN = "unknown"


class ErrorSeverity(Enum):
    """Error severity levels."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


DEFAULT_USER_MESSAGES = {
    ErrorCategory.VALIDATION: "Please check the information you entered.",
    ErrorCategory.CONFLICT: "That item already exists.",
    ErrorCategory.NOT_FOUND: "The requested item could not be found.",
    ErrorCategory.AUTHENTICATION: "Authentication failed. Please log in again.",
    ErrorCategory.READ: "Error reading files.",
    ErrorCategory.STORAGE: "Local storage is unavailable.",
    ErrorCategory.UNKNOWN: "An unexpected error occurred.",
}


@dataclass
class ErrorInfo:
    """Structured error information for display and monitoring."""

    category: ErrorCategory
    severity: ErrorSeverity
    code: str
    message: str
    user_message: str
    details: dict[str, Any]
    timestamp: datetime
    recoverable: bool = True


class GalleryError(Exception):
    """
    Base exception class for imgshelf application.

    Subclasses pick their classification through class attributes; the
    constructor only takes what varies per occurrence.
    """

    category = ErrorCategory.UNKNOWN
    severity = ErrorSeverity.MEDIUM
    default_code = "unknown_error"
    recoverable = True

    def __init__(
        self,
        message: str,
        code: str | None = None,
        user_message: str | None = None,
        details: dict[str, Any] | None = None,
        original_exception: Exception | None = None,
    ):
        super().__init__(message)
        self.code = code or self.default_code
        self.user_message = user_message or DEFAULT_USER_MESSAGES[self.category]
        self.details = details or {}
        self.original_exception = original_exception
        self.timestamp = datetime.now()

        self._log_error()

    def _log_error(self) -> None:
        context = {
            "category": self.category.value,
            "severity": self.severity.value,
            "code": self.code,
            "recoverable": self.recoverable,
            **self.details,
        }
        if self.original_exception is not None:
            context["original_exception"] = str(self.original_exception)

        log_error(self, context)

        if self.category is ErrorCategory.AUTHENTICATION:
            log_security_event(self.code, username=self.details.get("username"))

    def get_error_info(self) -> ErrorInfo:
        """Get structured error information."""
        return ErrorInfo(
            category=self.category,
            severity=self.severity,
            code=self.code,
            message=str(self),
            user_message=self.user_message,
            details=self.details,
            timestamp=self.timestamp,
            recoverable=self.recoverable,
        )


class ValidationError(GalleryError):
    """Malformed input: empty fields, mismatched confirmation, rejected files."""

    category = ErrorCategory.VALIDATION
    severity = ErrorSeverity.LOW
    default_code = "validation_failed"


class ConflictError(GalleryError):
    """Duplicate username."""

    category = ErrorCategory.CONFLICT
    severity = ErrorSeverity.LOW
    default_code = "conflict"


class NotFoundError(GalleryError):
    """Unknown username, image id or image index."""

    category = ErrorCategory.NOT_FOUND
    severity = ErrorSeverity.LOW
    default_code = "not_found"


class AuthError(GalleryError):
    """Wrong credential, or an operation attempted while logged out."""

    category = ErrorCategory.AUTHENTICATION
    severity = ErrorSeverity.HIGH
    default_code = "auth_failed"


class ReadError(GalleryError):
    """File content could not be read or decoded."""

    category = ErrorCategory.READ
    default_code = "read_failed"


class StorageError(GalleryError):
    """The local database could not be opened or written."""

    category = ErrorCategory.STORAGE
    severity = ErrorSeverity.CRITICAL
    default_code = "storage_error"
    recoverable = False


class ErrorHandler:
    """Turns exceptions into ErrorInfo for display and tracks how often each code occurs."""

    def __init__(self) -> None:
        self.error_counts: dict[str, int] = {}

    def handle_error(self, error: Exception, context: dict[str, Any] | None = None) -> ErrorInfo:
        """
        Classify an exception for display.

        Args:
            error: Exception to handle
            context: Additional context information

        Returns:
            ErrorInfo: Structured error information
        """
        if not isinstance(error, GalleryError):
            error = GalleryError(
                str(error),
                details={"original_type": type(error).__name__, **(context or {})},
                original_exception=error,
            )

        error_info = error.get_error_info()
        self._track_error(error_info.code)
        return error_info

    def _track_error(self, error_code: str) -> None:
        self.error_counts[error_code] = self.error_counts.get(error_code, 0) + 1

        if self.error_counts[error_code] % 10 == 0:
            logger.warning("frequent_error_detected", error_code=error_code, count=self.error_counts[error_code])


error_handler = ErrorHandler()


def handle_error(error: Exception, context: dict[str, Any] | None = None) -> ErrorInfo:
    """Global error handling function."""
    return error_handler.handle_error(error, context)
