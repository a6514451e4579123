"""
Error Handling Module

Defines domain exceptions and error categories for the application.
Domain exceptions are pure and have no external dependencies.
Application exceptions map categories to user-facing messages and HTTP codes.
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorCategory(Enum):
    """Error category enumeration for structured error handling."""

    NO_FILE = "no_file"
    UNSUPPORTED_TYPE = "unsupported_type"
    FILE_TOO_LARGE = "file_too_large"
    FILE_NOT_FOUND = "file_not_found"
    STORAGE_ERROR = "storage_error"
    INVALID_REQUEST = "invalid_request"
    REMOTE_ERROR = "remote_error"
    SYSTEM_ERROR = "system_error"


# Default messages, used when no technical message is supplied
ERROR_MESSAGES: Dict[ErrorCategory, str] = {
    ErrorCategory.NO_FILE: "No file uploaded",
    ErrorCategory.UNSUPPORTED_TYPE: "Unsupported file type",
    ErrorCategory.FILE_TOO_LARGE: "File size exceeds the limit (50MB)",
    ErrorCategory.FILE_NOT_FOUND: "File not found",
    ErrorCategory.STORAGE_ERROR: "Failed to store file",
    ErrorCategory.INVALID_REQUEST: "Invalid request",
    ErrorCategory.REMOTE_ERROR: "Watermark service request failed",
    ErrorCategory.SYSTEM_ERROR: "Internal server error",
}

HTTP_STATUS_CODES: Dict[ErrorCategory, int] = {
    ErrorCategory.NO_FILE: 400,
    ErrorCategory.UNSUPPORTED_TYPE: 400,
    ErrorCategory.FILE_TOO_LARGE: 400,
    ErrorCategory.FILE_NOT_FOUND: 404,
    ErrorCategory.STORAGE_ERROR: 500,
    ErrorCategory.INVALID_REQUEST: 400,
    ErrorCategory.REMOTE_ERROR: 502,
    ErrorCategory.SYSTEM_ERROR: 500,
}


# ============================================================================
# Domain Exceptions (Pure - No External Dependencies)
# ============================================================================

class DomainError(Exception):
    """
    Base exception for all domain errors.

    Domain exceptions are pure and have no external dependencies.
    They can optionally wrap original errors for context.
    """

    category = ErrorCategory.SYSTEM_ERROR

    def __init__(self, message: str, original_error: Exception = None):
        """
        Initialize domain error.

        Args:
            message: Error message
            original_error: Optional original exception that caused this error
        """
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class InvalidRequestError(DomainError):
    """Raised when required request fields are missing or malformed."""

    category = ErrorCategory.INVALID_REQUEST


class UploadValidationError(DomainError):
    """Base class for uploads rejected before anything is persisted."""

    category = ErrorCategory.INVALID_REQUEST


class NoFileProvidedError(UploadValidationError):
    """Raised when the request carries no file part."""

    category = ErrorCategory.NO_FILE


class UnsupportedFileTypeError(UploadValidationError):
    """Raised when the declared mime type is not in the allow-list."""

    category = ErrorCategory.UNSUPPORTED_TYPE

    def __init__(self, mime_type: str):
        super().__init__(f"Unsupported file type: {mime_type}")
        self.mime_type = mime_type


class FileTooLargeError(UploadValidationError):
    """Raised when an upload exceeds the size ceiling."""

    category = ErrorCategory.FILE_TOO_LARGE

    def __init__(self, max_bytes: int, actual_bytes: Optional[int] = None):
        limit_mb = max_bytes // (1024 * 1024)
        super().__init__(f"File size exceeds the limit ({limit_mb}MB)")
        self.max_bytes = max_bytes
        self.actual_bytes = actual_bytes


class StorageError(DomainError):
    """Raised when writing or removing file bytes fails."""

    category = ErrorCategory.STORAGE_ERROR


class RemoteApiError(DomainError):
    """
    Raised when a watermark service call fails.

    ``status_code`` is None for transport failures (timeout, refused
    connection); otherwise it carries the non-2xx HTTP status.
    """

    category = ErrorCategory.REMOTE_ERROR

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        status_text: str = "",
        body: str = "",
        original_error: Exception = None,
    ):
        super().__init__(message, original_error)
        self.status_code = status_code
        self.status_text = status_text
        self.body = body


class RetryExhaustedError(DomainError):
    """Raised when every attempt of a retried call has failed."""

    category = ErrorCategory.REMOTE_ERROR

    def __init__(self, attempts: int, last_error: Exception):
        super().__init__(
            f"Request failed after {attempts} attempts: {last_error}", last_error
        )
        self.attempts = attempts
        self.last_error = last_error


# ============================================================================
# Application Layer Exceptions
# ============================================================================

class ApplicationError(Exception):
    """
    Base application error with category and user-facing message.

    Bridges domain errors and HTTP responses. Every response built from it
    carries ``success: false``.
    """

    def __init__(
        self,
        category: ErrorCategory,
        technical_message: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize application error.

        Args:
            category: Error category
            technical_message: Message surfaced to the caller; falls back to
                the category default
            context: Additional context information
        """
        self.category = category
        self.technical_message = technical_message or ""
        self.context = context or {}
        self.message = self.technical_message or ERROR_MESSAGES.get(
            category, ERROR_MESSAGES[ErrorCategory.SYSTEM_ERROR]
        )
        self.http_status_code = HTTP_STATUS_CODES.get(category, 500)

        super().__init__(self.message)

    @classmethod
    def from_domain_error(cls, error: DomainError) -> "ApplicationError":
        return cls(error.category, error.message)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert error to dictionary for API response.

        Returns:
            Dictionary with error information
        """
        return {
            "success": False,
            "error": self.message,
            "category": self.category.value,
        }


def create_error_response(
    category: ErrorCategory,
    technical_message: Optional[str] = None,
    context: Optional[Dict[str, Any]] = None,
    status_code: Optional[int] = None,
) -> tuple[Dict[str, Any], int]:
    """
    Create a structured error response for API endpoints.

    Args:
        category: Error category
        technical_message: Message surfaced to the caller
        context: Additional context information
        status_code: HTTP status code, defaults to the category's code

    Returns:
        Tuple of (error_dict, status_code)
    """
    error = ApplicationError(category, technical_message, context)
    return error.to_dict(), status_code or error.http_status_code
