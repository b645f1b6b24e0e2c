# ruff: noqa: D107
"""AI service exceptions."""

from typing import Any

from .base import BaseAppException


class AIServiceError(BaseAppException):
    """Base exception for AI service errors."""

    def __init__(
        self,
        message: str = "AI service error occurred",
        error_code: str = "AI_SERVICE_ERROR",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, status_code=502, error_code=error_code, details=details)


class AIServiceUnavailableError(AIServiceError):
    """Exception raised when AI service is unavailable."""

    def __init__(
        self,
        message: str = "AI service is temporarily unavailable",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, "AI_SERVICE_UNAVAILABLE", details)


class AIQuotaExceededError(AIServiceError):
    """Exception raised when AI service quota is exceeded."""

    def __init__(
        self,
        message: str = "AI service quota exceeded",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, "AI_QUOTA_EXCEEDED", details)


class AIInvalidRequestError(AIServiceError):
    """Exception raised for invalid AI service requests."""

    def __init__(
        self,
        message: str = "Invalid request to AI service",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, "AI_INVALID_REQUEST", details)


class AIConfigurationError(AIServiceError):
    """Exception raised when AI service is not properly configured."""

    def __init__(
        self,
        message: str = "AI service is not properly configured",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, "AI_CONFIGURATION_ERROR", details)


# Map common error patterns to exceptions
AI_ERROR_MAPPING = {
    "quota_exceeded": AIQuotaExceededError,
    "service_unavailable": AIServiceUnavailableError,
    "invalid_request": AIInvalidRequestError,
    "configuration_error": AIConfigurationError,
}


def map_ai_error(
    error_type: str, message: str, details: dict[str, Any] | None = None
) -> AIServiceError:
    """Map error type to appropriate exception."""
    exception_class = AI_ERROR_MAPPING.get(error_type)
    if exception_class is None:
        return AIServiceError(message, details=details)
    return exception_class(message, details)
