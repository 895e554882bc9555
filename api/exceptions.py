"""
Custom API Exceptions with telemetry integration.
Maps the pipeline error taxonomy onto HTTP status codes for the direct API.
"""

from typing import Any

from insights.pipeline import user_facing_message
from telemetry.exceptions import BaseInsightsError


class APIException(Exception):
    """
    Base exception for API-specific errors.
    Integrates with the telemetry exception handling system.
    """

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.details = details or {}


class AnalysisNotFoundError(APIException):
    """Exception raised when a saved analysis does not exist."""

    def __init__(self, analysis_id: str, message: str | None = None):
        super().__init__(
            message or "Analysis not found",
            status_code=404,
            details={"analysis_id": analysis_id},
        )


class ConfigurationError(APIException):
    """Exception raised when a required API key is not configured."""

    def __init__(self, message: str):
        super().__init__(message, status_code=500)


def to_api_exception(exc: BaseException) -> APIException:
    """
    Convert any exception raised while serving a request into an APIException.

    Pipeline errors keep their taxonomy status (400, 500, 504) and their
    caller-safe message; anything else becomes a generic 500.
    """
    if isinstance(exc, APIException):
        return exc
    if isinstance(exc, BaseInsightsError):
        return APIException(user_facing_message(exc), status_code=exc.status_code, details=exc.details)
    return APIException("Internal server error occurred", status_code=500)
