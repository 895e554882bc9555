"""
Custom exception classes for the Comment Insights application.

This module defines the error taxonomy shared by the retrieval, inference,
persistence and API layers. Every pipeline failure is raised as one of these
classes so the orchestrator and the views can classify it without inspecting
messages.
"""

from typing import Any, Dict, Optional


class BaseInsightsError(Exception):
    """Base exception class for all Comment Insights errors."""

    # HTTP status used when the error reaches the direct API
    status_code: int = 500

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        """
        Initialize the base exception.

        Args:
            message: Error message
            details: Additional error details as a dictionary
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return formatted error message with details."""
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message


class InvalidInputError(BaseInsightsError):
    """Malformed or missing request fields. The caller must correct the input."""

    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None, **kwargs: Any):
        details = {"field": field} if field else {}
        details.update(kwargs)
        super().__init__(message, details)


class UnauthenticatedError(BaseInsightsError):
    """Signature or shared-secret failure. No detail is leaked to the caller."""

    status_code = 401

    def __init__(self, message: str = "Invalid request signature"):
        super().__init__(message)


class UpstreamTimeoutError(BaseInsightsError):
    """An external job or the inference call exceeded its time budget."""

    status_code = 504

    def __init__(self, operation: str, timeout_seconds: float, message: Optional[str] = None):
        self.operation = operation
        self.timeout_seconds = timeout_seconds
        super().__init__(
            message or f"Operation '{operation}' timed out after {timeout_seconds}s",
            {"operation": operation, "timeout_seconds": timeout_seconds},
        )


class UpstreamFailureError(BaseInsightsError):
    """An external provider returned a terminal error."""

    status_code = 500

    def __init__(self, service: str, message: str, status_code: Optional[int] = None,
                 **kwargs: Any):
        """
        Initialize upstream failure.

        Args:
            service: Name of the external service
            message: Provider message, safe to show to the caller
            status_code: Upstream HTTP status code if applicable
            **kwargs: Additional error details
        """
        self.service = service
        self.provider_message = message
        self.upstream_status = status_code
        details: Dict[str, Any] = {"service": service}
        if status_code is not None:
            details["status_code"] = status_code
        details.update(kwargs)
        super().__init__(f"{service} error: {message}", details)


class JobFailedError(UpstreamFailureError):
    """An external extraction job finished with a non-success status."""

    def __init__(self, service: str, job_status: str, run_id: Optional[str] = None):
        self.job_status = job_status
        super().__init__(service, f"job finished with status: {job_status}", run_id=run_id)


class MalformedOutputError(BaseInsightsError):
    """The inference output could not be parsed as a structured result."""

    status_code = 500

    def __init__(self, message: str, raw_text: str):
        self.raw_text = raw_text
        super().__init__(message, {"raw_length": len(raw_text or "")})


class PersistenceError(BaseInsightsError):
    """Saving or loading a history record failed."""

    def __init__(self, message: str, operation: str = "save"):
        super().__init__(message, {"operation": operation})


# Export all exception classes
__all__ = [
    'BaseInsightsError',
    'InvalidInputError',
    'UnauthenticatedError',
    'UpstreamTimeoutError',
    'UpstreamFailureError',
    'JobFailedError',
    'MalformedOutputError',
    'PersistenceError',
]
