"""
Response Service for API response formatting.
Every direct API response carries ``success``; errors use ``{success: false, error}``.
"""
from typing import Any, Dict

from rest_framework import status
from rest_framework.response import Response

from telemetry import get_logger

from ..exceptions import APIException, to_api_exception


class ResponseService:
    """
    Builds the uniform success and error envelopes of the direct API.
    """

    def __init__(self):
        self.logger = get_logger(__name__)

    def success(self, data: Dict[str, Any], status_code: int = status.HTTP_200_OK) -> Response:
        return Response({"success": True, **data}, status=status_code)

    def format_error_response(self, message: str) -> Dict[str, Any]:
        """
        Format standardized error responses.

        Args:
            message: Caller-safe error message

        Returns:
            Formatted error response dictionary
        """
        return {"success": False, "error": message}

    def error(self, message: str, status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR) -> Response:
        return Response(self.format_error_response(message), status=status_code)

    def from_exception(self, exc: BaseException) -> Response:
        """Error response for an exception, logging it at a level matching its class."""
        api_exc = to_api_exception(exc)
        if api_exc.status_code >= 500:
            self.logger.error(f"Request failed ({api_exc.status_code}): {exc}", exc_info=not isinstance(exc, APIException))
        else:
            self.logger.warning(f"Request rejected ({api_exc.status_code}): {api_exc.message}")
        return self.error(api_exc.message, api_exc.status_code)
