"""
History Views - List, fetch and save analyses.
"""
from pydantic import ValidationError
from rest_framework.exceptions import ParseError
from rest_framework.views import APIView

from insights.store import HistoryStore
from telemetry.logging import get_logger

from ..exceptions import AnalysisNotFoundError
from ..schemas import HistorySaveRequest
from ..services.response_service import ResponseService
from ..utils import get_friendly_error_message

logger = get_logger(__name__)
response_service = ResponseService()

DEFAULT_HISTORY_LIMIT = 50
MAX_HISTORY_LIMIT = 200


class HistoryListView(APIView):
    """Most recent analyses, newest first."""

    def get(self, request):
        raw_limit = request.query_params.get("limit", DEFAULT_HISTORY_LIMIT)
        try:
            limit = int(raw_limit)
        except (TypeError, ValueError):
            return response_service.error("limit must be an integer", 400)
        limit = max(1, min(limit, MAX_HISTORY_LIMIT))

        try:
            analyses = HistoryStore().list_recent(limit=limit)
        except Exception as e:
            return response_service.from_exception(e)
        return response_service.success({"analyses": analyses})


class HistoryDetailView(APIView):
    """A single saved analysis."""

    def get(self, request, analysis_id: str):
        try:
            record = HistoryStore().get(analysis_id)
            if record is None:
                raise AnalysisNotFoundError(analysis_id)
        except Exception as e:
            return response_service.from_exception(e)
        return response_service.success({"analysis": record})


class HistorySaveView(APIView):
    """Save an analysis produced by the analyze endpoint."""

    def post(self, request):
        try:
            entry = HistorySaveRequest.model_validate(request.data)
        except ValidationError as e:
            logger.warning(f"History save validation failed: {e.error_count()} errors")
            return response_service.error(get_friendly_error_message(e), 400)
        except ParseError:
            return response_service.error("Invalid JSON format", 400)

        try:
            record_id = HistoryStore().save(entry)
        except Exception as e:
            return response_service.from_exception(e)
        return response_service.success({"id": record_id, "message": "Analysis saved successfully"})
