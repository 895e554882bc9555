"""
Comment Views - Direct API for comment retrieval and analysis.
Both endpoints run synchronously inside the request.
"""
from pydantic import ValidationError
from rest_framework.exceptions import ParseError
from rest_framework.views import APIView

from ai_utils.config import AIConfig
from ai_utils.services.registry import build_inference_service
from insights.config import get_pipeline_config
from insights.pipeline import analyze_comments
from insights.retrieval import build_comment_retriever
from telemetry.logging import get_logger
from telemetry.resilience import Deadline

from ..exceptions import ConfigurationError
from ..schemas import CommentAnalyzeRequest, CommentRetrieveRequest
from ..services.response_service import ResponseService
from ..utils import get_friendly_error_message

logger = get_logger(__name__)
response_service = ResponseService()


class CommentRetrieveView(APIView):
    """
    Retrieve the comments of a YouTube video with the configured provider.
    """

    def post(self, request):
        """
        This endpoint:
        1. Validates the video URL
        2. Runs the configured retrieval strategy under the pipeline budget
        3. Returns the comments, video info and total count
        """
        try:
            retrieve_request = CommentRetrieveRequest.model_validate(request.data)
        except ValidationError as e:
            logger.warning(f"Retrieve request validation failed: {e}")
            return response_service.error(get_friendly_error_message(e), 400)
        except ParseError:
            return response_service.error("Invalid JSON format", 400)

        try:
            config = get_pipeline_config()
            try:
                config.validate_retrieval()
            except ValueError as e:
                raise ConfigurationError(str(e)) from e

            retriever = build_comment_retriever(config)
            result = retriever.fetch(
                retrieve_request.video_url,
                config.max_comments,
                Deadline(config.pipeline_budget),
            )
            logger.info(f"Retrieved {result.total_count} comments for {retrieve_request.video_url}")
            return response_service.success(result.to_api())
        except Exception as e:
            return response_service.from_exception(e)


class CommentAnalyzeView(APIView):
    """
    Analyze a set of comments with the bounded inference service.
    """

    def post(self, request):
        """
        This endpoint:
        1. Validates comments and video info
        2. Sends the top comments by likes to the model under a hard deadline
        3. Returns the assembled analysis, model used and token counts
        """
        try:
            analyze_request = CommentAnalyzeRequest.model_validate(request.data)
        except ValidationError as e:
            logger.warning(f"Analyze request validation failed: {e.error_count()} errors")
            return response_service.error(get_friendly_error_message(e), 400)
        except ParseError:
            return response_service.error("Invalid JSON format", 400)

        try:
            config = get_pipeline_config()
            ai_config = AIConfig.from_env()
            if not ai_config.openrouter.api_key:
                raise ConfigurationError("OPENROUTER_API_KEY not configured")

            inference = build_inference_service(ai_config, default_deadline=config.inference_timeout)
            outcome = analyze_comments(
                analyze_request.comments,
                analyze_request.video_info,
                inference,
                model=analyze_request.model,
                deadline=config.inference_timeout,
                excerpt_size=config.excerpt_size,
                top_n=config.display_top_n,
            )
            return response_service.success(outcome.to_api())
        except Exception as e:
            return response_service.from_exception(e)
