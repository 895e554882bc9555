"""
Unit tests for the comment pipeline Celery task.
"""

from unittest.mock import MagicMock, patch

import pytest
from celery.exceptions import SoftTimeLimitExceeded

from insights.pipeline import OutcomeStatus, PipelineOrchestrator, PipelineOutcome, Stage
from insights.tasks import build_orchestrator, run_comment_pipeline
from tests.conftest import VIDEO_URL

CALLBACK = "https://hooks.slack.com/commands/T1/B2/xyz"

TRIGGER = {
    "source_identifier": VIDEO_URL,
    "callback_address": CALLBACK,
    "requested_model": "test/model",
    "user_id": "U1",
    "channel_id": "C1",
}


def finish(job):
    job.advance(Stage.DONE)
    return PipelineOutcome(status=OutcomeStatus.SUCCESS, job=job, record_id="record-1")


class TestRunCommentPipeline:

    @patch("insights.tasks.SlackResponseNotifier")
    @patch("insights.tasks.build_orchestrator")
    @patch("insights.tasks.get_pipeline_config")
    def test_runs_orchestrator(self, mock_config, mock_build, mock_notifier_cls, pipeline_config):
        mock_config.return_value = pipeline_config
        mock_notifier_cls.return_value.deliveries = [MagicMock(), MagicMock()]
        mock_build.return_value.run.side_effect = finish

        result = run_comment_pipeline(TRIGGER)

        assert result["status"] == "success"
        assert result["stage"] == "done"
        assert result["record_id"] == "record-1"
        assert result["deliveries"] == 2
        job = mock_build.return_value.run.call_args.args[0]
        assert job.trigger.source_identifier == VIDEO_URL
        assert job.trigger.requested_model == "test/model"

    @patch("insights.tasks.SlackResponseNotifier")
    @patch("insights.tasks.build_orchestrator")
    @patch("insights.tasks.get_pipeline_config")
    def test_missing_configuration(self, mock_config, mock_build, mock_notifier_cls, pipeline_config):
        mock_config.return_value = pipeline_config
        mock_build.side_effect = ValueError("APIFY_API_KEY not configured")

        result = run_comment_pipeline(TRIGGER)

        assert result["status"] == "failed"
        assert result["stage"] == "failed"
        assert result["error"] == "APIFY_API_KEY not configured"
        address, payload = mock_notifier_cls.return_value.notify.call_args.args
        assert address == CALLBACK
        assert payload["text"] == "❌ Error during analysis"

    @patch("insights.tasks.SlackResponseNotifier")
    @patch("insights.tasks.build_orchestrator")
    @patch("insights.tasks.get_pipeline_config")
    def test_soft_time_limit(self, mock_config, mock_build, mock_notifier_cls, pipeline_config):
        mock_config.return_value = pipeline_config
        mock_build.return_value.run.side_effect = SoftTimeLimitExceeded()

        result = run_comment_pipeline(TRIGGER)

        assert result["status"] == "failed"
        assert result["error"] == "Analysis timed out. Try a video with fewer comments."
        mock_notifier_cls.return_value.notify.assert_called_once()


    @patch("insights.tasks.SlackResponseNotifier")
    @patch("insights.tasks.build_orchestrator")
    @patch("insights.tasks.get_pipeline_config")
    def test_soft_time_limit_inside_orchestrator(self, mock_config, mock_build, mock_notifier_cls, pipeline_config):
        mock_config.return_value = pipeline_config
        retriever = MagicMock()
        retriever.fetch.side_effect = SoftTimeLimitExceeded()
        mock_build.side_effect = lambda config, notifier=None: PipelineOrchestrator(
            retriever=retriever,
            inference=MagicMock(),
            config=config,
            notifier=notifier,
        )

        result = run_comment_pipeline(TRIGGER)

        assert result["status"] == "failed"
        assert result["stage"] == "failed"
        assert result["error"] == "Analysis timed out. Try a video with fewer comments."
        notifier = mock_notifier_cls.return_value
        notifier.notify.assert_called_once()
        _, payload = notifier.notify.call_args.args
        assert payload["text"] == "❌ Analysis failed"
        assert "timed out" in payload["blocks"][0]["text"]["text"]


class TestBuildOrchestrator:

    def test_requires_retrieval_key(self, pipeline_config):
        config = pipeline_config.model_copy(
            update={"apify": pipeline_config.apify.model_copy(update={"api_token": ""})}
        )
        with pytest.raises(ValueError, match="APIFY_API_KEY not configured"):
            build_orchestrator(config, ai_config=MagicMock())

    def test_requires_openrouter_key(self, pipeline_config):
        ai_config = MagicMock()
        ai_config.validate.side_effect = ValueError("OPENROUTER_API_KEY is required")
        with pytest.raises(ValueError, match="OPENROUTER_API_KEY"):
            build_orchestrator(pipeline_config, ai_config=ai_config)
