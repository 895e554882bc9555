"""
Unit tests for pipeline orchestration.

Retrieval, inference, storage and delivery are replaced with mocks so each
stage transition and failure path can be checked in isolation.
"""

from unittest.mock import MagicMock

import pytest
from celery.exceptions import SoftTimeLimitExceeded

from ai_utils.models import InferenceOutcome, TokenCounts
from insights.pipeline import (
    OutcomeStatus,
    PipelineJob,
    PipelineOrchestrator,
    Stage,
    analyze_comments,
    user_facing_message,
)
from insights.schemas import RetrievalResult, TriggerRequest
from telemetry.exceptions import (
    InvalidInputError,
    JobFailedError,
    MalformedOutputError,
    PersistenceError,
    UpstreamFailureError,
    UpstreamTimeoutError,
)
from telemetry.resilience import Deadline
from tests.conftest import VIDEO_URL, make_items

CALLBACK = "https://hooks.slack.com/commands/T1/B2/xyz"


class RecordingNotifier:
    """Keeps every payload in order instead of posting it"""

    def __init__(self):
        self.messages = []

    def notify(self, address, payload):
        self.messages.append((address, payload))
        return True

    @property
    def texts(self):
        return [payload["text"] for _, payload in self.messages]


@pytest.fixture
def inference(model_output):
    service = MagicMock()
    service.infer.return_value = InferenceOutcome(
        output=model_output,
        token_counts=TokenCounts(input=1200, output=300),
        model="test/model",
        raw_text="{}",
    )
    return service


@pytest.fixture
def retriever(video_info):
    service = MagicMock()
    service.fetch.return_value = RetrievalResult(items=make_items(300), video_info=video_info)
    return service


@pytest.fixture
def store():
    history = MagicMock()
    history.save.return_value = "record-1"
    return history


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def orchestrator(retriever, inference, pipeline_config, store, notifier, fake_clock):
    return PipelineOrchestrator(
        retriever=retriever,
        inference=inference,
        config=pipeline_config,
        store=store,
        notifier=notifier,
        clock=fake_clock,
    )


def slack_job(model="test/model"):
    return PipelineJob(trigger=TriggerRequest(
        source_identifier=VIDEO_URL,
        callback_address=CALLBACK,
        requested_model=model,
        user_id="U1",
        channel_id="C1",
    ))


class TestSuccessfulRun:

    def test_runs_all_stages(self, orchestrator):
        job = slack_job()
        outcome = orchestrator.run(job)

        assert outcome.status == OutcomeStatus.SUCCESS
        assert job.stage == Stage.DONE
        assert job.history == [
            Stage.PENDING, Stage.RETRIEVING, Stage.INFERRING, Stage.PERSISTING, Stage.NOTIFYING, Stage.DONE,
        ]
        assert outcome.record_id == "record-1"
        assert outcome.analysis.token_counts.input == 1200

    def test_messages_sent_in_order(self, orchestrator, notifier):
        orchestrator.run(slack_job())

        assert notifier.texts == [
            "✅ Retrieved 300 comments. Analyzing...",
            "✅ Analysis complete for: Test Video",
        ]
        assert all(address == CALLBACK for address, _ in notifier.messages)

    def test_only_top_comments_sent_to_model(self, orchestrator, inference):
        orchestrator.run(slack_job())

        _, user_prompt = inference.infer.call_args.args
        assert "(300 likes)" in user_prompt
        assert "(151 likes)" in user_prompt
        assert "(150 likes)" not in user_prompt
        assert inference.infer.call_args.kwargs["model"] == "test/model"

    def test_inference_deadline_capped(self, orchestrator, inference):
        orchestrator.run(slack_job())
        assert inference.infer.call_args.kwargs["deadline"] == 55.0

    def test_inference_deadline_bounded_by_budget(self, orchestrator, inference, fake_clock):
        deadline = Deadline(100.0, clock=fake_clock)
        fake_clock.now += 80

        orchestrator.run(slack_job(), deadline=deadline)

        assert inference.infer.call_args.kwargs["deadline"] == pytest.approx(20.0)

    def test_result_uses_full_comment_set(self, orchestrator):
        outcome = orchestrator.run(slack_job())

        result = outcome.analysis.result
        assert result.video_info.total_comments_analyzed == 300
        assert [c.likes for c in result.top_comments.most_liked] == [300, 299, 298, 297, 296]

    def test_history_entry_saved(self, orchestrator, store):
        orchestrator.run(slack_job())

        entry = store.save.call_args.args[0]
        assert entry.video_id == "dQw4w9WgXcQ"
        assert entry.video_title == "Test Video"
        assert entry.model_used == "test/model"
        assert entry.total_comments == 300
        assert entry.tokens_used == {"input": 1200, "output": 300}

    def test_without_callback_skips_notifying(self, orchestrator, notifier):
        job = PipelineJob(trigger=TriggerRequest(source_identifier=VIDEO_URL))
        outcome = orchestrator.run(job)

        assert outcome.status == OutcomeStatus.SUCCESS
        assert Stage.NOTIFYING not in job.history
        assert notifier.messages == []

    def test_persistence_failure_does_not_fail_job(self, orchestrator, store, notifier):
        store.save.side_effect = PersistenceError("database is locked")
        job = slack_job()

        outcome = orchestrator.run(job)

        assert outcome.status == OutcomeStatus.SUCCESS
        assert outcome.record_id is None
        assert job.stage == Stage.DONE
        assert notifier.texts[-1] == "✅ Analysis complete for: Test Video"


class TestNoContent:

    def test_empty_retrieval_skips_inference(self, orchestrator, retriever, inference, notifier, video_info):
        retriever.fetch.return_value = RetrievalResult(items=[], video_info=video_info)
        job = slack_job()

        outcome = orchestrator.run(job)

        assert outcome.status == OutcomeStatus.NO_CONTENT
        assert job.stage == Stage.DONE
        inference.infer.assert_not_called()
        assert notifier.texts == ["ℹ️ No comments found"]


class TestFailures:

    def test_retrieval_timeout(self, orchestrator, retriever, inference, notifier):
        retriever.fetch.side_effect = UpstreamTimeoutError(
            "comment retrieval", 300, message="Scraping timed out. Try a video with fewer comments."
        )
        job = slack_job()

        outcome = orchestrator.run(job)

        assert outcome.status == OutcomeStatus.FAILED
        assert outcome.status_code == 504
        assert job.stage == Stage.FAILED
        assert job.last_error == "Scraping timed out. Try a video with fewer comments."
        inference.infer.assert_not_called()
        assert notifier.texts == ["❌ Failed to retrieve comments"]

    def test_job_failed_message(self, orchestrator, retriever, notifier):
        retriever.fetch.side_effect = JobFailedError("Apify", "ABORTED", "run-1")

        outcome = orchestrator.run(slack_job())

        assert outcome.error == "Scraping failed with status: ABORTED"
        assert "Scraping failed with status: ABORTED" in notifier.messages[-1][1]["blocks"][0]["text"]["text"]

    def test_inference_failure(self, orchestrator, inference, store, notifier):
        inference.infer.side_effect = UpstreamFailureError("OpenRouter", "Rate limit exceeded", status_code=429)
        job = slack_job()

        outcome = orchestrator.run(job)

        assert outcome.error == "AI analysis failed: Rate limit exceeded"
        assert job.history[-2:] == [Stage.INFERRING, Stage.FAILED]
        store.save.assert_not_called()
        assert notifier.texts == ["✅ Retrieved 300 comments. Analyzing...", "❌ Analysis failed"]

    def test_malformed_output(self, orchestrator, inference):
        inference.infer.side_effect = MalformedOutputError("Failed to parse analysis results", raw_text="oops")
        outcome = orchestrator.run(slack_job())
        assert outcome.error == "Failed to parse analysis results"
        assert outcome.error_type == "MalformedOutputError"

    def test_unexpected_error_is_not_leaked(self, orchestrator, inference, notifier):
        inference.infer.side_effect = KeyError("choices")
        job = slack_job()

        outcome = orchestrator.run(job)

        assert job.stage == Stage.FAILED
        assert outcome.error == "An error occurred during analysis"
        assert outcome.status_code == 500
        assert "choices" not in notifier.messages[-1][1]["blocks"][0]["text"]["text"]

    def test_soft_time_limit_propagates(self, orchestrator, retriever, notifier):
        retriever.fetch.side_effect = SoftTimeLimitExceeded()
        job = slack_job()

        with pytest.raises(SoftTimeLimitExceeded):
            orchestrator.run(job)

        assert job.stage == Stage.RETRIEVING
        assert notifier.messages == []

    def test_exactly_one_final_message(self, orchestrator, retriever, notifier):
        retriever.fetch.side_effect = InvalidInputError("Invalid YouTube URL")
        orchestrator.run(slack_job())
        assert len(notifier.messages) == 1


class TestUserFacingMessage:

    @pytest.mark.parametrize("exc, expected", [
        (JobFailedError("Apify", "FAILED"), "Scraping failed with status: FAILED"),
        (UpstreamFailureError("OpenRouter", "Invalid model"), "AI analysis failed: Invalid model"),
        (UpstreamFailureError("OpenRouter", "No analysis generated"), "No analysis generated"),
        (UpstreamFailureError("Apify", "Failed to start comment scraper"), "Failed to start comment scraper"),
        (UpstreamTimeoutError("inference", 55, message="Request timed out."), "Request timed out."),
        (ValueError("secret detail"), "An error occurred during analysis"),
    ])
    def test_messages(self, exc, expected):
        assert user_facing_message(exc) == expected


class TestAnalyzeComments:

    def test_returns_outcome(self, inference, video_info):
        outcome = analyze_comments(make_items(20), video_info, inference, model="other/model", deadline=30)

        assert outcome.model_used == "test/model"
        assert inference.infer.call_args.kwargs == {"model": "other/model", "deadline": 30}
        data = outcome.to_api()
        assert set(data) == {"analysis", "model_used", "tokens_used"}
        assert data["tokens_used"] == {"input": 1200, "output": 300}
