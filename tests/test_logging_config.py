"""
Tests for the web and worker logging configuration.
"""

from comment_insights.config.logging import get_celery_logging_config, get_logging_config


class TestLoggingConfig:

    def test_app_loggers_write_unified_json(self, tmp_path):
        config = get_logging_config(log_dir=tmp_path)

        for name in ("django", "api", "insights", "ai_utils", "telemetry", "celery"):
            assert "unified_json" in config["loggers"][name]["handlers"]
            assert config["loggers"][name]["propagate"] is False
        assert config["formatters"]["json"]["()"] == "telemetry.logging.formatters.JSONFormatter"
        assert config["handlers"]["unified_json"]["formatter"] == "json"
        assert (tmp_path / "unified").is_dir()

    def test_pipeline_loggers_get_file(self, tmp_path):
        loggers = get_logging_config(log_dir=tmp_path)["loggers"]
        assert "pipeline_file" in loggers["insights"]["handlers"]
        assert "pipeline_file" not in loggers["api"]["handlers"]

    def test_third_party_loggers_quiet(self, tmp_path):
        loggers = get_logging_config(log_dir=tmp_path)["loggers"]
        for name in ("urllib3", "requests", "openai", "httpx"):
            assert loggers[name]["level"] == "WARNING"

    def test_debug_switches_console_and_file_format(self, tmp_path):
        config = get_logging_config(debug=True, log_dir=tmp_path)
        assert config["handlers"]["console"]["level"] == "DEBUG"
        assert config["handlers"]["pipeline_file"]["formatter"] == "text"
        assert get_logging_config(log_dir=tmp_path)["handlers"]["pipeline_file"]["formatter"] == "json"

    def test_worker_config(self, tmp_path):
        config = get_celery_logging_config(tmp_path)
        assert config["root"]["handlers"] == ["console", "file"]
        assert config["handlers"]["file"]["filename"] == str(tmp_path / "celery" / "worker.log")
        assert (tmp_path / "celery").is_dir()
