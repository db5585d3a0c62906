"""
Tests for logger functionality.
"""

import pytest
from pathlib import Path
from jobboard.logger import StructuredLogger, get_logger, reset_logger


class TestStructuredLogger:
    """Test structured logging functionality."""

    def test_logger_creation(self, tmp_path):
        """Logger should be created with default settings."""
        logger = StructuredLogger(
            name="test",
            level="INFO",
            log_dir=tmp_path,
            enable_console=False,
        )

        assert logger.logger.name == "test"
        assert logger.get_metrics()["requests_attempted"] == 0

    def test_no_file_by_default(self, tmp_path, monkeypatch):
        """File output is opt-in."""
        monkeypatch.chdir(tmp_path)
        StructuredLogger(name="test", enable_console=False).info("hello")
        assert not (tmp_path / "logs").exists()

    def test_log_methods(self, tmp_path):
        """All log level methods should work."""
        logger = StructuredLogger(
            name="test",
            log_dir=tmp_path,
            enable_console=False,
        )

        logger.debug("Debug message")
        logger.info("Info message")
        logger.warning("Warning message")
        logger.error("Error message")
        logger.critical("Critical message")

    def test_log_with_context(self, tmp_path):
        """Context kwargs should be appended as JSON."""
        logger = StructuredLogger(
            name="test",
            log_dir=tmp_path,
            enable_file=True,
            enable_console=False,
        )

        logger.info("Message with context", endpoint="/api/jobs", page=2)

        log_content = next(tmp_path.glob("*.log")).read_text()
        assert 'Context: {"endpoint": "/api/jobs", "page": 2}' in log_content

    def test_metrics_tracking(self, tmp_path):
        """Metrics should be tracked correctly."""
        logger = StructuredLogger(name="test", enable_console=False)

        logger.record_request_attempt("/api/jobs")
        logger.record_request_success("/api/jobs")
        logger.record_request_attempt("/api/statistics")
        logger.record_request_failure("/api/statistics", "OperationalError")

        metrics = logger.get_metrics()
        assert metrics["requests_attempted"] == 2
        assert metrics["requests_successful"] == 1
        assert metrics["requests_failed"] == 1
        assert metrics["errors_by_type"] == {"OperationalError": 1}

    def test_failures_counted_per_endpoint(self):
        """A failure is attributed to the endpoint that raised it."""
        logger = StructuredLogger(name="test", enable_console=False)

        logger.record_request_attempt("/api/jobs")
        logger.record_request_failure("/api/jobs", "OperationalError")
        logger.record_request_attempt("/api/statistics")
        logger.record_request_success("/api/statistics")

        endpoints = logger.get_metrics()["endpoints"]
        assert endpoints["/api/jobs"] == {
            "attempts": 1,
            "successes": 0,
            "failures": 1,
            "errors_by_type": {"OperationalError": 1},
            "success_rate": 0.0,
        }
        assert endpoints["/api/statistics"]["failures"] == 0
        assert endpoints["/api/statistics"]["errors_by_type"] == {}

    def test_get_metrics_returns_copies(self):
        """Mutating a snapshot leaves the live counters alone."""
        logger = StructuredLogger(name="test", enable_console=False)
        logger.record_request_attempt("/api/jobs")
        logger.record_request_failure("/api/jobs", "OperationalError")

        snapshot = logger.get_metrics()
        snapshot["endpoints"]["/api/jobs"]["attempts"] = 99
        snapshot["endpoints"]["/api/jobs"]["errors_by_type"]["OperationalError"] = 99
        snapshot["errors_by_type"]["OperationalError"] = 99

        fresh = logger.get_metrics()
        assert fresh["endpoints"]["/api/jobs"]["attempts"] == 1
        assert fresh["endpoints"]["/api/jobs"]["errors_by_type"] == {"OperationalError": 1}
        assert fresh["errors_by_type"] == {"OperationalError": 1}
        assert logger.endpoints["/api/jobs"].errors_by_type == {"OperationalError": 1}

    def test_success_rate_none_without_attempts(self):
        logger = StructuredLogger(name="test", enable_console=False)
        logger.record_request_success("/api/jobs")
        assert logger.get_metrics()["endpoints"]["/api/jobs"]["success_rate"] is None

    def test_success_rate_calculation(self):
        """Success rate should be calculated correctly."""
        logger = StructuredLogger(name="test", enable_console=False)

        for _ in range(3):
            logger.record_request_attempt("/api/jobs")

        logger.record_request_success("/api/jobs")
        logger.record_request_success("/api/jobs")

        metrics = logger.get_metrics()
        success_rate = metrics["endpoints"]["/api/jobs"]["success_rate"]

        assert success_rate == pytest.approx(0.667, rel=0.01)

    def test_metrics_summary_logged(self, tmp_path):
        logger = StructuredLogger(
            name="test",
            log_dir=tmp_path,
            enable_file=True,
            enable_console=False,
        )
        logger.record_request_attempt("/api/jobs")
        logger.record_request_failure("/api/jobs", "OperationalError")
        logger.log_metrics_summary()

        log_content = next(tmp_path.glob("*.log")).read_text()
        assert "Requests: 0/1 (0.0% success)" in log_content
        assert "/api/jobs: 0/1 (0.0%)" in log_content
        assert "failures=1 [OperationalError=1]" in log_content

    def test_log_file_creation(self, tmp_path):
        """Log file should be created in specified directory."""
        logger = StructuredLogger(
            name="test",
            log_dir=tmp_path,
            enable_file=True,
            enable_console=False,
        )

        logger.info("Test message")

        log_files = list(tmp_path.glob("jobboard_*.log"))
        assert len(log_files) == 1

        log_content = log_files[0].read_text()
        assert "Test message" in log_content


class TestGlobalLogger:
    """Test global logger singleton."""

    def test_get_logger_singleton(self):
        """get_logger should return same instance."""
        reset_logger()

        logger1 = get_logger(enable_console=False)
        logger2 = get_logger()

        assert logger1 is logger2

    def test_reset_logger(self):
        """reset_logger should create new instance."""
        reset_logger()

        logger1 = get_logger(enable_console=False)
        logger1.record_request_attempt("/api/jobs")

        reset_logger()

        logger2 = get_logger(enable_console=False)

        assert logger2.get_metrics()["requests_attempted"] == 0
        reset_logger()
