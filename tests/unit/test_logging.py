"""Unit tests for structured logging helpers."""

import json
import logging

import pytest

from fse_compliance.infrastructure.logging import (
    CorrelationIDFilter,
    JSONFormatter,
    LoggingConfig,
    clear_correlation_id,
    log_workflow_transition,
    set_correlation_id
)


def make_record(message: str = "Assessment completed", **extra) -> logging.LogRecord:
    """Create a log record with extra attributes."""
    record = logging.LogRecord("fse_compliance.test", logging.INFO, __file__, 10, message, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJSONFormatter:
    """Test cases for JSONFormatter."""

    def test_formats_core_fields(self):
        """Test the JSON envelope."""
        entry = json.loads(JSONFormatter().format(make_record()))
        assert entry["level"] == "INFO"
        assert entry["service"] == "fse-compliance"
        assert entry["logger"] == "fse_compliance.test"
        assert entry["message"] == "Assessment completed"

    def test_extra_fields(self):
        """Test that extra attributes are nested under extra."""
        entry = json.loads(JSONFormatter().format(make_record(total_score=95, stars=5)))
        assert entry["extra"] == {"total_score": 95, "stars": 5}


class TestCorrelationID:
    """Test cases for correlation ID propagation."""

    def test_filter_uses_context(self):
        """Test that the filter stamps the current correlation ID."""
        record = make_record()
        set_correlation_id("req-123")
        try:
            CorrelationIDFilter().filter(record)
        finally:
            clear_correlation_id()
        assert record.correlation_id == "req-123"

    def test_filter_without_context(self):
        """Test the default correlation ID."""
        record = make_record()
        CorrelationIDFilter().filter(record)
        assert record.correlation_id == "unknown"


class TestWorkflowTransitionLog:
    """Test cases for workflow transition logging."""

    def test_transition_fields(self, caplog):
        """Test that transition logs carry both states."""
        logger = logging.getLogger("fse_compliance.test.workflow")
        with caplog.at_level(logging.INFO, logger="fse_compliance.test.workflow"):
            log_workflow_transition(logger, "finalize", "awaiting_signatures", "completed", step="cleaning")

        record = caplog.records[-1]
        assert record.getMessage() == "Workflow finalize: awaiting_signatures -> completed"
        assert record.from_state == "awaiting_signatures"
        assert record.to_state == "completed"
        assert record.step == "cleaning"


@pytest.fixture
def restore_root_logger():
    """Drop the JSON handlers a test installed and restore the root level."""
    root = logging.getLogger()
    level = root.level
    yield root
    for handler in root.handlers[:]:
        if isinstance(handler.formatter, JSONFormatter):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)


class TestLoggingConfig:
    """Test cases for LoggingConfig."""

    def test_from_env(self, monkeypatch, tmp_path):
        """Test reading settings from the environment."""
        monkeypatch.setenv("LOG_LEVEL", "debug")
        monkeypatch.setenv("LOG_FILE", str(tmp_path / "service.log"))
        monkeypatch.setenv("LOG_BACKUP_COUNT", "2")
        monkeypatch.delenv("SERVICE_NAME", raising=False)

        config = LoggingConfig.from_env()

        assert config.log_level == "debug"
        assert config.service_name == "fse-compliance"
        assert config.log_file == tmp_path / "service.log"
        assert config.backup_count == 2

    def test_defaults_log_to_stdout_only(self, monkeypatch):
        """Test that no file is configured without LOG_FILE."""
        monkeypatch.delenv("LOG_FILE", raising=False)
        assert LoggingConfig.from_env().log_file is None

    def test_apply_writes_json_to_file(self, tmp_path, restore_root_logger):
        """Test that applied config writes JSON lines to the log file."""
        log_file = tmp_path / "logs" / "service.log"
        LoggingConfig(log_level="INFO", log_file=log_file).apply()

        logging.getLogger("fse_compliance.test.file").info("Summary sent", extra={"total_score": 70})
        for handler in restore_root_logger.handlers:
            handler.flush()

        entry = json.loads(log_file.read_text(encoding="utf-8").splitlines()[-1])
        assert entry["message"] == "Summary sent"
        assert entry["extra"] == {"total_score": 70}
        assert restore_root_logger.level == logging.INFO

    def test_unknown_level_raises(self, restore_root_logger):
        """Test that a misspelt level fails at startup."""
        with pytest.raises(ValueError, match="Unknown log level 'verbose'"):
            LoggingConfig(log_level="verbose").apply()
