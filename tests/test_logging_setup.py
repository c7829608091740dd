"""Tests for logging configuration."""

import json
import logging
import sys

from neardup.utils.logging_setup import JSONFormatter, log_operation, setup_logging


class TestSetupLogging:
    """Test handler wiring."""

    def test_console_only(self):
        logger = setup_logging("neardup.test.console", level="DEBUG")
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1
        assert logger.propagate is False

    def test_repeated_setup_replaces_handlers(self):
        setup_logging("neardup.test.repeat")
        logger = setup_logging("neardup.test.repeat")
        assert len(logger.handlers) == 1

    def test_json_file_output(self, tmp_path):
        logger = setup_logging("neardup.test.file", console=False, file=True, log_dir=tmp_path)
        log_operation(logger, "run", input="docs.tsv")
        for handler in logger.handlers:
            handler.flush()
            handler.close()

        files = list(tmp_path.glob("neardup_*.jsonl"))
        assert len(files) == 1
        record = json.loads(files[0].read_text().splitlines()[0])
        assert record["operation"] == "run"
        assert record["input"] == "docs.tsv"
        assert record["level"] == "INFO"


class TestJSONFormatter:
    """Test JSON record shape."""

    def test_exception_included(self):
        try:
            raise ValueError("boom")
        except ValueError:
            record = logging.LogRecord("x", logging.ERROR, __file__, 1, "failed", None,
                                       exc_info=sys.exc_info())
        data = json.loads(JSONFormatter().format(record))
        assert data["message"] == "failed"
        assert "ValueError: boom" in data["exception"]
