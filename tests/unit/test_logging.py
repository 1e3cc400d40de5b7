"""
Unit tests for structlog configuration.
"""

import json
import logging

import pytest
import structlog
from siftcore.config import MonitoringConfig
from siftcore.observability import configure_logging
from siftcore.observability.logging import add_document_url


@pytest.fixture
def restore_logging():
    """Put the root logger and structlog back the way they were."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers = handlers
    root.setLevel(level)
    structlog.reset_defaults()


class TestConfigureLogging:
    """Handler and renderer selection."""

    def test_console_handler(self, restore_logging):
        configure_logging(MonitoringConfig(log_level="debug", json_logs=True))

        root = logging.getLogger()
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0], logging.StreamHandler)
        assert isinstance(root.handlers[0].formatter, structlog.stdlib.ProcessorFormatter)
        assert root.level == logging.DEBUG

    def test_log_file_gets_json_lines(self, restore_logging, tmp_path):
        log_file = tmp_path / "logs" / "siftcore.log"
        configure_logging(MonitoringConfig(log_file=log_file))

        with structlog.contextvars.bound_contextvars(document_url="https://example.com/a"):
            structlog.get_logger("siftcore.test").info("Document parsed", word_count=12)
        for handler in logging.getLogger().handlers:
            handler.flush()

        lines = [json.loads(line) for line in log_file.read_text(encoding="utf-8").splitlines()]
        entry = next(line for line in lines if line["event"] == "Document parsed")
        assert entry["word_count"] == 12
        assert entry["document_url"] == "https://example.com/a"
        assert entry["level"] == "info"
        assert entry["logger"] == "siftcore.test"
        assert "timestamp" in entry

    def test_stdlib_records_rendered(self, restore_logging, tmp_path):
        log_file = tmp_path / "stdlib.log"
        configure_logging(MonitoringConfig(log_file=log_file))

        logging.getLogger("siftcore.metadata").warning("Skipping %s", "block")
        for handler in logging.getLogger().handlers:
            handler.flush()

        events = [json.loads(line)["event"] for line in log_file.read_text(encoding="utf-8").splitlines()]
        assert "Skipping block" in events


class TestAddDocumentUrl:
    """The document_url processor."""

    def test_adds_bound_url(self):
        with structlog.contextvars.bound_contextvars(document_url="https://example.com/"):
            event = add_document_url(None, "info", {"event": "x"})
        assert event == {"event": "x", "document_url": "https://example.com/"}

    def test_explicit_value_kept(self):
        with structlog.contextvars.bound_contextvars(document_url="https://example.com/"):
            event = add_document_url(None, "info", {"event": "x", "document_url": "other"})
        assert event["document_url"] == "other"

    def test_nothing_bound(self):
        assert add_document_url(None, "info", {"event": "x"}) == {"event": "x"}
