"""
Unit Tests: Structured Logging

Tests:
    - JsonFormatter output fields
    - StructuredLogger extras and scoped context
    - setup_logging handler configuration
"""

import io
import json
import logging

import pytest

from text_search.observability.logging import (
    JsonFormatter,
    LogLevel,
    StructuredLogger,
    setup_logging,
)


@pytest.fixture
def json_stream():
    """Logger named 'text_search.test' writing JSON lines into a StringIO."""
    stream = io.StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(JsonFormatter())
    target = logging.getLogger("text_search.test")
    target.addHandler(handler)
    target.setLevel(logging.DEBUG)
    try:
        yield stream
    finally:
        target.removeHandler(handler)
        target.setLevel(logging.NOTSET)


def read_lines(stream):
    return [json.loads(line) for line in stream.getvalue().splitlines()]


class TestStructuredLogger:
    """Tests for StructuredLogger."""

    def test_extras_in_json(self, json_stream):
        logger = StructuredLogger("text_search.test")
        logger.info("Combined postings", candidates=3)

        (record,) = read_lines(json_stream)
        assert record["message"] == "Combined postings"
        assert record["level"] == "INFO"
        assert record["logger"] == "text_search.test"
        assert record["candidates"] == 3
        assert "@timestamp" in record

    def test_context_scope(self, json_stream):
        logger = StructuredLogger("text_search.test")

        with logger.context(query_id="q-1"):
            logger.warning("inside")
        logger.warning("outside")

        inside, outside = read_lines(json_stream)
        assert inside["query_id"] == "q-1"
        assert "query_id" not in outside

    def test_with_extra(self, json_stream):
        logger = StructuredLogger("text_search.test").with_extra(shard=2)
        logger.debug("hello", step=1)

        (record,) = read_lines(json_stream)
        assert record["shard"] == 2
        assert record["step"] == 1

    def test_level_untouched_by_default(self):
        named = logging.getLogger("text_search.test.level")
        named.setLevel(logging.ERROR)
        try:
            StructuredLogger("text_search.test.level")
            assert named.level == logging.ERROR
        finally:
            named.setLevel(logging.NOTSET)

    def test_is_enabled_for(self):
        logger = StructuredLogger("text_search.test.enabled", level=LogLevel.WARNING)
        try:
            assert not logger.is_enabled_for(LogLevel.DEBUG)
            assert logger.is_enabled_for(LogLevel.ERROR)
        finally:
            logging.getLogger("text_search.test.enabled").setLevel(logging.NOTSET)

    def test_exception_serialized(self, json_stream):
        target = logging.getLogger("text_search.test")
        try:
            raise ValueError("bad key")
        except ValueError:
            target.exception("failed")

        (record,) = read_lines(json_stream)
        assert "ValueError: bad key" in record["exception"]


class TestSetupLogging:
    """Tests for setup_logging."""

    @pytest.fixture(autouse=True)
    def restore_root(self):
        root = logging.getLogger()
        handlers, level = list(root.handlers), root.level
        yield
        root.handlers[:] = handlers
        root.setLevel(level)

    def test_json_output(self):
        stream = io.StringIO()
        setup_logging(LogLevel.INFO, json_output=True, stream=stream)
        logging.getLogger("text_search.setup").info("ready")

        assert json.loads(stream.getvalue())["message"] == "ready"

    def test_plain_output_and_level(self):
        stream = io.StringIO()
        setup_logging(LogLevel.WARNING, json_output=False, stream=stream)
        logging.getLogger("text_search.setup").info("hidden")
        logging.getLogger("text_search.setup").warning("shown")

        output = stream.getvalue()
        assert "hidden" not in output
        assert "| WARNING  | text_search.setup | shown" in output

    def test_parse_level(self):
        assert LogLevel.parse("debug") is LogLevel.DEBUG


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
