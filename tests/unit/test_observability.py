"""
Unit tests for logging and tracing setup.
"""

import logging

import structlog

from rsmq.config import Settings
from rsmq.observability import (
    bind_queue_context,
    clear_context,
    create_span,
    get_logger,
    setup_logging,
    setup_tracing,
)


class TestLogging:
    """Tests for structured logging setup."""

    def test_setup_logging_configures_root(self):
        """Test the root logger gets a single structlog handler."""
        setup_logging(Settings(log_level="DEBUG", log_format="json"))

        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, structlog.stdlib.ProcessorFormatter)

    def test_bind_queue_context(self):
        """Test namespace and queue are bound to the log context."""
        bind_queue_context("rsmq", "orders", worker="w1")

        try:
            context = structlog.contextvars.get_contextvars()
            assert context == {"namespace": "rsmq", "qname": "orders", "worker": "w1"}
        finally:
            clear_context()

        assert structlog.contextvars.get_contextvars() == {}

    def test_get_logger(self):
        """Test a structlog logger is returned."""
        assert get_logger("rsmq.test") is not None


class TestTracing:
    """Tests for tracing helpers."""

    def test_setup_tracing_disabled(self):
        """Test a tracer is returned without exporters when tracing is off."""
        assert setup_tracing() is not None

    def test_create_span_runs_block(self):
        """Test the enclosed block runs inside a span."""
        with create_span("rsmq.test", **{"rsmq.queue": "orders", "skipped": None}) as span:
            assert span is not None
