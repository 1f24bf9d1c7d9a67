"""
Observability module.
Contains logging, metrics, and tracing setup.
"""

from rsmq.observability.logging import (
    bind_queue_context,
    clear_context,
    get_logger,
    setup_logging,
)
from rsmq.observability.metrics import (
    MetricsCollector,
    get_metrics,
    setup_metrics,
)
from rsmq.observability.tracing import create_span, get_tracer, setup_tracing

__all__ = [
    "setup_logging",
    "get_logger",
    "bind_queue_context",
    "clear_context",
    "setup_metrics",
    "get_metrics",
    "MetricsCollector",
    "setup_tracing",
    "get_tracer",
    "create_span",
]
