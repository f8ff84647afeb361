"""Observability layer for the subgraph curator.

This module provides structured logging, request tracing via correlation IDs
and per-stage timing for source execution.

Usage:
    from curator.observability import get_logger

    logger = get_logger(__name__)
    logger.info("execution.source.completed", source_id=source_id)
"""

from curator.observability.context import (
    correlation_id_var,
    get_correlation_id,
    set_correlation_id,
)
from curator.observability.logger import configure_logging, get_logger
from curator.observability.middleware import (
    CorrelationIDMiddleware,
    RequestLoggingMiddleware,
)
from curator.observability.timing import StageTimer

__all__ = [
    # Context
    "correlation_id_var",
    "get_correlation_id",
    "set_correlation_id",
    # Logger
    "configure_logging",
    "get_logger",
    # Middleware
    "CorrelationIDMiddleware",
    "RequestLoggingMiddleware",
    # Timing
    "StageTimer",
]
