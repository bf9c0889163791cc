"""Observability module for logging."""

from inventory_sync.observability.logging import (
    LogContext,
    LogContextFilter,
    StructuredLogFormatter,
    configure_logging,
    get_log_context,
    get_logger,
)

__all__ = [
    "LogContext",
    "LogContextFilter",
    "StructuredLogFormatter",
    "configure_logging",
    "get_log_context",
    "get_logger",
]
