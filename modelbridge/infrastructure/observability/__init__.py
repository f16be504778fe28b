"""Observability and logging facades."""

from .logging import (
    ContextualFormatter,
    FieldLogger,
    bind_logger,
    configure_logging,
    current_log_context,
    get_logger,
    log_context,
)

__all__ = [
    "ContextualFormatter",
    "FieldLogger",
    "bind_logger",
    "configure_logging",
    "current_log_context",
    "get_logger",
    "log_context",
]
