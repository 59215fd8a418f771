"""
scriptlaunch logging - structured, invocation-aware logging.

This module provides:
- Structured logging with structlog
- Invocation context propagation via contextvars
- Timing utilities for step durations

Usage:
    from scriptlaunch.framework.logging import configure_logging, get_logger, log_step

    configure_logging()
    log = get_logger(__name__)

    with log_step("dispatch", command="hello"):
        run()
"""

from scriptlaunch.framework.logging.config import configure_logging, is_configured
from scriptlaunch.framework.logging.context import (
    LogContext,
    add_context_processor,
    bind_context,
    clear_context,
    get_context,
    get_logger,
    push_context,
    set_context,
)
from scriptlaunch.framework.logging.timing import TimingResult, log_step, timed_block

__all__ = [
    # Configuration
    "configure_logging",
    "is_configured",
    # Context
    "get_logger",
    "set_context",
    "clear_context",
    "get_context",
    "bind_context",
    "push_context",
    "LogContext",
    "add_context_processor",
    # Timing
    "log_step",
    "timed_block",
    "TimingResult",
]
