"""
Logging context management using contextvars.

The dispatcher pushes the active command, step and request identifiers
into a ``LogContext``; a structlog processor copies them onto every log
entry so entry-point code never has to pass them around.
"""

import uuid
from contextvars import ContextVar
from dataclasses import asdict, dataclass
from typing import Any

import structlog


def _generate_span_id() -> str:
    """Generate a short span ID (8 hex chars)."""
    return uuid.uuid4().hex[:8]


@dataclass
class LogContext:
    """
    Execution context attached to all log entries.

    Core identifiers:
        execution_id: Unique id of one launcher invocation
        command: Requested command name

    Step context:
        step_index: Position of the running step within the command
        entry_point: Entry point name of the running step
        request_id: Id of the open request scope

    Tracing (for nested timing blocks):
        span_id: Current span identifier
        parent_span_id: Parent span for nested operations
    """

    execution_id: str | None = None
    command: str | None = None

    step_index: int | None = None
    entry_point: str | None = None
    request_id: str | None = None

    span_id: str | None = None
    parent_span_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict."""
        return {k: v for k, v in asdict(self).items() if v is not None}

    def merge(self, **kwargs) -> "LogContext":
        """Create new context with merged values."""
        current = asdict(self)
        current.update({k: v for k, v in kwargs.items() if v is not None})
        return LogContext(**current)


_log_context: ContextVar[LogContext] = ContextVar("log_context")  # noqa: B039


def get_context() -> LogContext:
    """Get the current log context."""
    return _log_context.get(LogContext())


def set_context(
    execution_id: str | None = None,
    command: str | None = None,
    step_index: int | None = None,
    entry_point: str | None = None,
    request_id: str | None = None,
) -> LogContext:
    """
    Set the current log context.

    This replaces the current context. Use bind_context() to add to existing.
    """
    ctx = LogContext(
        execution_id=execution_id,
        command=command,
        step_index=step_index,
        entry_point=entry_point,
        request_id=request_id,
    )
    _log_context.set(ctx)
    return ctx


def bind_context(**kwargs) -> LogContext:
    """Merge values into the current context and return it."""
    updated = get_context().merge(**kwargs)
    _log_context.set(updated)
    return updated


def clear_context() -> None:
    """Clear the current context (reset to empty)."""
    _log_context.set(LogContext())


class _ContextToken:
    """Token for restoring context after a scoped operation."""

    def __init__(self, token):
        self._token = token

    def restore(self):
        """Restore the previous context."""
        _log_context.reset(self._token)


def push_context(**kwargs) -> _ContextToken:
    """
    Push new context values, returning a token to restore later.

    Usage:
        token = push_context(step_index=1, entry_point="greeter")
        try:
            run_step()
        finally:
            token.restore()
    """
    updated = get_context().merge(**kwargs)
    token = _log_context.set(updated)
    return _ContextToken(token)


def add_context_processor(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Structlog processor that adds the execution context to every entry."""
    for key, value in get_context().to_dict().items():
        if key not in event_dict:
            event_dict[key] = value
    return event_dict


def get_logger(name: str | None = None) -> Any:
    """Get a structured logger (typically ``get_logger(__name__)``)."""
    return structlog.get_logger(name)
