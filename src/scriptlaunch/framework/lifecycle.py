"""Request lifecycle around step invocations.

Every step runs inside its own request scope: the runtime is told when the
step begins and, on every exit path, when it ends and whether it failed.
Listeners use the end notification to commit or discard scoped work.

Architecture:

    .. code-block:: text

        run_in_request(lifecycle, fn):

        ┌─────────────────────────────────────────────┐
        │ 1. handle = lifecycle.begin()               │
        │    (failure -> LifecycleError, propagates)  │
        │ 2. outcome = fn()                           │
        │ 3a. Ok  -> lifecycle.end(handle, None)      │
        │ 3b. Err -> lifecycle.end(handle, error)     │
        │ 3c. raised -> lifecycle.end(handle, exc)    │
        │              then re-raise                  │
        └─────────────────────────────────────────────┘

Tags:
    scriptlaunch, framework, lifecycle, request-scope, transactions

Doc-Types:
    api-reference
"""

from __future__ import annotations

import uuid
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Protocol, TypeVar, runtime_checkable

from scriptlaunch.core.errors import LifecycleError
from scriptlaunch.core.result import Result
from scriptlaunch.framework.logging import bind_context, get_logger

log = get_logger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class RequestHandle:
    """Opaque scope token for one step invocation."""

    request_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    started_at: datetime = field(default_factory=lambda: datetime.now(UTC))


@runtime_checkable
class RequestLifecycle(Protocol):
    """Contract the runtime exposes for request scoping."""

    def begin(self) -> RequestHandle: ...

    def end(self, handle: RequestHandle, cause: BaseException | None = None) -> None: ...


@runtime_checkable
class RequestListener(Protocol):
    """Receives request notifications, e.g. to commit or roll back work."""

    def request_started(self, handle: RequestHandle) -> None: ...

    def request_ended(self, handle: RequestHandle, cause: BaseException | None) -> None: ...


class ScopedRequestLifecycle:
    """
    Default lifecycle: one active request at a time, listener fan-out.

    Listeners are notified in registration order on start and in reverse
    order on end, so the first listener opens first and closes last.
    """

    def __init__(self, listeners: list[RequestListener] | None = None) -> None:
        self._listeners: list[RequestListener] = list(listeners or [])
        self._active: RequestHandle | None = None

    @property
    def active(self) -> RequestHandle | None:
        return self._active

    def add_listener(self, listener: RequestListener) -> None:
        self._listeners.append(listener)

    def begin(self) -> RequestHandle:
        if self._active is not None:
            raise LifecycleError(
                f"Request {self._active.request_id} is still open; requests cannot overlap"
            )
        handle = RequestHandle()
        self._active = handle
        log.debug("request.start", request_id=handle.request_id)
        try:
            for listener in self._listeners:
                listener.request_started(handle)
        except Exception as e:
            self._active = None
            raise LifecycleError(f"Request listener failed to start: {e}", cause=e) from e
        return handle

    def end(self, handle: RequestHandle, cause: BaseException | None = None) -> None:
        if self._active is None or handle.request_id != self._active.request_id:
            raise LifecycleError(f"Request {handle.request_id} is not the active request")
        try:
            for listener in reversed(self._listeners):
                listener.request_ended(handle, cause)
        finally:
            self._active = None
            log.debug(
                "request.end",
                request_id=handle.request_id,
                outcome="failed" if cause is not None else "ok",
            )


def run_in_request(lifecycle: RequestLifecycle, fn: Callable[[], Result[T]]) -> Result[T]:
    """
    Run *fn* inside a request scope and report its outcome to *lifecycle*.

    ``end`` is called exactly once for every successful ``begin``, with the
    ``Err`` error, the raised exception, or ``None``.
    """
    try:
        handle = lifecycle.begin()
    except LifecycleError:
        raise
    except Exception as e:
        raise LifecycleError(f"Could not begin request: {e}", cause=e) from e

    bind_context(request_id=handle.request_id)
    try:
        outcome = fn()
    except BaseException as e:
        lifecycle.end(handle, e)
        raise

    lifecycle.end(handle, outcome.error if outcome.is_err() else None)
    return outcome
