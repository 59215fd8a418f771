"""
Result envelope for explicit success/failure handling.

Entry points report their outcome as ``Ok`` or ``Err`` instead of relying
on exceptions unwinding through the dispatcher. The dispatcher checks the
returned value explicitly and forwards the error of an ``Err`` to the
request lifecycle as the failure cause.

Examples:
    >>> from scriptlaunch.core.result import Ok, Err, Result
    >>> def parse_port(text: str) -> Result[int]:
    ...     if not text.isdigit():
    ...         return Err(ValueError(f"not a port: {text}"))
    ...     return Ok(int(text))
    >>> parse_port("8080").unwrap()
    8080
    >>> parse_port("http").is_err()
    True

Tags:
    result-pattern, error-handling, scriptlaunch

Doc-Types:
    api-reference
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar

from scriptlaunch.core.errors import LauncherError

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Successful result containing a value."""

    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        """Get the value. Safe for Ok."""
        return self.value

    def unwrap_or(self, default: T) -> T:
        """Get value or default (always returns value for Ok)."""
        return self.value

    def map(self, f: Callable[[T], U]) -> Result[U]:
        """Transform the value if Ok."""
        return Ok(f(self.value))

    def to_dict(self) -> dict[str, Any]:
        return {"ok": True, "value": self.value}

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err(Generic[T]):
    """
    Failed result carrying the underlying cause.

    The error is any exception instance; it is never raised by the
    launcher itself, only reported and passed to the request lifecycle.
    """

    error: BaseException

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> T:
        """Raise the error. Use only when you're sure it's Ok."""
        raise self.error

    def unwrap_or(self, default: T) -> T:
        return default

    def map(self, f: Callable[[T], U]) -> Result[U]:
        """No-op for Err."""
        return Err(self.error)

    def to_dict(self) -> dict[str, Any]:
        if isinstance(self.error, LauncherError):
            return {"ok": False, "error": self.error.to_dict()}
        return {
            "ok": False,
            "error": {
                "error_type": type(self.error).__name__,
                "message": str(self.error),
            },
        }

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


Result = Ok[T] | Err[T]


def try_result(f: Callable[[], T]) -> Result[T]:
    """
    Execute a zero-argument function and wrap its outcome.

    Returns ``Ok`` with the return value, or ``Err`` with the raised
    exception. Only ``Exception`` subclasses are captured.
    """
    try:
        return Ok(f())
    except Exception as e:
        return Err(e)
