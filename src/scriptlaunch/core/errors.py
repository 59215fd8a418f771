"""
Structured error types for the launcher.

Every failure the launcher can report is a ``LauncherError`` subclass that
carries a category, an optional chained cause and structured context for
logging. The dispatcher turns configuration errors into a printed message
and a non-zero status; lifecycle errors propagate to the process boundary.

Manifesto:
    - **Typed hierarchy:** configuration, lifecycle and execution failures
      are different things and are handled at different layers
    - **Error chaining:** the original exception is kept as ``cause``
    - **Rich context:** errors carry command / entry point metadata

Architecture:
    ::

        LauncherError
        ├── ConfigError                (CONFIG - fatal to the invocation)
        │   ├── CatalogLoadError       (catalog source unreadable/invalid)
        │   ├── CatalogError           (duplicate or malformed commands)
        │   ├── CommandNotFoundError
        │   ├── EntryPointNotFoundError
        │   └── MissingEntryPointNameError
        ├── LifecycleError             (LIFECYCLE - unrecoverable)
        │   └── RuntimeStartError
        └── EntryPointFailure          (EXECUTION - step signalled failure)

Tags:
    scriptlaunch, errors, exception-hierarchy, error-context

Doc-Types:
    api-reference
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Standard error categories for classification and reporting."""

    CONFIG = "CONFIG"  # Unknown command, bad entry point, bad invocation
    CATALOG = "CATALOG"  # Catalog source could not be loaded
    LIFECYCLE = "LIFECYCLE"  # Runtime / request scope failures
    EXECUTION = "EXECUTION"  # An entry point signalled failure
    INTERNAL = "INTERNAL"  # Bugs, unexpected state


@dataclass
class ErrorContext:
    """Structured metadata attached to an error."""

    command: str | None = None
    entry_point: str | None = None
    step_index: int | None = None
    catalog_source: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Return non-empty fields as a flat dict."""
        result: dict[str, Any] = {}
        for key in ("command", "entry_point", "step_index", "catalog_source"):
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class LauncherError(Exception):
    """
    Base exception for all launcher errors.

    Subclasses set ``default_category``; callers may override it per
    instance. ``cause`` is chained as ``__cause__`` so tracebacks show the
    original failure.

    Examples:
        >>> error = LauncherError("Something went wrong")
        >>> error.category
        <ErrorCategory.INTERNAL: 'INTERNAL'>
        >>> error.with_context(command="hello").context.command
        'hello'
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: ErrorContext | None = None,
        cause: BaseException | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> LauncherError:
        """
        Add context to this error (fluent API).

        Usage:
            raise CommandNotFoundError(name).with_context(catalog_source=path)
        """
        for key, value in kwargs.items():
            if key != "metadata" and hasattr(self.context, key):
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging."""
        result: dict[str, Any] = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# CONFIGURATION ERRORS
# =============================================================================


class ConfigError(LauncherError):
    """
    Configuration error.

    Always fatal to the current invocation and never retried; the catalog
    or the command line must be fixed.
    """

    default_category = ErrorCategory.CONFIG


class CatalogError(ConfigError):
    """The catalog contents are inconsistent (e.g. duplicate command names)."""


class CatalogLoadError(ConfigError):
    """The catalog source could not be read or parsed."""

    default_category = ErrorCategory.CATALOG

    def __init__(self, path: str, reason: str, *, cause: BaseException | None = None):
        self.path = path
        self.reason = reason
        super().__init__(f"Unable to load the launcher catalog: {path}: {reason}", cause=cause)


class CommandNotFoundError(ConfigError):
    """No command in the catalog matches the requested name."""

    def __init__(self, name: str):
        self.command_name = name
        super().__init__(f"Command not found: {name}")


class EntryPointNotFoundError(ConfigError):
    """An entry point name could not be resolved to a usable callable."""

    def __init__(self, name: str, reason: str | None = None, *, cause: BaseException | None = None):
        self.entry_point_name = name
        self.reason = reason
        message = f"Invalid entry point: {name}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message, cause=cause)


class MissingEntryPointNameError(ConfigError):
    """The run-arbitrary command was invoked without an entry point name."""

    def __init__(self, command: str):
        self.command_name = command
        super().__init__("Missing entry point name")


# =============================================================================
# LIFECYCLE ERRORS
# =============================================================================


class LifecycleError(LauncherError):
    """
    The runtime could not open or close a request scope.

    Not recoverable by the dispatcher; propagated to the process boundary.
    """

    default_category = ErrorCategory.LIFECYCLE


class RuntimeStartError(LifecycleError):
    """The launcher runtime failed to start."""


# =============================================================================
# EXECUTION ERRORS
# =============================================================================


class EntryPointFailure(LauncherError):
    """An entry point signalled failure without raising an exception."""

    default_category = ErrorCategory.EXECUTION


def categorize_error(error: BaseException) -> ErrorCategory:
    """Return the category of *error*, ``EXECUTION`` for foreign exceptions."""
    if isinstance(error, LauncherError):
        return error.category
    return ErrorCategory.EXECUTION
