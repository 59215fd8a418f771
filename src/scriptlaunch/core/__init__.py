"""scriptlaunch core -- errors, results and settings.

Layer 1 of the launcher: nothing here knows about catalogs or dispatch.

    errors.py      Structured error hierarchy (LauncherError, ConfigError, ...)
    result.py      Result[T] envelope (Ok / Err / try_result)
    settings.py    Environment-driven LauncherSettings
"""

from scriptlaunch.core.errors import (
    CatalogError,
    CatalogLoadError,
    CommandNotFoundError,
    ConfigError,
    EntryPointFailure,
    EntryPointNotFoundError,
    ErrorCategory,
    ErrorContext,
    LauncherError,
    LifecycleError,
    MissingEntryPointNameError,
    RuntimeStartError,
)
from scriptlaunch.core.result import Err, Ok, Result, try_result

__all__ = [
    # Errors
    "LauncherError",
    "ErrorCategory",
    "ErrorContext",
    "ConfigError",
    "CatalogError",
    "CatalogLoadError",
    "CommandNotFoundError",
    "EntryPointNotFoundError",
    "MissingEntryPointNameError",
    "LifecycleError",
    "RuntimeStartError",
    "EntryPointFailure",
    # Result
    "Ok",
    "Err",
    "Result",
    "try_result",
]
