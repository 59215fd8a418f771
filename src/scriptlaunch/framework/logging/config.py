"""
Logging configuration.

Provides a single entry point for configuring structured logging.

Configuration is read from arguments or environment variables:
- SCRIPTLAUNCH_LOG_LEVEL: DEBUG | INFO | WARNING | ERROR (default: WARNING)
- SCRIPTLAUNCH_LOG_FORMAT: json | console (default: console)

Logs always go to stderr; stdout is reserved for the command listing and
for whatever the launched entry points print.

Usage:
    from scriptlaunch.framework.logging import configure_logging
    configure_logging(level="DEBUG", format="json")
"""

import logging
import os
import sys
from typing import Literal

import structlog
from structlog.types import Processor

from scriptlaunch.framework.logging.context import add_context_processor

_configured = False


def configure_logging(
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] | None = None,
    format: Literal["json", "console"] | None = None,
    force: bool = False,
) -> None:
    """
    Configure structured logging for the launcher.

    Should be called once at process start. Subsequent calls are no-ops
    unless force=True.

    Args:
        level: Log level (overrides SCRIPTLAUNCH_LOG_LEVEL)
        format: Output format (overrides SCRIPTLAUNCH_LOG_FORMAT)
        force: Reconfigure even if already configured
    """
    global _configured

    if _configured and not force:
        return

    log_level = (level or os.environ.get("SCRIPTLAUNCH_LOG_LEVEL", "WARNING")).upper()
    log_format = (format or os.environ.get("SCRIPTLAUNCH_LOG_FORMAT", "console")).lower()

    processors: list[Processor] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        add_context_processor,
        structlog.processors.format_exc_info,
        structlog.processors.StackInfoRenderer(),
    ]

    if log_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(
            structlog.dev.ConsoleRenderer(
                colors=False,
                exception_formatter=structlog.dev.plain_traceback,
            )
        )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, log_level),
        force=True,
    )
    logging.getLogger("scriptlaunch").setLevel(getattr(logging, log_level))

    _configured = True


def is_configured() -> bool:
    """Check if logging has been configured."""
    return _configured
