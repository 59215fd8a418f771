"""
scriptlaunch framework - catalog-driven command dispatch.

This module provides:
- The command catalog model and its file loader
- Entry point registration and resolution
- Argument vector construction
- Request lifecycle scoping around each step
- The dispatcher and usage listing
- The explicitly owned runtime
"""

from scriptlaunch.framework.arguments import build_arguments, skip_count
from scriptlaunch.framework.catalog import RUN_ARBITRARY, Catalog, Command, Step
from scriptlaunch.framework.dispatcher import EXIT_FAILURE, EXIT_SUCCESS, CommandDispatcher
from scriptlaunch.framework.help import render_usage
from scriptlaunch.framework.lifecycle import (
    RequestHandle,
    RequestLifecycle,
    RequestListener,
    ScopedRequestLifecycle,
    run_in_request,
)
from scriptlaunch.framework.loader import load_catalog, parse_catalog
from scriptlaunch.framework.registry import (
    EntryPointRegistry,
    EntryPointResolver,
    clear_registry,
    get_entry_point,
    invoke_entry_point,
    list_entry_points,
    register_entry_point,
)
from scriptlaunch.framework.runtime import LauncherRuntime

__all__ = [
    # Catalog
    "Catalog",
    "Command",
    "Step",
    "RUN_ARBITRARY",
    "load_catalog",
    "parse_catalog",
    # Arguments
    "build_arguments",
    "skip_count",
    # Registry
    "EntryPointRegistry",
    "EntryPointResolver",
    "register_entry_point",
    "get_entry_point",
    "list_entry_points",
    "clear_registry",
    "invoke_entry_point",
    # Lifecycle
    "RequestHandle",
    "RequestLifecycle",
    "RequestListener",
    "ScopedRequestLifecycle",
    "run_in_request",
    # Dispatch
    "CommandDispatcher",
    "EXIT_SUCCESS",
    "EXIT_FAILURE",
    "render_usage",
    # Runtime
    "LauncherRuntime",
]
