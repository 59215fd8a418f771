"""
Launcher runtime.

The runtime owns the process-wide services the dispatcher needs: settings
(used only to find the catalog), the request lifecycle and the entry point
registry. It is created and started by the process entry, handed to the
dispatcher explicitly, and stopped when the invocation ends.

Usage:
    with LauncherRuntime(get_settings()) as runtime:
        dispatcher = runtime.dispatcher(runtime.load_catalog())
        status = dispatcher.dispatch(sys.argv[1:])

Manifesto:
    No ambient globals: whoever starts the runtime owns it and stops it.

Tags:
    scriptlaunch, framework, runtime, kernel, lifecycle

Doc-Types:
    api-reference
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from rich.console import Console

from scriptlaunch.core.errors import LifecycleError, RuntimeStartError
from scriptlaunch.core.settings import LauncherSettings
from scriptlaunch.framework.catalog import Catalog, Command
from scriptlaunch.framework.dispatcher import CommandDispatcher
from scriptlaunch.framework.lifecycle import RequestLifecycle, ScopedRequestLifecycle
from scriptlaunch.framework.loader import load_catalog
from scriptlaunch.framework.logging import get_logger
from scriptlaunch.framework.registry import EntryPointRegistry, EntryPointResolver, default_registry

log = get_logger(__name__)


class LauncherRuntime:
    """Explicitly owned runtime context for one launcher process."""

    def __init__(
        self,
        settings: LauncherSettings,
        lifecycle: RequestLifecycle | None = None,
        registry: EntryPointRegistry | None = None,
        commands: Iterable[Command] = (),
    ) -> None:
        self.settings = settings
        self.registry = registry if registry is not None else default_registry()
        self._lifecycle = lifecycle
        self._commands: list[Command] = list(commands)
        self._running = False

    @property
    def is_running(self) -> bool:
        return self._running

    def start(self) -> LauncherRuntime:
        """Start the runtime; a no-op if it is already running."""
        if self._running:
            return self
        try:
            if self._lifecycle is None:
                self._lifecycle = ScopedRequestLifecycle()
            start_hook = getattr(self._lifecycle, "start", None)
            if callable(start_hook):
                start_hook()
            self._running = True
            log.debug("runtime.started", home_dir=str(self.settings.home_dir))
        except Exception as e:
            self.stop()
            message = f"Failure during runtime init: {e}"
            log.error("runtime.start_failed", error=str(e))
            raise RuntimeStartError(message, cause=e) from e
        return self

    def stop(self) -> None:
        """Stop the runtime. Safe to call more than once."""
        was_running, self._running = self._running, False
        stop_hook = getattr(self._lifecycle, "stop", None)
        if callable(stop_hook):
            stop_hook()
        if was_running:
            log.debug("runtime.stopped")

    def __enter__(self) -> LauncherRuntime:
        return self.start()

    def __exit__(self, *exc_info) -> None:
        self.stop()

    @property
    def request_lifecycle(self) -> RequestLifecycle:
        """The lifecycle used to scope step invocations."""
        if not self._running or self._lifecycle is None:
            raise LifecycleError("Could not get the request lifecycle: runtime is not running")
        return self._lifecycle

    def register_command(self, command: Command) -> None:
        """Contribute a command ahead of the ones in the catalog file."""
        self._commands.append(command)

    @property
    def catalog_path(self) -> Path:
        return self.settings.resolved_catalog_path()

    def load_catalog(self) -> Catalog:
        """
        Load the catalog file and compose it with registered commands.

        Registered commands come first; on a name clash the first one wins.

        Raises:
            CatalogLoadError: If the catalog file cannot be loaded
        """
        path = self.catalog_path
        file_catalog = load_catalog(path)
        catalog, shadowed = Catalog.compose(self._commands, file_catalog.commands, source=file_catalog.source)
        for command in shadowed:
            log.warning("catalog.duplicate_command", command=command.name, path=str(path))
        return catalog

    def dispatcher(
        self,
        catalog: Catalog,
        *,
        out: Console | None = None,
        err: Console | None = None,
    ) -> CommandDispatcher:
        """Build a dispatcher bound to this runtime's lifecycle and registry."""
        return CommandDispatcher(
            catalog,
            self.request_lifecycle,
            EntryPointResolver(self.registry),
            program_name=self.settings.program_name,
            out=out,
            err=err,
        )
