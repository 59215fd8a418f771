"""
Command dispatcher.

Looks up the requested command and runs its steps in catalog order. Each
step is resolved, given its argument vector and invoked inside its own
request scope. The first failing step aborts the pipeline.

    SelectCommand
        └─ for each step:
             ResolveEntryPoint → BuildArgs → BeginRequest → Invoke → EndRequest
    Done

Outcome is a single status: 0 when every step succeeded, 1 otherwise.
Configuration problems and step failures are printed to the error stream;
lifecycle errors are not handled here and propagate to the caller.
"""

from __future__ import annotations

from collections.abc import Sequence
from uuid import uuid4

from rich.console import Console

from scriptlaunch.core.errors import (
    CommandNotFoundError,
    EntryPointNotFoundError,
    MissingEntryPointNameError,
    categorize_error,
)
from scriptlaunch.core.result import Result
from scriptlaunch.framework.arguments import build_arguments
from scriptlaunch.framework.catalog import Catalog, Command, Step, is_run_arbitrary
from scriptlaunch.framework.help import render_usage
from scriptlaunch.framework.lifecycle import RequestLifecycle, run_in_request
from scriptlaunch.framework.logging import clear_context, get_logger, log_step, push_context, set_context
from scriptlaunch.framework.registry import EntryPointResolver, invoke_entry_point

log = get_logger(__name__)

EXIT_SUCCESS = 0
EXIT_FAILURE = 1


class CommandDispatcher:
    """
    Dispatcher for one launcher invocation.

    Synchronous: steps run one after another in the calling thread, and
    the dispatcher owns each request handle only for the duration of its
    step.
    """

    def __init__(
        self,
        catalog: Catalog,
        lifecycle: RequestLifecycle,
        resolver: EntryPointResolver | None = None,
        *,
        program_name: str = "scriptlaunch",
        out: Console | None = None,
        err: Console | None = None,
    ) -> None:
        self.catalog = catalog
        self.lifecycle = lifecycle
        self.resolver = resolver or EntryPointResolver()
        self.program_name = program_name
        self.out = out or Console()
        self.err = err or Console(stderr=True)

    def dispatch(self, args: Sequence[str]) -> int:
        """
        Run the command named by ``args[0]`` with the remaining arguments.

        Args:
            args: Raw invocation arguments; the first one is the command name

        Returns:
            0 on full pipeline success, 1 on any failure

        Raises:
            LifecycleError: If a request scope cannot be opened
        """
        set_context(execution_id=str(uuid4()), command=args[0] if args else None)
        try:
            if not args:
                self._error("You must provide at least one command argument")
                self.display_usage()
                return EXIT_FAILURE

            command = self.catalog.lookup(args[0])
            if command is None:
                error = CommandNotFoundError(args[0]).with_context(catalog_source=self.catalog.source)
                log.warning("dispatch.command_not_found", **error.to_dict())
                self._error(error.message)
                self.display_usage()
                return EXIT_FAILURE

            return self._run_command(command, list(args))
        finally:
            clear_context()

    def display_usage(self) -> None:
        """Print the sorted command listing to the output stream."""
        self.out.print(
            render_usage(self.catalog, self.program_name),
            markup=False,
            highlight=False,
            soft_wrap=True,
        )

    # ── Private helpers ──────────────────────────────────────────────────

    def _run_command(self, command: Command, args: list[str]) -> int:
        run_arbitrary = is_run_arbitrary(command.name)
        if run_arbitrary and len(args) < 2:
            error = MissingEntryPointNameError(command.name).with_context(
                command=command.name, catalog_source=self.catalog.source
            )
            log.error("dispatch.missing_entry_point_name", **error.to_dict())
            self._error(f"Error in {self.catalog.source}: {error.message}")
            return EXIT_FAILURE

        with log_step("dispatch", steps=len(command.steps)):
            for index, step in enumerate(command.steps, start=1):
                entry_name = args[1] if run_arbitrary else step.entry_point
                token = push_context(step_index=index, entry_point=entry_name)
                try:
                    if not self._run_step(command, step, entry_name, args):
                        log.warning("dispatch.aborted", failed_step=index, remaining=len(command.steps) - index)
                        return EXIT_FAILURE
                finally:
                    token.restore()

        return EXIT_SUCCESS

    def _run_step(self, command: Command, step: Step, entry_name: str, args: list[str]) -> bool:
        try:
            entry = self.resolver.resolve(entry_name)
        except EntryPointNotFoundError as e:
            e.with_context(command=command.name, entry_point=entry_name, catalog_source=self.catalog.source)
            log.error("step.entry_point_invalid", **e.to_dict())
            self._error(f"Error in {self.catalog.source}: {e.message}")
            return False

        argv = build_arguments(args, command.name, step)
        log.debug("step.invoke", argc=len(argv))

        outcome: Result[None] = run_in_request(self.lifecycle, lambda: invoke_entry_point(entry, argv))
        if outcome.is_err():
            cause = outcome.error
            log.error(
                "step.failed",
                error_type=type(cause).__name__,
                category=categorize_error(cause).value,
                exc_info=cause,
            )
            self._error(f"Exception: {cause}")
            return False

        log.debug("step.completed")
        return True

    def _error(self, message: str) -> None:
        self.err.print(message, markup=False, highlight=False, soft_wrap=True)
