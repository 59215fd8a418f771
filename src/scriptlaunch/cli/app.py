"""
Typer application for the scriptlaunch command line.

    scriptlaunch [OPTIONS] COMMAND [PARAMETERS]...

Options are only recognised before the command name; everything after it
is passed to the command's steps untouched.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

import typer
from rich.console import Console

from scriptlaunch.core.errors import CatalogLoadError
from scriptlaunch.core.settings import get_settings
from scriptlaunch.framework.logging import configure_logging
from scriptlaunch.framework.runtime import LauncherRuntime

console = Console()
err_console = Console(stderr=True)

app = typer.Typer(
    name="scriptlaunch",
    help="Run catalog-defined command pipelines.",
    add_completion=False,
    rich_markup_mode="rich",
)


class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


class LogFormat(str, Enum):
    CONSOLE = "console"
    JSON = "json"


# ── Version callback ─────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        from importlib.metadata import PackageNotFoundError
        from importlib.metadata import version as pkg_version

        from scriptlaunch import __version__

        try:
            v = pkg_version("scriptlaunch")
        except PackageNotFoundError:
            v = __version__
        typer.echo(f"scriptlaunch {v}")
        raise typer.Exit()


# ── Launcher ─────────────────────────────────────────────────────────────


@app.command(
    context_settings={
        "allow_extra_args": True,
        "ignore_unknown_options": True,
        "allow_interspersed_args": False,
    }
)
def launch(
    args: list[str] | None = typer.Argument(  # noqa: UP007
        None,
        metavar="COMMAND [PARAMETERS]...",
        help="Command name followed by its parameters.",
        show_default=False,
    ),
    catalog: Path | None = typer.Option(None, "--catalog", "-c", help="Catalog file (YAML, JSON or XML)."),
    home: Path | None = typer.Option(None, "--home", help="Installation directory holding config/launcher.yaml."),
    list_commands: bool = typer.Option(False, "--list", "-l", help="List the available commands and exit."),
    log_level: LogLevel | None = typer.Option(None, "--log-level", case_sensitive=False),  # noqa: UP007
    log_format: LogFormat | None = typer.Option(None, "--log-format", case_sensitive=False),  # noqa: UP007
    version: bool | None = typer.Option(  # noqa: UP007
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """Run the steps of COMMAND as defined in the launcher catalog."""
    overrides: dict[str, object] = {}
    if home is not None:
        overrides["home_dir"] = home
    if catalog is not None:
        overrides["catalog_path"] = catalog
    if log_level is not None:
        overrides["log_level"] = log_level.value
    if log_format is not None:
        overrides["log_format"] = log_format.value
    settings = get_settings().model_copy(update=overrides)

    configure_logging(level=settings.log_level, format=settings.log_format, force=True)

    with LauncherRuntime(settings) as runtime:
        try:
            command_catalog = runtime.load_catalog()
        except CatalogLoadError as e:
            for line in (f"Unable to load the launcher catalog: {e.path}", e.reason):
                err_console.print(line, markup=False, highlight=False, soft_wrap=True)
            raise typer.Exit(code=1) from None

        dispatcher = runtime.dispatcher(command_catalog, out=console, err=err_console)
        if list_commands:
            dispatcher.display_usage()
            raise typer.Exit(code=0)

        status = dispatcher.dispatch(args or [])

    raise typer.Exit(code=status)


def run() -> None:
    """Console-script entry point."""
    app()
