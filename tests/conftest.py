"""
Shared pytest fixtures and configuration for scriptlaunch tests.

This module provides:
- Registry / settings / log-context cleanup for test isolation
- A recording request lifecycle
- In-memory consoles for stdout/stderr assertions
- A dispatcher factory wired to all of the above
"""

import sys
from collections.abc import Callable, Generator
from pathlib import Path

import pytest

# Ensure scriptlaunch package is importable
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
sys.path.insert(0, str(Path(__file__).parent.parent))

from scriptlaunch.core.settings import clear_settings_cache
from scriptlaunch.framework.catalog import Catalog, Command, Step
from scriptlaunch.framework.dispatcher import CommandDispatcher
from scriptlaunch.framework.logging import clear_context
from scriptlaunch.framework.registry import EntryPointRegistry, EntryPointResolver, clear_registry
from tests._support import CapturedConsole, RecordingLifecycle


# =============================================================================
# Test Markers Configuration
# =============================================================================


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Auto-mark tests based on their location."""
    for item in items:
        test_path = Path(item.path).relative_to(Path(__file__).parent)

        if "cli" in test_path.parts:
            item.add_marker(pytest.mark.integration)

        markers = {mark.name for mark in item.iter_markers()}
        if not markers.intersection({"unit", "integration"}):
            item.add_marker(pytest.mark.unit)


# =============================================================================
# Isolation Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def clean_global_state() -> Generator[None, None, None]:
    """Clear the global registry, cached settings and log context around each test."""
    clear_registry()
    clear_settings_cache()
    clear_context()
    yield
    clear_registry()
    clear_settings_cache()
    clear_context()


# =============================================================================
# Dispatcher Fixtures
# =============================================================================


@pytest.fixture
def registry() -> EntryPointRegistry:
    """An isolated registry that ignores installed distributions."""
    return EntryPointRegistry(group=None)


@pytest.fixture
def lifecycle() -> RecordingLifecycle:
    return RecordingLifecycle()


@pytest.fixture
def out() -> CapturedConsole:
    return CapturedConsole()


@pytest.fixture
def err() -> CapturedConsole:
    return CapturedConsole()


@pytest.fixture
def make_dispatcher(
    registry: EntryPointRegistry,
    lifecycle: RecordingLifecycle,
    out: CapturedConsole,
    err: CapturedConsole,
) -> Callable[..., CommandDispatcher]:
    """Build a dispatcher over the given commands with recording collaborators."""

    def _make(*commands: Command, source: str = "launcher.yaml") -> CommandDispatcher:
        return CommandDispatcher(
            Catalog.from_commands(commands, source=source),
            lifecycle,
            EntryPointResolver(registry),
            program_name="scriptlaunch",
            out=out.console,
            err=err.console,
        )

    return _make


@pytest.fixture
def hello_command() -> Command:
    """``hello`` -> greeter with a fixed language argument."""
    return Command(
        name="hello",
        description="Greet someone",
        steps=(Step("greeter", extra_arguments=("--lang=en",)),),
    )
