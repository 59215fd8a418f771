"""Tests for the launcher runtime."""

import pytest

from scriptlaunch.core.errors import CatalogLoadError, LifecycleError, RuntimeStartError
from scriptlaunch.core.settings import LauncherSettings
from scriptlaunch.framework.catalog import Command, Step
from scriptlaunch.framework.dispatcher import CommandDispatcher
from scriptlaunch.framework.lifecycle import ScopedRequestLifecycle
from scriptlaunch.framework.runtime import LauncherRuntime
from tests._support import CapturedConsole, RecordingLifecycle


class StartStopLifecycle(RecordingLifecycle):
    """Lifecycle with optional start/stop hooks."""

    def __init__(self, fail_on_start: Exception | None = None) -> None:
        super().__init__()
        self.fail_on_start = fail_on_start
        self.started = 0
        self.stopped = 0

    def start(self) -> None:
        self.started += 1
        if self.fail_on_start is not None:
            raise self.fail_on_start

    def stop(self) -> None:
        self.stopped += 1


@pytest.fixture
def settings(tmp_path) -> LauncherSettings:
    config = tmp_path / "config"
    config.mkdir()
    (config / "launcher.yaml").write_text(
        "commands:\n"
        "  - name: hello\n"
        "    description: From file\n"
        "    steps:\n"
        "      - entry_point: greeter\n"
        "  - name: report\n"
        "    description: Nightly report\n",
        encoding="utf-8",
    )
    return LauncherSettings(home_dir=tmp_path)


class TestRuntimeLifecycle:
    def test_default_lifecycle_created_on_start(self, settings):
        with LauncherRuntime(settings) as runtime:
            assert runtime.is_running
            assert isinstance(runtime.request_lifecycle, ScopedRequestLifecycle)
        assert not runtime.is_running

    def test_request_lifecycle_requires_running_runtime(self, settings):
        runtime = LauncherRuntime(settings)
        with pytest.raises(LifecycleError, match="not running"):
            _ = runtime.request_lifecycle

    def test_start_and_stop_hooks(self, settings):
        lifecycle = StartStopLifecycle()
        runtime = LauncherRuntime(settings, lifecycle=lifecycle)
        runtime.start()
        runtime.start()
        runtime.stop()
        assert lifecycle.started == 1
        assert lifecycle.stopped == 1

    def test_start_failure_tears_down_and_raises(self, settings):
        lifecycle = StartStopLifecycle(fail_on_start=ConnectionError("database offline"))
        runtime = LauncherRuntime(settings, lifecycle=lifecycle)

        with pytest.raises(RuntimeStartError, match="Failure during runtime init: database offline"):
            runtime.start()
        assert lifecycle.stopped == 1
        assert not runtime.is_running


class TestCatalogComposition:
    def test_loads_default_catalog_path(self, settings):
        with LauncherRuntime(settings) as runtime:
            catalog = runtime.load_catalog()
        assert runtime.catalog_path == settings.home_dir / "config" / "launcher.yaml"
        assert catalog.lookup("report").description == "Nightly report"
        assert catalog.source == "launcher.yaml"

    def test_registered_commands_win(self, settings):
        registered = Command("HELLO", "Registered", steps=(Step("other"),))
        with LauncherRuntime(settings, commands=[registered]) as runtime:
            catalog = runtime.load_catalog()
        assert catalog.lookup("hello") is registered
        assert [c.name for c in catalog] == ["HELLO", "report"]

    def test_register_command_after_construction(self, settings):
        runtime = LauncherRuntime(settings)
        runtime.register_command(Command("extra", "Added later"))
        with runtime:
            assert "extra" in runtime.load_catalog()

    def test_missing_catalog(self, tmp_path):
        with LauncherRuntime(LauncherSettings(home_dir=tmp_path / "nowhere")) as runtime:
            with pytest.raises(CatalogLoadError):
                runtime.load_catalog()


class TestDispatcherFactory:
    def test_dispatcher_uses_runtime_services(self, settings, registry):
        calls = []
        registry.register("greeter", calls.append)
        lifecycle = RecordingLifecycle()
        out, err = CapturedConsole(), CapturedConsole()

        with LauncherRuntime(settings, lifecycle=lifecycle, registry=registry) as runtime:
            dispatcher = runtime.dispatcher(runtime.load_catalog(), out=out.console, err=err.console)
            assert isinstance(dispatcher, CommandDispatcher)
            assert dispatcher.dispatch(["hello", "x"]) == 0

        assert calls == [["x"]]
        assert lifecycle.is_balanced
        assert lifecycle.begins == 1

    def test_program_name_from_settings(self, settings):
        out = CapturedConsole()
        settings = settings.model_copy(update={"program_name": "dsrun"})
        with LauncherRuntime(settings) as runtime:
            runtime.dispatcher(runtime.load_catalog(), out=out.console).display_usage()
        assert out.text.startswith("Usage: dsrun [command-name] {parameters}")
