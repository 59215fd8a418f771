"""Tests for scriptlaunch.core.errors module."""

import pytest

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
    categorize_error,
)


class TestErrorContext:
    """Test ErrorContext dataclass."""

    def test_create_empty_context(self):
        ctx = ErrorContext()
        assert ctx.command is None
        assert ctx.entry_point is None
        assert ctx.metadata == {}
        assert ctx.to_dict() == {}

    def test_to_dict_skips_none_and_flattens_metadata(self):
        ctx = ErrorContext(command="hello", step_index=2, metadata={"path": "launcher.yaml"})
        assert ctx.to_dict() == {"command": "hello", "step_index": 2, "path": "launcher.yaml"}


class TestLauncherError:
    """Test the base exception."""

    def test_defaults_to_internal_category(self):
        error = LauncherError("boom")
        assert error.category == ErrorCategory.INTERNAL
        assert error.message == "boom"
        assert str(error) == "boom"

    def test_category_can_be_overridden(self):
        error = LauncherError("boom", category=ErrorCategory.EXECUTION)
        assert error.category == ErrorCategory.EXECUTION

    def test_cause_is_chained(self):
        cause = OSError("disk full")
        error = LauncherError("write failed", cause=cause)
        assert error.cause is cause
        assert error.__cause__ is cause

    def test_with_context_sets_known_fields_and_metadata(self):
        error = LauncherError("boom").with_context(command="hello", attempt=3)
        assert error.context.command == "hello"
        assert error.context.metadata == {"attempt": 3}

    def test_to_dict(self):
        error = EntryPointFailure("step said no", cause=ValueError("x")).with_context(entry_point="greeter")
        assert error.to_dict() == {
            "error_type": "EntryPointFailure",
            "message": "step said no",
            "category": "EXECUTION",
            "context": {"entry_point": "greeter"},
            "cause": "x",
        }

    def test_repr(self):
        assert repr(ConfigError("bad")) == "ConfigError('bad', category=CONFIG)"


class TestConfigErrors:
    """Configuration errors and their messages."""

    def test_command_not_found_message(self):
        error = CommandNotFoundError("unknown")
        assert error.message == "Command not found: unknown"
        assert error.command_name == "unknown"
        assert isinstance(error, ConfigError)

    def test_entry_point_not_found_with_reason(self):
        error = EntryPointNotFoundError("pkg.mod:main", "No module named 'pkg'")
        assert error.message == "Invalid entry point: pkg.mod:main (No module named 'pkg')"
        assert error.entry_point_name == "pkg.mod:main"

    def test_entry_point_not_found_without_reason(self):
        assert EntryPointNotFoundError("x").message == "Invalid entry point: x"

    def test_missing_entry_point_name(self):
        error = MissingEntryPointNameError("run-arbitrary")
        assert error.message == "Missing entry point name"
        assert error.command_name == "run-arbitrary"

    def test_catalog_load_error_keeps_path_and_reason(self):
        error = CatalogLoadError("/etc/launcher.yaml", "No such file or directory")
        assert error.path == "/etc/launcher.yaml"
        assert error.reason == "No such file or directory"
        assert error.category == ErrorCategory.CATALOG
        assert "Unable to load the launcher catalog" in error.message

    def test_catalog_error_is_config(self):
        assert CatalogError("dup").category == ErrorCategory.CONFIG


class TestCategorizeError:
    @pytest.mark.parametrize(
        ("error", "expected"),
        [
            (CommandNotFoundError("x"), ErrorCategory.CONFIG),
            (RuntimeStartError("no db"), ErrorCategory.LIFECYCLE),
            (LifecycleError("closed"), ErrorCategory.LIFECYCLE),
            (EntryPointFailure("no"), ErrorCategory.EXECUTION),
            (ValueError("foreign"), ErrorCategory.EXECUTION),
        ],
    )
    def test_categories(self, error, expected):
        assert categorize_error(error) == expected
