"""Tests for the logging context, timing helpers and configuration."""

import logging

import pytest
import structlog
from structlog.testing import capture_logs

from scriptlaunch.framework.logging import (
    LogContext,
    add_context_processor,
    bind_context,
    clear_context,
    configure_logging,
    get_context,
    is_configured,
    log_step,
    push_context,
    set_context,
    timed_block,
)


class TestLogContext:
    def test_to_dict_skips_none(self):
        assert LogContext(command="hello", step_index=1).to_dict() == {"command": "hello", "step_index": 1}

    def test_merge_ignores_none_values(self):
        merged = LogContext(command="hello").merge(command=None, entry_point="greeter")
        assert merged.command == "hello"
        assert merged.entry_point == "greeter"


class TestContextFunctions:
    def test_set_replaces_context(self):
        set_context(execution_id="e1", command="hello")
        set_context(command="other")
        assert get_context().execution_id is None
        assert get_context().command == "other"

    def test_bind_merges(self):
        set_context(execution_id="e1")
        bind_context(request_id="r1")
        assert get_context().to_dict() == {"execution_id": "e1", "request_id": "r1"}

    def test_push_and_restore(self):
        set_context(command="hello")
        token = push_context(step_index=2, entry_point="greeter")
        assert get_context().step_index == 2
        token.restore()
        assert get_context().step_index is None
        assert get_context().command == "hello"

    def test_clear(self):
        set_context(command="hello")
        clear_context()
        assert get_context().to_dict() == {}

    def test_processor_adds_context_without_overwriting(self):
        set_context(command="hello", step_index=1)
        event = add_context_processor(None, "info", {"event": "x", "command": "explicit"})
        assert event == {"event": "x", "command": "explicit", "step_index": 1}


class TestTiming:
    def test_timed_block_measures_duration(self):
        with timed_block("catalog.parse") as timer:
            pass
        assert timer.ended_at is not None
        assert timer.duration_ms >= 0
        assert timer.step == "catalog.parse"

    def test_log_step_emits_start_and_end(self):
        with capture_logs() as logs:
            with log_step("dispatch", steps=2):
                pass
        events = [entry["event"] for entry in logs]
        assert events == ["dispatch.start", "dispatch.end"]
        assert logs[1]["steps"] == 2
        assert "duration_ms" in logs[1]

    def test_log_step_logs_error_and_reraises(self):
        with capture_logs() as logs:
            with pytest.raises(ValueError):
                with log_step("dispatch", log_start=False):
                    raise ValueError("bad")
        assert [entry["event"] for entry in logs] == ["dispatch.error"]
        assert logs[0]["error_type"] == "ValueError"
        assert logs[0]["status"] == "error"

    def test_log_step_restores_span(self):
        with log_step("outer", log_start=False):
            outer_span = get_context().span_id
            with log_step("inner", log_start=False):
                assert get_context().parent_span_id == outer_span
        assert get_context().span_id is None


class TestConfigureLogging:
    @pytest.fixture(autouse=True)
    def reset_structlog(self):
        yield
        structlog.reset_defaults()

    def test_configures_level(self):
        configure_logging(level="DEBUG", format="json", force=True)
        assert is_configured()
        assert logging.getLogger("scriptlaunch").level == logging.DEBUG

    def test_env_fallback(self, monkeypatch):
        monkeypatch.setenv("SCRIPTLAUNCH_LOG_LEVEL", "error")
        configure_logging(force=True)
        assert logging.getLogger("scriptlaunch").level == logging.ERROR

    def test_json_output_goes_to_stderr(self, capsys):
        configure_logging(level="INFO", format="json", force=True)
        set_context(command="hello")
        structlog.get_logger("scriptlaunch.test").info("catalog.loaded", commands=3)
        captured = capsys.readouterr()
        assert captured.out == ""
        assert '"event": "catalog.loaded"' in captured.err
        assert '"command": "hello"' in captured.err
