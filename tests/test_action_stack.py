"""Tests for ActionStack."""

import logging

import pytest

from app_plugin_manager.action_stack import ActionStack, create_action
from app_plugin_manager.errors import ActionExecutionError


def _recorder(log, name, fail=False):
    def step(*params):
        if fail:
            raise OSError(f"{name} failed")
        log.append((name, params))

    return step


class TestActionStack:
    def test_runs_forward_steps_in_push_order(self):
        log = []
        stack = ActionStack()
        for i in range(3):
            stack.push(create_action(_recorder(log, f"do{i}"), [i], _recorder(log, f"undo{i}"), [i]))

        stack.process("android", "/project")

        assert log == [("do0", (0,)), ("do1", (1,)), ("do2", (2,))]
        assert len(stack.completed) == 3

    def test_failure_reverts_completed_steps_in_reverse_order(self):
        log = []
        stack = ActionStack()
        stack.push(create_action(_recorder(log, "do1"), [], _recorder(log, "undo1"), []))
        stack.push(create_action(_recorder(log, "do2"), [], _recorder(log, "undo2"), []))
        stack.push(create_action(_recorder(log, "do3", fail=True), [], _recorder(log, "undo3"), []))
        stack.push(create_action(_recorder(log, "do4"), [], _recorder(log, "undo4"), []))

        with pytest.raises(ActionExecutionError) as exc_info:
            stack.process("android", "/project")

        assert [name for name, _ in log] == ["do1", "do2", "undo2", "undo1"]
        assert exc_info.value.index == 2
        assert isinstance(exc_info.value.__cause__, OSError)
        assert "do3 failed" in str(exc_info.value)

    def test_first_step_failure_reverts_nothing(self):
        log = []
        stack = ActionStack()
        stack.push(create_action(_recorder(log, "do1", fail=True), [], _recorder(log, "undo1"), []))

        with pytest.raises(ActionExecutionError):
            stack.process("android", "/project")

        assert log == []

    def test_failing_reverter_is_logged_and_rollback_continues(self, caplog):
        log = []
        stack = ActionStack()
        stack.push(create_action(_recorder(log, "do1"), [], _recorder(log, "undo1"), []))
        stack.push(create_action(_recorder(log, "do2"), [], _recorder(log, "undo2", fail=True), []))
        stack.push(create_action(_recorder(log, "do3", fail=True), [], _recorder(log, "undo3"), []))

        with caplog.at_level(logging.WARNING), pytest.raises(ActionExecutionError) as exc_info:
            stack.process("android", "/project")

        assert [name for name, _ in log] == ["do1", "do2", "undo1"]
        assert "1 reversion action(s) also failed" in str(exc_info.value)
        assert "Error during reversion of action" in caplog.text

    def test_stack_is_single_use(self):
        stack = ActionStack()
        stack.process("android", "/project")

        with pytest.raises(RuntimeError):
            stack.process("android", "/project")
        with pytest.raises(RuntimeError):
            stack.push(create_action(print, [], print, []))
