"""Tests for the timer command group."""
# pylint: disable=redefined-outer-name

import pytest
from typer.testing import CliRunner

from worklog_cli.main import app
from worklog_cli.models import TaskStatus
from worklog_cli.services.config_service import get_task_store

from helpers import strip_ansi

runner = CliRunner()


@pytest.fixture(autouse=True)
def _config(tmp_config):
    return tmp_config


def invoke(*args: str):
    return runner.invoke(app, list(args))


def add(title: str) -> str:
    assert invoke("tasks", "add", title).exit_code == 0
    return get_task_store().tasks[-1].id


class TestStart:
    def test_start(self):
        task_id = add("Focus")
        result = invoke("timer", "start", task_id)
        assert result.exit_code == 0
        assert "Timer started: Focus" in strip_ansi(result.output)
        running = get_task_store().get_task_by_id(task_id)
        assert running.status == TaskStatus.IN_PROGRESS
        assert running.open_log() is not None
        assert running.actual_start_date is not None

    def test_switching_pauses_previous(self):
        first = add("First")
        second = add("Second")
        invoke("timer", "start", first)
        result = invoke("timer", "start", second)
        assert "Paused: First" in strip_ansi(result.output)

        store = get_task_store()
        assert store.get_task_by_id(first).status == TaskStatus.PAUSED
        assert store.get_task_by_id(second).status == TaskStatus.IN_PROGRESS
        assert len(store.open_time_logs()) == 1

    def test_restart_same_task(self):
        task_id = add("Again")
        invoke("timer", "start", task_id)
        result = invoke("timer", "start", task_id)
        assert "Paused" not in strip_ansi(result.output)
        logs = get_task_store().get_task_by_id(task_id).time_logs
        assert len(logs) == 2
        assert logs[0].end_time is not None
        assert logs[1].end_time is None

    def test_unknown_task(self):
        result = invoke("timer", "start", "missing")
        assert result.exit_code == 5


class TestStop:
    def test_stop_running(self):
        task_id = add("Focus")
        invoke("timer", "start", task_id)
        result = invoke("timer", "stop")
        assert result.exit_code == 0
        assert "Timer stopped: Focus" in strip_ansi(result.output)
        stopped = get_task_store().get_task_by_id(task_id)
        assert stopped.status == TaskStatus.PAUSED
        assert stopped.open_log() is None

    def test_stop_when_idle(self):
        result = invoke("timer", "stop")
        assert result.exit_code == 0
        assert "No timer is running" in strip_ansi(result.output)

    def test_stop_specific_idle_task(self):
        task_id = add("Idle")
        result = invoke("timer", "stop", task_id)
        assert result.exit_code == 0
        assert "No timer is running for 'Idle'" in strip_ansi(result.output)
        assert get_task_store().get_task_by_id(task_id).status == TaskStatus.TODO


class TestStatus:
    def test_idle(self):
        assert "No timer is running" in strip_ansi(invoke("timer", "status").output)

    def test_running(self):
        task_id = add("Deep work")
        invoke("timer", "start", task_id)
        out = strip_ansi(invoke("timer", "status").output)
        assert "Running: Deep work" in out
        assert "Current session:" in out
        assert "Total before this session: 0h 0m 0s" in out
